# orgpanel/scripts/init_db.py
"""
Database initialization script - Create all tables

Usage:
    python -m orgpanel.scripts.init_db
"""

import sys

from orgpanel.core.database import init_db, test_connection
from orgpanel.core.logger import get_logger

logger = get_logger(__name__)


def main() -> int:
    """Main entry point"""
    logger.info("Testing database connection...")
    if not test_connection():
        logger.error("❌ Cannot connect to database")
        return 1

    if not init_db():
        return 1

    logger.info("✅ Database initialized")
    return 0


if __name__ == "__main__":
    sys.exit(main())
