# orgpanel/scripts/purge_companies.py
"""
Permanently delete archived companies whose grace period has ended

Deletion cascades to each company's departments and users.

Usage:
    python -m orgpanel.scripts.purge_companies

    Or list what would be deleted without deleting:
    python -m orgpanel.scripts.purge_companies --dry-run
"""

import argparse
import sys

from orgpanel.core.database import SessionLocal, test_connection
from orgpanel.core.logger import get_logger
from orgpanel.services.company_service import CompanyService

logger = get_logger(__name__)


def main(argv=None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Purge companies past their deletion date")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the companies that would be deleted without deleting them"
    )
    args = parser.parse_args(argv)

    if not test_connection():
        logger.error("❌ Cannot connect to database")
        return 1

    db = SessionLocal()
    try:
        purged = CompanyService.purge_expired_companies(db, dry_run=args.dry_run)
    finally:
        db.close()

    verb = "would be deleted" if args.dry_run else "deleted"
    if not purged:
        print("No companies past their deletion date.")
    for entry in purged:
        print(f"  {entry['slug']} (scheduled {entry['deleted_at']}) {verb}")
    print(f"\n{len(purged)} company(ies) {verb}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
