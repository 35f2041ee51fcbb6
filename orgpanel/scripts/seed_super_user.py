# orgpanel/scripts/seed_super_user.py
"""
Seed the Super User account

Reads SUPER_USER_EMAIL and SUPER_USER_PASSWORD (and optionally SUPER_USER_NAME)
from the environment. Does nothing if they are missing or the user already exists.

Usage:
    python -m orgpanel.scripts.seed_super_user
"""

import sys
from typing import Optional

from sqlalchemy.orm import Session

from orgpanel.core import config
from orgpanel.core.database import SessionLocal, init_db, transaction
from orgpanel.core.logger import get_logger
from orgpanel.models import User, UserRole
from orgpanel.services.auth_service import IdentityStore
from orgpanel.utils.exceptions import OrgPanelException

logger = get_logger(__name__)


def seed_super_user(
    db: Session,
    email: Optional[str] = None,
    password: Optional[str] = None,
    name: Optional[str] = None
) -> Optional[User]:
    """
    Create the Super User if it does not exist yet.

    Returns:
        The created user, or None when skipped
    """
    email = email or config.SUPER_USER_EMAIL
    password = password or config.SUPER_USER_PASSWORD
    name = name or config.SUPER_USER_NAME

    if not email or not password:
        logger.warning("⚠️  Super user credentials not found in environment variables; skipping")
        return None

    existing = db.query(User).filter(User.email == email.strip().lower()).first()
    if existing:
        logger.info(f"✅ Super user already exists: {existing.email}")
        return None

    with transaction(db):
        user = IdentityStore.create_credential_user(db, email, password, name)
        user.role = UserRole.SUPER_USER

    logger.info(f"✅ Super user created successfully: {user.email}")
    return user


def main() -> int:
    """Main entry point"""
    init_db()
    db = SessionLocal()
    try:
        seed_super_user(db)
        return 0
    except OrgPanelException as e:
        logger.error(f"❌ Error seeding super user: {e.message}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
