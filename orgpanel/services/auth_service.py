# orgpanel/services/auth_service.py
"""Authentication service - password hashing, sign-in tokens and the credential identity store"""
from datetime import timedelta
from typing import Dict, Any, Optional, Union
from uuid import UUID

import bcrypt
import jwt
from sqlalchemy.orm import Session

from orgpanel.core.config import (
    BCRYPT_ROUNDS,
    JWT_ALGORITHM,
    JWT_EXPIRATION_HOURS,
    JWT_SECRET,
)
from orgpanel.core.logger import get_logger
from orgpanel.models import Account, CREDENTIAL_PROVIDER, User, UserRole
from orgpanel.utils.datetime_utils import get_utc_now
from orgpanel.utils.exceptions import EmailTakenError, NotFoundError, UnauthorizedError
from orgpanel.utils.validators import parse_uuid, validate_email, validate_name, validate_password

logger = get_logger(__name__)


class AuthService:
    """Service for password hashing and token-based sessions"""

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash password using bcrypt.

        Args:
            password: Plain text password (length already validated)

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """
        Verify password against hash.

        Returns:
            True if password matches, False otherwise (including malformed hashes)
        """
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except ValueError as e:
            logger.error(f"Password verification error: {e}")
            return False

    @staticmethod
    def create_jwt_token(user_id: Union[str, UUID], email: str, role: str) -> str:
        """
        Create JWT token for an authenticated user.

        The role claim is informational; every request re-reads the role from the database.
        """
        now = get_utc_now()
        payload = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
            "iat": now
        }

        return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

    @staticmethod
    def verify_jwt_token(token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode JWT token.

        Returns:
            Token payload dict if valid, None otherwise
        """
        try:
            return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            return None

    @staticmethod
    def login(db: Session, email: str, password: str) -> Dict[str, Any]:
        """
        Sign in with email and password.

        Returns:
            Dict with token and user profile

        Raises:
            UnauthorizedError: If the credentials do not match
        """
        email = (email or "").strip().lower()
        if not IdentityStore.verify_credential(db, email, password):
            logger.warning(f"Failed sign-in attempt for {email}")
            raise UnauthorizedError("Invalid email or password")

        user = db.query(User).filter(User.email == email).first()
        token = AuthService.create_jwt_token(user.id, user.email, UserRole(user.role).value)

        logger.info(f"✓ User signed in: {email}")

        return {
            "token": token,
            "user": {
                "id": str(user.id),
                "name": user.name,
                "email": user.email,
                "role": UserRole(user.role).value,
                "company_id": str(user.company_id) if user.company_id else None,
            }
        }


class IdentityStore:
    """
    Credential-backed user records.

    Methods flush but never commit; the caller's transaction decides.
    """

    @staticmethod
    def create_credential_user(db: Session, email: str, password: str, name: str) -> User:
        """
        Create a user with a credential account.

        The user starts as a MEMBER with no tenant; callers promote it afterwards.

        Raises:
            ValidationError: If email, name or password are malformed
            EmailTakenError: If the email is already registered
        """
        email = validate_email(email)
        name = validate_name(name)
        validate_password(password)

        if db.query(User.id).filter(User.email == email).first():
            raise EmailTakenError()

        user = User(name=name, email=email, role=UserRole.MEMBER)
        user.account = Account(
            provider_id=CREDENTIAL_PROVIDER,
            password_hash=AuthService.hash_password(password),
        )
        db.add(user)
        db.flush()
        return user

    @staticmethod
    def verify_credential(db: Session, email: str, password: str) -> bool:
        """Check a password against the stored credential for `email`."""
        account = (
            db.query(Account)
            .join(User, Account.user_id == User.id)
            .filter(User.email == (email or "").strip().lower())
            .filter(Account.provider_id == CREDENTIAL_PROVIDER)
            .first()
        )
        if not account or not password:
            return False
        return AuthService.verify_password(password, account.password_hash)

    @staticmethod
    def set_credential_password(db: Session, user_id: Union[str, UUID], password_hash: str) -> None:
        """Replace the stored hash for a user's credential account."""
        account = (
            db.query(Account)
            .filter(Account.user_id == parse_uuid(user_id, "User"))
            .filter(Account.provider_id == CREDENTIAL_PROVIDER)
            .first()
        )
        if not account:
            raise NotFoundError("Credential account not found")
        account.password_hash = password_hash
        db.flush()
