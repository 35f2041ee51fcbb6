# orgpanel/utils/validators.py
from typing import Optional, Union
from uuid import UUID

from orgpanel.core.config import PASSWORD_MIN_LENGTH
from orgpanel.utils.exceptions import (
    NotFoundError,
    PasswordMismatchError,
    PasswordTooShortError,
    ValidationError,
)

def parse_uuid(value: Union[str, UUID], resource: str = "Resource") -> UUID:
    """Parse an identifier; malformed ids cannot exist, so they read as not found."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        raise NotFoundError(f"{resource} not found")

def validate_email(email: str) -> str:
    """Validate email format."""
    email = (email or "").strip()
    if "@" not in email or "." not in email.split("@")[-1]:
        raise ValidationError(f"Invalid email: {email}")
    return email.lower()

def validate_name(name: str, label: str = "Name") -> str:
    """Names are trimmed and must keep at least 2 characters."""
    if not name or len(name.strip()) < 2:
        raise ValidationError(f"{label} must be at least 2 characters")
    if len(name.strip()) > 255:
        raise ValidationError(f"{label} must be at most 255 characters")
    return name.strip()

def validate_password(password: str, confirm_password: Optional[str] = None) -> str:
    """Enforce the minimum length and, when a confirmation is supplied, that both match."""
    if confirm_password is not None and password != confirm_password:
        raise PasswordMismatchError()
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        raise PasswordTooShortError(PASSWORD_MIN_LENGTH)
    # bcrypt only looks at the first 72 bytes
    if len(password.encode("utf-8")) > 72:
        raise ValidationError("Password must be at most 72 bytes")
    return password
