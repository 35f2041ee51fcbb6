# orgpanel/middleware/auth_middleware.py
"""Session resolution from bearer tokens"""
from fastapi import Request
from typing import Optional

from orgpanel.services.auth_service import AuthService
from orgpanel.core.logger import get_logger

logger = get_logger(__name__)


def get_token_from_header(request: Request) -> Optional[str]:
    """
    Extract JWT token from Authorization header.

    Expected format: "Bearer <token>". Anything else counts as no token.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        logger.warning("Malformed authorization header")
        return None

    return parts[1]


async def get_session_user_id(request: Request) -> Optional[str]:
    """
    FastAPI dependency resolving the caller's user id, or None when unauthenticated.

    Absence is not an error here; the action layer reports it as Unauthorized
    in the same envelope as every other failure.
    """
    token = get_token_from_header(request)
    if not token:
        return None

    payload = AuthService.verify_jwt_token(token)
    if not payload:
        return None

    return payload.get("sub")
