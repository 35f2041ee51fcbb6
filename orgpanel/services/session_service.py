# orgpanel/services/session_service.py
"""Resolve the calling user for an administrative action"""
from typing import Optional, Tuple, Union
from uuid import UUID

from sqlalchemy.orm import Session

from orgpanel.models import User
from orgpanel.services.policy_service import Actor
from orgpanel.utils.exceptions import UnauthorizedError


def resolve_actor(db: Session, user_id: Optional[Union[str, UUID]]) -> Tuple[Actor, User]:
    """
    Load the caller's current role and tenant.

    Raises:
        UnauthorizedError: If there is no session or its user no longer exists
    """
    if not user_id:
        raise UnauthorizedError()
    try:
        user_uuid = user_id if isinstance(user_id, UUID) else UUID(str(user_id))
    except ValueError:
        raise UnauthorizedError()

    user = db.get(User, user_uuid)
    if not user:
        raise UnauthorizedError("User not found")
    return Actor.from_user(user), user
