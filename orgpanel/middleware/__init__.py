# orgpanel/middleware/__init__.py
from .auth_middleware import get_session_user_id
from .error_handler import register_error_handlers
from .logging import add_request_id_middleware

__all__ = [
    "get_session_user_id",
    "register_error_handlers",
    "add_request_id_middleware",
]
