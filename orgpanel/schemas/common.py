# orgpanel/schemas/common.py
from pydantic import BaseModel
from typing import Any, Optional, Generic, TypeVar

from fastapi.responses import JSONResponse

from orgpanel.utils.datetime_utils import get_utc_now, to_iso_string

T = TypeVar('T')

class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[dict[str, Any]] = None

class APIResponse(BaseModel, Generic[T]):
    """Standard API response envelope."""
    success: bool
    data: Optional[T] = None
    error: Optional[ErrorDetail] = None
    meta: dict[str, Any] = {}

def envelope(
    success: bool,
    data: Any = None,
    error: Optional[ErrorDetail] = None,
    status_code: int = 200
) -> JSONResponse:
    """Render the standard envelope as a JSON response."""
    body = APIResponse[Any](
        success=success,
        data=data,
        error=error,
        meta={"timestamp": to_iso_string(get_utc_now())},
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

def render_result(result) -> JSONResponse:
    """Render an action result (see services.actions.ActionResult) with its HTTP status."""
    error = None
    if not result.success:
        error = ErrorDetail(code=result.code, message=result.message, details=result.details or None)
    return envelope(result.success, data=result.data, error=error, status_code=result.status_code)
