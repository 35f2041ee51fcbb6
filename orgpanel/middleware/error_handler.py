# orgpanel/middleware/error_handler.py
"""Global error handling"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from orgpanel.core.logger import get_logger
from orgpanel.schemas.common import ErrorDetail, envelope
from orgpanel.utils.exceptions import OrgPanelException

logger = get_logger(__name__)


def register_error_handlers(app: FastAPI):
    """Register error handlers with FastAPI app"""

    @app.exception_handler(OrgPanelException)
    async def orgpanel_exception_handler(request: Request, exc: OrgPanelException):
        """Handle custom OrgPanel exceptions"""
        logger.warning(f"{exc.code}: {exc.message} ({request.url.path})")
        return envelope(
            False,
            error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details or None),
            status_code=exc.status_code,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies use the same envelope as service validation errors"""
        errors = [
            {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg")}
            for err in exc.errors()
        ]
        return envelope(
            False,
            error=ErrorDetail(code="VALIDATION_ERROR", message="Invalid request", details={"errors": errors}),
            status_code=422,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions"""
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        return envelope(
            False,
            error=ErrorDetail(code="INTERNAL_SERVER_ERROR", message="An unexpected error occurred"),
            status_code=500,
        )
