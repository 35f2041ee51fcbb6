# orgpanel/utils/exceptions.py
"""Custom exceptions for OrgPanel"""
from typing import Any, Dict, Optional


class OrgPanelException(Exception):
    """Base exception for OrgPanel"""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(OrgPanelException):
    """Validation error"""
    def __init__(self, message: str, code: str = "VALIDATION_ERROR", details: Optional[dict] = None):
        super().__init__(message, code, 400, details)


class NotFoundError(OrgPanelException):
    """Resource not found"""
    def __init__(self, message: str, code: str = "NOT_FOUND"):
        super().__init__(message, code, 404)


class UnauthorizedError(OrgPanelException):
    """No authenticated session"""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "UNAUTHORIZED", 401)


class ForbiddenError(OrgPanelException):
    """Authenticated but outside the actor's role or tenant scope"""
    def __init__(self, message: str = "Insufficient permissions", code: str = "FORBIDDEN"):
        super().__init__(message, code, 403)


class ConflictError(OrgPanelException):
    """Resource conflict (e.g., duplicate)"""
    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message, code, 409)


class LifecycleError(OrgPanelException):
    """Company lifecycle transition not allowed from the current state"""
    def __init__(self, message: str, code: str, details: Optional[dict] = None):
        super().__init__(message, code, 409, details)


# ==================== SPECIFIC CONDITIONS ====================

class AdminHasNoCompanyError(ForbiddenError):
    def __init__(self):
        super().__init__("Admin must be assigned to a company", "ADMIN_HAS_NO_COMPANY")


class SelfDeleteForbiddenError(ForbiddenError):
    def __init__(self):
        super().__init__("You cannot delete your own account", "SELF_DELETE_FORBIDDEN")


class OwnCompanyDeleteForbiddenError(ForbiddenError):
    def __init__(self):
        super().__init__(
            "You cannot delete the company your own account belongs to",
            "OWN_COMPANY_DELETE_FORBIDDEN"
        )


class CompanyNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__("Company not found", "COMPANY_NOT_FOUND")


class InvalidSlugError(ValidationError):
    def __init__(self):
        super().__init__(
            "Slug must be lowercase letters, numbers, and hyphens only",
            "INVALID_SLUG"
        )


class SlugTakenError(ConflictError):
    def __init__(self):
        super().__init__("Company with this slug already exists", "SLUG_TAKEN")


class EmailTakenError(ConflictError):
    def __init__(self):
        super().__init__("User with this email already exists", "EMAIL_TAKEN")


class DuplicateDepartmentError(ConflictError):
    def __init__(self):
        super().__init__(
            "Department with this name already exists in this company",
            "DUPLICATE_NAME"
        )


class InvalidDepartmentError(ValidationError):
    def __init__(self):
        super().__init__("Invalid department selection", "INVALID_DEPARTMENT")


class PasswordTooShortError(ValidationError):
    def __init__(self, min_length: int):
        super().__init__(
            f"Password must be at least {min_length} characters",
            "PASSWORD_TOO_SHORT",
            {"min_length": min_length}
        )


class PasswordMismatchError(ValidationError):
    def __init__(self):
        super().__init__("New passwords do not match", "PASSWORD_MISMATCH")


class WrongCurrentPasswordError(ValidationError):
    def __init__(self):
        super().__init__("Current password is incorrect", "WRONG_CURRENT_PASSWORD")
