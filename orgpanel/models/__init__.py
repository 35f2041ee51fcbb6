# orgpanel/models/__init__.py
from .base import Base, TimestampMixin
from .company import Company, CompanyStatus
from .department import Department
from .user import User, UserRole
from .account import Account, CREDENTIAL_PROVIDER
from .audit_log import AuditLog

__all__ = [
    "Base",
    "TimestampMixin",
    "Company",
    "CompanyStatus",
    "Department",
    "User",
    "UserRole",
    "Account",
    "CREDENTIAL_PROVIDER",
    "AuditLog",
]
