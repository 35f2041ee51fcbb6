# orgpanel/schemas/requests.py
"""Request bodies for the administrative API"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from orgpanel.models import UserRole


class LoginRequest(BaseModel):
    """Sign-in request"""
    email: EmailStr
    password: str


class CreateCompanyRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=255, description="Company name")
    slug: Optional[str] = Field(None, description="URL-safe identifier; suggested from the name when omitted")


class UpdateCompanyRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    slug: Optional[str] = None


class CreateDepartmentRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    company_id: Optional[str] = Field(None, description="Required for Super Users, ignored for admins")


class UpdateDepartmentRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str
    role: UserRole = UserRole.MEMBER
    company_id: Optional[str] = None
    department_id: Optional[str] = None


class UpdateUserRequest(BaseModel):
    """Omit department_id to keep it, send null to clear it"""
    name: Optional[str] = None
    role: Optional[UserRole] = None
    department_id: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    """current_password is required only when changing your own password"""
    current_password: Optional[str] = None
    new_password: str
    confirm_password: Optional[str] = None
