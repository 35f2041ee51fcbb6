# orgpanel/routes/user_routes.py
"""User management routes"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from orgpanel.core.database import get_db
from orgpanel.middleware.auth_middleware import get_session_user_id
from orgpanel.schemas.common import render_result
from orgpanel.schemas.requests import ChangePasswordRequest, CreateUserRequest, UpdateUserRequest
from orgpanel.services.actions import AdminActions
from orgpanel.services.user_service import UNSET

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("")
def list_users(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Users visible to the caller, newest first"""
    return render_result(AdminActions.list_users(db, user_id))


@router.post("")
def create_user(
    req: CreateUserRequest,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """
    Create a new user.
    Admins may only create ADMIN or MEMBER users, always in their own company.
    """
    return render_result(AdminActions.create_user(
        db, user_id,
        name=req.name,
        email=req.email,
        password=req.password,
        role=req.role.value,
        company_id=req.company_id,
        department_id=req.department_id,
    ))


@router.put("/{target_user_id}")
def update_user(
    target_user_id: str,
    req: UpdateUserRequest,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    department_id = req.department_id if "department_id" in req.model_fields_set else UNSET
    return render_result(AdminActions.update_user(
        db, user_id, target_user_id,
        name=req.name,
        role=req.role.value if req.role else None,
        department_id=department_id,
    ))


@router.delete("/{target_user_id}")
def delete_user(
    target_user_id: str,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    return render_result(AdminActions.delete_user(db, user_id, target_user_id))


@router.post("/{target_user_id}/password")
def change_password(
    target_user_id: str,
    req: ChangePasswordRequest,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Change a password; your own requires current_password"""
    return render_result(AdminActions.change_password(
        db, user_id, target_user_id,
        new_password=req.new_password,
        current_password=req.current_password,
        confirm_password=req.confirm_password,
    ))
