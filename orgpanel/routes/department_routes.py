# orgpanel/routes/department_routes.py
"""Department management routes"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from orgpanel.core.database import get_db
from orgpanel.middleware.auth_middleware import get_session_user_id
from orgpanel.schemas.common import render_result
from orgpanel.schemas.requests import CreateDepartmentRequest, UpdateDepartmentRequest
from orgpanel.services.actions import AdminActions

router = APIRouter(prefix="/api/departments", tags=["Departments"])


@router.get("")
def list_departments(
    company_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Departments visible to the caller"""
    return render_result(AdminActions.list_departments(db, user_id, company_id))


@router.post("")
def create_department(
    req: CreateDepartmentRequest,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    return render_result(AdminActions.create_department(db, user_id, req.name, req.company_id))


@router.put("/{department_id}")
def update_department(
    department_id: str,
    req: UpdateDepartmentRequest,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    return render_result(AdminActions.update_department(db, user_id, department_id, req.name))


@router.delete("/{department_id}")
def delete_department(
    department_id: str,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Delete a department; its users are kept without a department"""
    return render_result(AdminActions.delete_department(db, user_id, department_id))
