# orgpanel/routes/company_routes.py
"""Company management routes"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from orgpanel.core.database import get_db
from orgpanel.middleware.auth_middleware import get_session_user_id
from orgpanel.schemas.common import render_result
from orgpanel.schemas.requests import CreateCompanyRequest, UpdateCompanyRequest
from orgpanel.services.actions import AdminActions

router = APIRouter(prefix="/api/companies", tags=["Companies"])


@router.get("")
def list_companies(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Get list of all companies with their lifecycle state"""
    return render_result(AdminActions.list_companies(db, user_id))


@router.post("")
def create_company(
    req: CreateCompanyRequest,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Create a new company"""
    return render_result(AdminActions.create_company(db, user_id, req.name, req.slug))


@router.put("/{company_id}")
def update_company(
    company_id: str,
    req: UpdateCompanyRequest,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Rename a company and optionally change its slug"""
    return render_result(AdminActions.update_company(db, user_id, company_id, req.name, req.slug))


@router.post("/{company_id}/archive")
def archive_company(
    company_id: str,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Archive a company (30-day grace period before deletion)"""
    return render_result(AdminActions.archive_company(db, user_id, company_id))


@router.post("/{company_id}/restore")
def restore_company(
    company_id: str,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Restore an archived company"""
    return render_result(AdminActions.restore_company(db, user_id, company_id))


@router.delete("/{company_id}")
def delete_company(
    company_id: str,
    force: bool = Query(False, description="Delete immediately, skipping archive and grace period"),
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Permanently delete a company with its departments and users"""
    return render_result(AdminActions.delete_company(db, user_id, company_id, force=force))
