# orgpanel/routes/auth_routes.py
"""Authentication routes"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from orgpanel.core.database import get_db
from orgpanel.middleware.auth_middleware import get_session_user_id
from orgpanel.schemas.common import render_result
from orgpanel.schemas.requests import LoginRequest
from orgpanel.services.actions import AdminActions

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login")
def login(req: LoginRequest, db: Session = Depends(get_db)):
    """Sign in with email and password; returns a bearer token"""
    return render_result(AdminActions.sign_in(db, req.email, req.password))


@router.get("/me")
def me(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_session_user_id)
):
    """Profile of the signed-in user"""
    return render_result(AdminActions.current_user(db, user_id))
