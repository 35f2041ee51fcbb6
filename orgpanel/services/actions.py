# orgpanel/services/actions.py
"""
Administrative action handlers.

Each handler runs one service operation for the calling user and returns an
ActionResult instead of raising: expected failures keep their code and
message, anything unexpected is logged and reported as a generic failure.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from orgpanel.core.logger import get_logger
from orgpanel.services.auth_service import AuthService
from orgpanel.services.company_service import CompanyService
from orgpanel.services.department_service import DepartmentService
from orgpanel.services.user_service import UNSET, UserService
from orgpanel.utils.exceptions import OrgPanelException

logger = get_logger(__name__)

ActorId = Optional[Union[str, UUID]]


@dataclass
class ActionResult:
    success: bool
    data: Any = None
    code: Optional[str] = None
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    status_code: int = 200

    @classmethod
    def ok(cls, data: Any = None, status_code: int = 200) -> "ActionResult":
        return cls(success=True, data=data, status_code=status_code)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ) -> "ActionResult":
        return cls(success=False, code=code, message=message,
                   details=details or {}, status_code=status_code)

    @property
    def error(self) -> Optional[Dict[str, Any]]:
        if self.success:
            return None
        return {"code": self.code, "message": self.message, "details": self.details or None}


def run_action(name: str, operation: Callable[..., Any], *args, status_code: int = 200, **kwargs) -> ActionResult:
    """Run `operation` and fold its outcome into an ActionResult."""
    try:
        return ActionResult.ok(operation(*args, **kwargs), status_code=status_code)
    except OrgPanelException as e:
        logger.warning(f"{name} rejected - {e.code}: {e.message}")
        return ActionResult.fail(e.code, e.message, e.status_code, e.details)
    except Exception as e:
        logger.error(f"{name} failed: {e}", exc_info=True)
        return ActionResult.fail(
            "INTERNAL_ERROR",
            f"Failed to {name.replace('_', ' ')}",
            500
        )


class AdminActions:
    """Entry points used by the HTTP layer and operator scripts"""

    # ==================== AUTH ====================

    @staticmethod
    def sign_in(db: Session, email: str, password: str) -> ActionResult:
        return run_action("sign_in", AuthService.login, db, email, password)

    @staticmethod
    def current_user(db: Session, actor_id: ActorId) -> ActionResult:
        return run_action("load_current_user", UserService.get_current_user, db, actor_id)

    # ==================== COMPANIES ====================

    @staticmethod
    def create_company(db: Session, actor_id: ActorId, name: str, slug: Optional[str] = None) -> ActionResult:
        return run_action("create_company", CompanyService.create_company,
                          db, actor_id, name, slug, status_code=201)

    @staticmethod
    def update_company(
        db: Session,
        actor_id: ActorId,
        company_id: Union[str, UUID],
        name: str,
        slug: Optional[str] = None
    ) -> ActionResult:
        return run_action("update_company", CompanyService.update_company,
                          db, actor_id, company_id, name, slug)

    @staticmethod
    def archive_company(db: Session, actor_id: ActorId, company_id: Union[str, UUID]) -> ActionResult:
        return run_action("archive_company", CompanyService.archive_company, db, actor_id, company_id)

    @staticmethod
    def restore_company(db: Session, actor_id: ActorId, company_id: Union[str, UUID]) -> ActionResult:
        return run_action("restore_company", CompanyService.restore_company, db, actor_id, company_id)

    @staticmethod
    def delete_company(
        db: Session,
        actor_id: ActorId,
        company_id: Union[str, UUID],
        force: bool = False
    ) -> ActionResult:
        return run_action("delete_company", CompanyService.delete_company,
                          db, actor_id, company_id, force=force)

    @staticmethod
    def list_companies(db: Session, actor_id: ActorId) -> ActionResult:
        return run_action("list_companies", CompanyService.list_companies, db, actor_id)

    # ==================== DEPARTMENTS ====================

    @staticmethod
    def create_department(
        db: Session,
        actor_id: ActorId,
        name: str,
        company_id: Optional[Union[str, UUID]] = None
    ) -> ActionResult:
        return run_action("create_department", DepartmentService.create_department,
                          db, actor_id, name, company_id, status_code=201)

    @staticmethod
    def update_department(db: Session, actor_id: ActorId, department_id: Union[str, UUID], name: str) -> ActionResult:
        return run_action("update_department", DepartmentService.update_department,
                          db, actor_id, department_id, name)

    @staticmethod
    def delete_department(db: Session, actor_id: ActorId, department_id: Union[str, UUID]) -> ActionResult:
        return run_action("delete_department", DepartmentService.delete_department,
                          db, actor_id, department_id)

    @staticmethod
    def list_departments(
        db: Session,
        actor_id: ActorId,
        company_id: Optional[Union[str, UUID]] = None
    ) -> ActionResult:
        return run_action("list_departments", DepartmentService.list_departments,
                          db, actor_id, company_id)

    # ==================== USERS ====================

    @staticmethod
    def create_user(
        db: Session,
        actor_id: ActorId,
        name: str,
        email: str,
        password: str,
        role: str = "MEMBER",
        company_id: Optional[Union[str, UUID]] = None,
        department_id: Optional[Union[str, UUID]] = None
    ) -> ActionResult:
        return run_action("create_user", UserService.create_user,
                          db, actor_id, name, email, password, role, company_id, department_id,
                          status_code=201)

    @staticmethod
    def update_user(
        db: Session,
        actor_id: ActorId,
        user_id: Union[str, UUID],
        name: Optional[str] = None,
        role: Optional[str] = None,
        department_id: Any = UNSET
    ) -> ActionResult:
        return run_action("update_user", UserService.update_user,
                          db, actor_id, user_id, name, role, department_id)

    @staticmethod
    def delete_user(db: Session, actor_id: ActorId, user_id: Union[str, UUID]) -> ActionResult:
        return run_action("delete_user", UserService.delete_user, db, actor_id, user_id)

    @staticmethod
    def change_password(
        db: Session,
        actor_id: ActorId,
        user_id: Union[str, UUID],
        new_password: str,
        current_password: Optional[str] = None,
        confirm_password: Optional[str] = None
    ) -> ActionResult:
        return run_action("change_password", UserService.change_password,
                          db, actor_id, user_id, new_password, current_password, confirm_password)

    @staticmethod
    def list_users(db: Session, actor_id: ActorId) -> ActionResult:
        return run_action("list_users", UserService.list_users, db, actor_id)
