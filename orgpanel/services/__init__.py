from .auth_service import AuthService, IdentityStore
from .policy_service import Action, Actor, Decision, PolicyService, Target
from .company_service import CompanyService
from .department_service import DepartmentService
from .user_service import UserService
from .actions import ActionResult, AdminActions

__all__ = [
    "AuthService",
    "IdentityStore",
    "Action",
    "Actor",
    "Decision",
    "PolicyService",
    "Target",
    "CompanyService",
    "DepartmentService",
    "UserService",
    "ActionResult",
    "AdminActions",
]
