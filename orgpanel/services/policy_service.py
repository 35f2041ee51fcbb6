# orgpanel/services/policy_service.py
"""
Tenant-scoped authorization.

Every administrative operation asks one question: may this actor perform this
action on this target? The answer depends on the actor's role, whether actor
and target share a company, and for user-targeting actions the target's role.
`PolicyService.evaluate` answers it without touching the database.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional
from uuid import UUID

from orgpanel.models import UserRole
from orgpanel.utils.exceptions import (
    AdminHasNoCompanyError,
    ForbiddenError,
    SelfDeleteForbiddenError,
)


class Action(str, Enum):
    """All administrative actions in the system."""
    # Company permissions
    COMPANY_CREATE = "company:create"
    COMPANY_MANAGE = "company:manage"
    COMPANY_LIST = "company:list"

    # Department permissions
    DEPARTMENT_CREATE = "department:create"
    DEPARTMENT_MANAGE = "department:manage"
    DEPARTMENT_LIST = "department:list"

    # User permissions
    USER_CREATE = "user:create"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"
    USER_LIST = "user:list"
    PASSWORD_CHANGE = "password:change"


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, as currently stored (never as claimed by a token)."""
    id: UUID
    role: UserRole
    company_id: Optional[UUID] = None

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(id=user.id, role=UserRole(user.role), company_id=user.company_id)


@dataclass(frozen=True)
class Target:
    """
    What the action is aimed at.

    company_id: tenant owning the target (department or user)
    user_id / role: the target user, for user-targeting actions
    requested_role: role the actor wants to assign (create/update user)
    """
    company_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    role: Optional[UserRole] = None
    requested_role: Optional[UserRole] = None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""
    code: str = ""

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str = "Insufficient permissions", code: str = "FORBIDDEN") -> "Decision":
        return cls(False, reason, code)

    def raise_if_denied(self) -> None:
        if self.allowed:
            return
        if self.code == "ADMIN_HAS_NO_COMPANY":
            raise AdminHasNoCompanyError()
        if self.code == "SELF_DELETE_FORBIDDEN":
            raise SelfDeleteForbiddenError()
        raise ForbiddenError(self.reason, self.code)


ALLOW = Decision.allow()
ADMIN_HAS_NO_COMPANY = Decision.deny("Admin must be assigned to a company", "ADMIN_HAS_NO_COMPANY")
SELF_DELETE = Decision.deny("You cannot delete your own account", "SELF_DELETE_FORBIDDEN")
FORBIDDEN = Decision.deny()

# Tenant-scoped actions an ADMIN cannot perform without a company assignment
_TENANT_SCOPED: FrozenSet[Action] = frozenset({
    Action.DEPARTMENT_CREATE,
    Action.DEPARTMENT_MANAGE,
    Action.DEPARTMENT_LIST,
    Action.USER_CREATE,
    Action.USER_UPDATE,
    Action.USER_DELETE,
    Action.USER_LIST,
    Action.PASSWORD_CHANGE,
})


class PolicyService:
    """Role and tenant based access control."""

    # Coarse gate: role -> actions it may attempt at all
    ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[Action]] = {
        UserRole.SUPER_USER: frozenset(Action),
        UserRole.ADMIN: frozenset({
            Action.DEPARTMENT_CREATE,
            Action.DEPARTMENT_MANAGE,
            Action.DEPARTMENT_LIST,
            Action.USER_CREATE,
            Action.USER_UPDATE,
            Action.USER_DELETE,
            Action.USER_LIST,
            Action.PASSWORD_CHANGE,
        }),
        # Own-password changes are allowed before this gate is consulted
        UserRole.MEMBER: frozenset(),
    }

    # Specific messages for denials users run into through the settings screens
    DENIAL_MESSAGES: Dict[Action, str] = {
        Action.COMPANY_CREATE: "Only Super Users can create companies",
        Action.COMPANY_MANAGE: "Only Super Users can manage companies",
        Action.COMPANY_LIST: "Only Super Users can view companies",
    }

    @staticmethod
    def evaluate(actor: Actor, action: Action, target: Optional[Target] = None) -> Decision:
        """Decide whether `actor` may perform `action` on `target`."""
        target = target or Target()

        self_decision = PolicyService._self_rule(actor, action, target.user_id)
        if self_decision is not None:
            return self_decision

        if action not in PolicyService.ROLE_PERMISSIONS.get(actor.role, frozenset()):
            return Decision.deny(PolicyService.DENIAL_MESSAGES.get(action, FORBIDDEN.reason))

        if actor.role == UserRole.SUPER_USER:
            return ALLOW

        # ADMIN from here on
        if action == Action.USER_CREATE and target.requested_role == UserRole.SUPER_USER:
            return Decision.deny("Admins cannot create Super Users")

        if action in _TENANT_SCOPED and actor.company_id is None:
            return ADMIN_HAS_NO_COMPANY

        if action in (Action.DEPARTMENT_CREATE, Action.DEPARTMENT_LIST, Action.USER_CREATE, Action.USER_LIST):
            # Company is forced to the admin's own, so no target check applies
            return ALLOW

        if target.company_id != actor.company_id:
            return FORBIDDEN

        if action == Action.DEPARTMENT_MANAGE:
            return ALLOW

        if action == Action.USER_UPDATE:
            if target.role == UserRole.SUPER_USER:
                return FORBIDDEN
            if target.requested_role == UserRole.SUPER_USER:
                return Decision.deny("Admins cannot assign the Super User role")
            return ALLOW

        if action in (Action.USER_DELETE, Action.PASSWORD_CHANGE):
            return ALLOW if target.role == UserRole.MEMBER else FORBIDDEN

        return FORBIDDEN

    @staticmethod
    def _self_rule(actor: Actor, action: Action, target_user_id: Optional[UUID]) -> Optional[Decision]:
        # Nobody deletes themselves through the admin path, whatever their role
        if action == Action.USER_DELETE and target_user_id == actor.id:
            return SELF_DELETE
        # Own password is self-service for every role
        if action == Action.PASSWORD_CHANGE and target_user_id == actor.id:
            return ALLOW
        return None

    @staticmethod
    def check_role(actor: Actor, action: Action, target_user_id: Optional[UUID] = None) -> Decision:
        """
        Target-independent part of `evaluate`.

        Lets services reject a caller before loading the target, so that a
        denied caller learns nothing about whether the target exists.
        """
        self_decision = PolicyService._self_rule(actor, action, target_user_id)
        if self_decision is not None:
            return self_decision
        if action not in PolicyService.ROLE_PERMISSIONS.get(actor.role, frozenset()):
            return Decision.deny(PolicyService.DENIAL_MESSAGES.get(action, FORBIDDEN.reason))
        if (
            actor.role == UserRole.ADMIN
            and action in _TENANT_SCOPED
            and actor.company_id is None
        ):
            return ADMIN_HAS_NO_COMPANY
        return ALLOW

    @staticmethod
    def require_role(actor: Actor, action: Action, target_user_id: Optional[UUID] = None) -> Decision:
        decision = PolicyService.check_role(actor, action, target_user_id)
        decision.raise_if_denied()
        return decision

    @staticmethod
    def is_allowed(actor: Actor, action: Action, target: Optional[Target] = None) -> bool:
        """Check if actor may perform action."""
        return PolicyService.evaluate(actor, action, target).allowed

    @staticmethod
    def require(actor: Actor, action: Action, target: Optional[Target] = None) -> Decision:
        """Enforce a decision (raises the matching exception if denied)."""
        decision = PolicyService.evaluate(actor, action, target)
        decision.raise_if_denied()
        return decision
