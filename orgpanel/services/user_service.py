# orgpanel/services/user_service.py
"""User service - handles account management within the tenant hierarchy"""
from typing import Dict, Any, Optional, List, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from orgpanel.core.database import transaction
from orgpanel.core.logger import get_logger
from orgpanel.models import Company, Department, User, UserRole
from orgpanel.services.audit_service import record_audit
from orgpanel.services.auth_service import AuthService, IdentityStore
from orgpanel.services.policy_service import Action, PolicyService, Target
from orgpanel.services.session_service import resolve_actor
from orgpanel.utils.datetime_utils import to_iso_string
from orgpanel.utils.exceptions import (
    CompanyNotFoundError,
    EmailTakenError,
    InvalidDepartmentError,
    NotFoundError,
    ValidationError,
    WrongCurrentPasswordError,
)
from orgpanel.utils.validators import parse_uuid, validate_name, validate_password

logger = get_logger(__name__)

ActorId = Optional[Union[str, UUID]]

# Marks an optional argument the caller did not pass (None means "clear it")
UNSET: Any = object()


def parse_role(role: Union[str, UserRole]) -> UserRole:
    try:
        return UserRole(role)
    except ValueError:
        valid = ", ".join(r.value for r in UserRole)
        raise ValidationError(f"Invalid role. Must be one of: {valid}")


class UserService:
    """Service for user management"""

    @staticmethod
    def serialize(user: User) -> Dict[str, Any]:
        return {
            "id": str(user.id),
            "name": user.name,
            "email": user.email,
            "role": UserRole(user.role).value,
            "company_id": str(user.company_id) if user.company_id else None,
            "company_name": user.company.name if user.company else None,
            "department_id": str(user.department_id) if user.department_id else None,
            "department_name": user.department.name if user.department else None,
            "created_at": to_iso_string(user.created_at),
        }

    @staticmethod
    def _get_user(db: Session, user_id: Union[str, UUID]) -> User:
        user = db.get(User, parse_uuid(user_id, "User"))
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _resolve_department(
        db: Session,
        department_id: Union[str, UUID],
        company_id: Optional[UUID]
    ) -> Department:
        """
        Load a department for assignment to a user of `company_id`.

        A department from any other company, or for a user without a company,
        is rejected the same way as a department that does not exist.
        """
        try:
            department = db.get(Department, parse_uuid(department_id, "Department"))
        except NotFoundError:
            raise InvalidDepartmentError()
        if not department or company_id is None or department.company_id != company_id:
            raise InvalidDepartmentError()
        return department

    @staticmethod
    def create_user(
        db: Session,
        actor_id: ActorId,
        name: str,
        email: str,
        password: str,
        role: Union[str, UserRole] = UserRole.MEMBER,
        company_id: Optional[Union[str, UUID]] = None,
        department_id: Optional[Union[str, UUID]] = None
    ) -> Dict[str, Any]:
        """
        Create a new user with a credential account.

        Args:
            role: SUPER_USER, ADMIN or MEMBER (admins may only grant ADMIN or MEMBER)
            company_id: Tenant for the user; admins always create in their own company
            department_id: Optional department, which must belong to that company

        Raises:
            ForbiddenError / AdminHasNoCompanyError: If the caller may not create this user
            CompanyNotFoundError: If the company does not exist
            InvalidDepartmentError: If the department is missing or belongs to another company
            EmailTakenError: If the email is already registered
            ValidationError: If name, email or password are malformed
        """
        try:
            with transaction(db):
                actor, _ = resolve_actor(db, actor_id)
                role = parse_role(role)
                PolicyService.require(actor, Action.USER_CREATE, Target(requested_role=role))

                if actor.role == UserRole.ADMIN:
                    target_company_id = actor.company_id
                elif company_id:
                    try:
                        target_company_id = parse_uuid(company_id, "Company")
                    except NotFoundError:
                        raise CompanyNotFoundError()
                else:
                    target_company_id = None

                if target_company_id is not None and not db.get(Company, target_company_id):
                    raise CompanyNotFoundError()

                department = None
                if department_id:
                    department = UserService._resolve_department(db, department_id, target_company_id)

                user = IdentityStore.create_credential_user(db, email, password, name)
                user.role = role
                user.company_id = target_company_id
                user.department_id = department.id if department else None
                db.flush()

                record_audit(db, actor.id, "user_created", "user", user.id, {
                    "email": user.email,
                    "role": role.value,
                    "company_id": str(target_company_id) if target_company_id else None,
                    "department_id": str(department.id) if department else None,
                })
                db.refresh(user)
                result = UserService.serialize(user)
        except IntegrityError:
            raise EmailTakenError()

        logger.info(f"✓ User created: {result['email']} (role: {result['role']})")
        return result

    @staticmethod
    def update_user(
        db: Session,
        actor_id: ActorId,
        user_id: Union[str, UUID],
        name: Optional[str] = None,
        role: Optional[Union[str, UserRole]] = None,
        department_id: Any = UNSET
    ) -> Dict[str, Any]:
        """
        Update a user's name, role or department.

        Pass department_id=None to clear the department; leave it out to keep it.
        """
        with transaction(db):
            actor, _ = resolve_actor(db, actor_id)
            PolicyService.require_role(actor, Action.USER_UPDATE)
            user = UserService._get_user(db, user_id)

            new_role = parse_role(role) if role is not None else None
            PolicyService.require(actor, Action.USER_UPDATE, Target(
                company_id=user.company_id,
                user_id=user.id,
                role=UserRole(user.role),
                requested_role=new_role,
            ))

            changes = {}

            if name is not None:
                name = validate_name(name)
                if name != user.name:
                    changes["name"] = {"from": user.name, "to": name}
                    user.name = name

            if new_role is not None and new_role != UserRole(user.role):
                changes["role"] = {"from": UserRole(user.role).value, "to": new_role.value}
                user.role = new_role

            if department_id is not UNSET:
                department = (
                    UserService._resolve_department(db, department_id, user.company_id)
                    if department_id else None
                )
                new_department_id = department.id if department else None
                if new_department_id != user.department_id:
                    changes["department_id"] = {
                        "from": str(user.department_id) if user.department_id else None,
                        "to": str(new_department_id) if new_department_id else None,
                    }
                    user.department_id = new_department_id

            if changes:
                db.flush()
                record_audit(db, actor.id, "user_updated", "user", user.id, changes)
                db.refresh(user)
            result = UserService.serialize(user)

        logger.info(f"✓ User updated: {result['email']}")
        return result

    @staticmethod
    def delete_user(db: Session, actor_id: ActorId, user_id: Union[str, UUID]) -> bool:
        """Delete a user and their credential account. Never the caller's own account."""
        with transaction(db):
            actor, _ = resolve_actor(db, actor_id)
            user_uuid = parse_uuid(user_id, "User")
            PolicyService.require_role(actor, Action.USER_DELETE, target_user_id=user_uuid)
            user = UserService._get_user(db, user_uuid)
            PolicyService.require(actor, Action.USER_DELETE, Target(
                company_id=user.company_id,
                user_id=user.id,
                role=UserRole(user.role),
            ))

            email = user.email
            record_audit(db, actor.id, "user_deleted", "user", user.id, {"email": email})
            db.delete(user)

        logger.info(f"✓ User deleted: {email}")
        return True

    @staticmethod
    def change_password(
        db: Session,
        actor_id: ActorId,
        user_id: Union[str, UUID],
        new_password: str,
        current_password: Optional[str] = None,
        confirm_password: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Set a new password for a user.

        Changing your own password requires the current one. Changing someone
        else's is an administrative action and does not.

        Raises:
            ForbiddenError: If the caller may not change this user's password
            PasswordMismatchError / PasswordTooShortError: If the new password is rejected
            WrongCurrentPasswordError: If the current password does not match
        """
        with transaction(db):
            actor, _ = resolve_actor(db, actor_id)
            user_uuid = parse_uuid(user_id, "User")
            PolicyService.require_role(actor, Action.PASSWORD_CHANGE, target_user_id=user_uuid)
            user = UserService._get_user(db, user_uuid)
            PolicyService.require(actor, Action.PASSWORD_CHANGE, Target(
                company_id=user.company_id,
                user_id=user.id,
                role=UserRole(user.role),
            ))

            validate_password(new_password, confirm_password)

            is_own_password = user.id == actor.id
            if is_own_password:
                if not current_password or not IdentityStore.verify_credential(db, user.email, current_password):
                    logger.warning(f"Wrong current password for {user.email}")
                    raise WrongCurrentPasswordError()

            IdentityStore.set_credential_password(db, user.id, AuthService.hash_password(new_password))
            record_audit(db, actor.id, "password_changed", "user", user.id,
                         {"self_service": is_own_password})
            email = user.email

        logger.info(f"✓ Password changed for {email}")
        return {"message": "Password changed successfully"}

    @staticmethod
    def list_users(db: Session, actor_id: ActorId) -> List[Dict[str, Any]]:
        """Users visible to the caller, newest first. Admins only see their own company."""
        actor, _ = resolve_actor(db, actor_id)
        PolicyService.require(actor, Action.USER_LIST)

        query = db.query(User)
        if actor.role == UserRole.ADMIN:
            query = query.filter(User.company_id == actor.company_id)
        users = query.order_by(User.created_at.desc(), User.email.asc()).all()
        return [UserService.serialize(u) for u in users]

    @staticmethod
    def get_current_user(db: Session, actor_id: ActorId) -> Dict[str, Any]:
        """Profile of the signed-in user."""
        _, user = resolve_actor(db, actor_id)
        return UserService.serialize(user)
