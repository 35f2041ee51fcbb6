# orgpanel/services/department_service.py
"""Department management service"""
from typing import Dict, Any, Optional, List, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from orgpanel.core.database import transaction
from orgpanel.core.logger import get_logger
from orgpanel.models import Company, Department, UserRole
from orgpanel.services.audit_service import record_audit
from orgpanel.services.policy_service import Action, PolicyService, Target
from orgpanel.services.session_service import resolve_actor
from orgpanel.utils.datetime_utils import to_iso_string
from orgpanel.utils.exceptions import (
    CompanyNotFoundError,
    DuplicateDepartmentError,
    NotFoundError,
    ValidationError,
)
from orgpanel.utils.validators import parse_uuid, validate_name

logger = get_logger(__name__)

ActorId = Optional[Union[str, UUID]]


class DepartmentService:
    """Service for departments within a company"""

    @staticmethod
    def serialize(department: Department) -> Dict[str, Any]:
        return {
            "id": str(department.id),
            "name": department.name,
            "company_id": str(department.company_id),
            "company_name": department.company.name,
            "created_at": to_iso_string(department.created_at),
        }

    @staticmethod
    def _ensure_name_available(
        db: Session,
        company_id: UUID,
        name: str,
        exclude_id: Optional[UUID] = None
    ) -> None:
        query = db.query(Department.id).filter(
            Department.company_id == company_id,
            Department.name == name,
        )
        if exclude_id is not None:
            query = query.filter(Department.id != exclude_id)
        if query.first():
            raise DuplicateDepartmentError()

    @staticmethod
    def _get_department(db: Session, department_id: Union[str, UUID]) -> Department:
        department = db.get(Department, parse_uuid(department_id, "Department"))
        if not department:
            raise NotFoundError("Department not found")
        return department

    @staticmethod
    def create_department(
        db: Session,
        actor_id: ActorId,
        name: str,
        company_id: Optional[Union[str, UUID]] = None
    ) -> Dict[str, Any]:
        """
        Create a department.

        Super Users must name the company; admins always create in their own
        company and any supplied company_id is ignored.

        Raises:
            ForbiddenError / AdminHasNoCompanyError: If the caller may not create departments
            ValidationError: If a Super User omits the company
            CompanyNotFoundError: If the company does not exist
            DuplicateDepartmentError: If the company already has a department with this name
        """
        try:
            with transaction(db):
                actor, _ = resolve_actor(db, actor_id)
                PolicyService.require(actor, Action.DEPARTMENT_CREATE)

                if actor.role == UserRole.ADMIN:
                    target_company_id = actor.company_id
                elif company_id:
                    target_company_id = parse_uuid(company_id, "Company")
                else:
                    raise ValidationError("Company ID is required for Super User")

                company = db.get(Company, target_company_id)
                if not company:
                    raise CompanyNotFoundError()

                name = validate_name(name, "Department name")
                DepartmentService._ensure_name_available(db, company.id, name)

                department = Department(name=name, company_id=company.id)
                db.add(department)
                db.flush()

                record_audit(db, actor.id, "department_created", "department", department.id,
                             {"name": name, "company_id": str(company.id)})
                result = DepartmentService.serialize(department)
        except NotFoundError as e:
            # parse_uuid reports a malformed company id as a plain not-found
            if e.code == "NOT_FOUND":
                raise CompanyNotFoundError()
            raise
        except IntegrityError:
            raise DuplicateDepartmentError()

        logger.info(f"✓ Department created: {result['name']} ({result['company_name']})")
        return result

    @staticmethod
    def update_department(
        db: Session,
        actor_id: ActorId,
        department_id: Union[str, UUID],
        name: str
    ) -> Dict[str, Any]:
        """Rename a department within its company."""
        try:
            with transaction(db):
                actor, _ = resolve_actor(db, actor_id)
                PolicyService.require_role(actor, Action.DEPARTMENT_MANAGE)
                department = DepartmentService._get_department(db, department_id)
                PolicyService.require(actor, Action.DEPARTMENT_MANAGE,
                                      Target(company_id=department.company_id))

                name = validate_name(name, "Department name")
                DepartmentService._ensure_name_available(
                    db, department.company_id, name, exclude_id=department.id
                )

                if name != department.name:
                    record_audit(db, actor.id, "department_updated", "department", department.id,
                                 {"name": {"from": department.name, "to": name}})
                    department.name = name
                    db.flush()
                result = DepartmentService.serialize(department)
        except IntegrityError:
            raise DuplicateDepartmentError()

        logger.info(f"✓ Department updated: {result['name']}")
        return result

    @staticmethod
    def delete_department(
        db: Session,
        actor_id: ActorId,
        department_id: Union[str, UUID]
    ) -> bool:
        """Delete a department. Its users stay, with no department."""
        with transaction(db):
            actor, _ = resolve_actor(db, actor_id)
            PolicyService.require_role(actor, Action.DEPARTMENT_MANAGE)
            department = DepartmentService._get_department(db, department_id)
            PolicyService.require(actor, Action.DEPARTMENT_MANAGE,
                                  Target(company_id=department.company_id))

            name = department.name
            detached = len(department.users)
            record_audit(db, actor.id, "department_deleted", "department", department.id,
                         {"name": name, "detached_users": detached})
            db.delete(department)

        logger.info(f"✓ Department deleted: {name} ({detached} user(s) detached)")
        return True

    @staticmethod
    def list_departments(
        db: Session,
        actor_id: ActorId,
        company_id: Optional[Union[str, UUID]] = None
    ) -> List[Dict[str, Any]]:
        """
        Departments visible to the caller.

        Admins only ever see their own company. Super Users see one company
        when company_id is given, otherwise all, ordered by company then name.
        """
        actor, _ = resolve_actor(db, actor_id)
        PolicyService.require(actor, Action.DEPARTMENT_LIST)

        if actor.role == UserRole.ADMIN:
            company_id = actor.company_id

        query = db.query(Department).join(Company, Department.company_id == Company.id)
        if company_id:
            query = query.filter(Department.company_id == parse_uuid(company_id, "Company"))
        departments = query.order_by(Company.name.asc(), Department.name.asc()).all()
        return [DepartmentService.serialize(d) for d in departments]
