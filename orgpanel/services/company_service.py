# orgpanel/services/company_service.py
"""Company management service"""
from datetime import datetime
from typing import Dict, Any, Optional, List, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from orgpanel.core.database import transaction
from orgpanel.core.logger import get_logger
from orgpanel.models import Company, CompanyStatus
from orgpanel.services import company_lifecycle
from orgpanel.services.audit_service import record_audit
from orgpanel.services.policy_service import Action, PolicyService
from orgpanel.services.session_service import resolve_actor
from orgpanel.utils.datetime_utils import get_utc_now, to_iso_string, to_naive_utc
from orgpanel.utils.exceptions import (
    InvalidSlugError,
    NotFoundError,
    OwnCompanyDeleteForbiddenError,
    SlugTakenError,
)
from orgpanel.utils.slug import is_valid_slug, slugify
from orgpanel.utils.validators import parse_uuid, validate_name

logger = get_logger(__name__)

ActorId = Optional[Union[str, UUID]]


class CompanyService:
    """Service for managing companies (tenants) and their lifecycle"""

    @staticmethod
    def serialize(company: Company, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or get_utc_now()
        state = company_lifecycle.state_of(company.status)
        return {
            "id": str(company.id),
            "name": company.name,
            "slug": company.slug,
            "status": state.value,
            "archived_at": to_iso_string(company.archived_at),
            "deleted_at": to_iso_string(company.deleted_at),
            "days_remaining": company_lifecycle.days_remaining(company.deleted_at, now),
            "created_at": to_iso_string(company.created_at),
        }

    @staticmethod
    def _resolve_slug(name: str, slug: Optional[str]) -> str:
        """Use the caller's slug as given, or suggest one from the name when none was sent."""
        if slug is None or slug == "":
            slug = slugify(name)
        if not is_valid_slug(slug):
            raise InvalidSlugError()
        return slug

    @staticmethod
    def _ensure_slug_available(db: Session, slug: str, exclude_id: Optional[UUID] = None) -> None:
        query = db.query(Company.id).filter(Company.slug == slug)
        if exclude_id is not None:
            query = query.filter(Company.id != exclude_id)
        if query.first():
            raise SlugTakenError()

    @staticmethod
    def _get_company(db: Session, company_id: Union[str, UUID]) -> Company:
        company = db.get(Company, parse_uuid(company_id, "Company"))
        if not company:
            raise NotFoundError("Company not found")
        return company

    @staticmethod
    def create_company(
        db: Session,
        actor_id: ActorId,
        name: str,
        slug: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create a new company.

        Args:
            name: Company name
            slug: URL-safe identifier; suggested from the name when omitted

        Raises:
            ForbiddenError: If the caller is not a Super User
            InvalidSlugError: If the slug is malformed
            SlugTakenError: If another company uses the slug
        """
        try:
            with transaction(db):
                actor, _ = resolve_actor(db, actor_id)
                PolicyService.require(actor, Action.COMPANY_CREATE)

                name = validate_name(name, "Company name")
                slug = CompanyService._resolve_slug(name, slug)
                CompanyService._ensure_slug_available(db, slug)

                company = Company(name=name, slug=slug, status=CompanyStatus.ACTIVE)
                db.add(company)
                db.flush()

                record_audit(db, actor.id, "company_created", "company", company.id,
                             {"name": name, "slug": slug})
                result = {"id": str(company.id), "name": company.name, "slug": company.slug}
        except IntegrityError:
            raise SlugTakenError()

        logger.info(f"✓ Company created: {slug}")
        return result

    @staticmethod
    def update_company(
        db: Session,
        actor_id: ActorId,
        company_id: Union[str, UUID],
        name: str,
        slug: Optional[str] = None
    ) -> Dict[str, Any]:
        """Rename a company; the slug is kept unless a new one is supplied."""
        try:
            with transaction(db):
                actor, _ = resolve_actor(db, actor_id)
                PolicyService.require(actor, Action.COMPANY_MANAGE)
                company = CompanyService._get_company(db, company_id)

                name = validate_name(name, "Company name")
                changes = {}
                if slug is not None:
                    # An explicit slug is validated verbatim, never re-suggested
                    if not is_valid_slug(slug):
                        raise InvalidSlugError()
                    CompanyService._ensure_slug_available(db, slug, exclude_id=company.id)
                    if slug != company.slug:
                        changes["slug"] = {"from": company.slug, "to": slug}
                        company.slug = slug
                if name != company.name:
                    changes["name"] = {"from": company.name, "to": name}
                    company.name = name

                if changes:
                    db.flush()
                    record_audit(db, actor.id, "company_updated", "company", company.id, changes)
                result = CompanyService.serialize(company)
        except IntegrityError:
            raise SlugTakenError()

        logger.info(f"✓ Company updated: {result['slug']}")
        return result

    @staticmethod
    def archive_company(
        db: Session,
        actor_id: ActorId,
        company_id: Union[str, UUID],
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Archive a company and schedule its permanent deletion.

        Returns:
            Dict with the company id and its deletion date
        """
        now = to_naive_utc(now) if now else get_utc_now()
        with transaction(db):
            actor, _ = resolve_actor(db, actor_id)
            PolicyService.require(actor, Action.COMPANY_MANAGE)
            company = CompanyService._get_company(db, company_id)

            schedule = company_lifecycle.plan_archive(company.status, now)
            company.status = CompanyStatus.ARCHIVED
            company.archived_at = schedule.archived_at
            company.deleted_at = schedule.deleted_at

            record_audit(db, actor.id, "company_archived", "company", company.id,
                         {"deleted_at": to_iso_string(schedule.deleted_at)})
            result = {
                "id": str(company.id),
                "archived_at": to_iso_string(schedule.archived_at),
                "deletion_date": to_iso_string(schedule.deleted_at),
            }

        logger.info(f"✓ Company archived: {company.slug} (deletion on {result['deletion_date']})")
        return result

    @staticmethod
    def restore_company(
        db: Session,
        actor_id: ActorId,
        company_id: Union[str, UUID],
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Bring an archived company back while its grace period is still running."""
        now = to_naive_utc(now) if now else get_utc_now()
        with transaction(db):
            actor, _ = resolve_actor(db, actor_id)
            PolicyService.require(actor, Action.COMPANY_MANAGE)
            company = CompanyService._get_company(db, company_id)

            company_lifecycle.check_restore(company.status, company.deleted_at, now)
            company.status = CompanyStatus.ACTIVE
            company.archived_at = None
            company.deleted_at = None

            record_audit(db, actor.id, "company_restored", "company", company.id)
            result = CompanyService.serialize(company, now)

        logger.info(f"✓ Company restored: {company.slug}")
        return result

    @staticmethod
    def delete_company(
        db: Session,
        actor_id: ActorId,
        company_id: Union[str, UUID],
        force: bool = False,
        now: Optional[datetime] = None
    ) -> bool:
        """
        Permanently delete a company with its departments and users.

        Without force the company must be archived and past its grace period.
        Nobody deletes the company their own account belongs to.
        """
        now = to_naive_utc(now) if now else get_utc_now()
        with transaction(db):
            actor, _ = resolve_actor(db, actor_id)
            PolicyService.require(actor, Action.COMPANY_MANAGE)
            company = CompanyService._get_company(db, company_id)

            if actor.company_id == company.id:
                raise OwnCompanyDeleteForbiddenError()
            company_lifecycle.check_delete(company.status, company.deleted_at, now, force=force)
            slug = company.slug
            record_audit(db, actor.id, "company_deleted", "company", company.id,
                         {"slug": slug, "force": force})
            db.delete(company)

        logger.info(f"✓ Company deleted: {slug}{' (forced)' if force else ''}")
        return True

    @staticmethod
    def list_companies(db: Session, actor_id: ActorId, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """All companies ordered by name, with lifecycle state."""
        now = to_naive_utc(now) if now else get_utc_now()
        actor, _ = resolve_actor(db, actor_id)
        PolicyService.require(actor, Action.COMPANY_LIST)

        companies = db.query(Company).order_by(Company.name.asc()).all()
        return [CompanyService.serialize(c, now) for c in companies]

    @staticmethod
    def purge_expired_companies(
        db: Session,
        now: Optional[datetime] = None,
        dry_run: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Delete every archived company whose scheduled deletion has passed.

        Operator command; runs without a session and uses the non-forced path.
        """
        now = to_naive_utc(now) if now else get_utc_now()
        with transaction(db):
            expired = (
                db.query(Company)
                .filter(Company.status == CompanyStatus.ARCHIVED)
                .filter(Company.deleted_at <= now)
                .order_by(Company.deleted_at.asc())
                .all()
            )
            purged = []
            for company in expired:
                company_lifecycle.check_delete(company.status, company.deleted_at, now)
                purged.append({"id": str(company.id), "slug": company.slug,
                               "deleted_at": to_iso_string(company.deleted_at)})
                if not dry_run:
                    db.delete(company)

        for entry in purged:
            logger.info(f"✓ Company {'would be ' if dry_run else ''}purged: {entry['slug']}")
        return purged
