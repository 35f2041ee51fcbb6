# orgpanel/services/company_lifecycle.py
"""
Company lifecycle: ACTIVE -> ARCHIVED -> DELETED.

Archiving schedules deletion COMPANY_GRACE_PERIOD_DAYS ahead. The schedule is
stamped once and every later check compares against the stored deleted_at.
All functions take `now` explicitly and never touch the database.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from orgpanel.core.config import COMPANY_GRACE_PERIOD_DAYS
from orgpanel.models import CompanyStatus
from orgpanel.utils.datetime_utils import days_until
from orgpanel.utils.exceptions import LifecycleError


class CompanyState(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"


@dataclass(frozen=True)
class ArchiveSchedule:
    archived_at: datetime
    deleted_at: datetime


def state_of(status: CompanyStatus) -> CompanyState:
    return CompanyState(CompanyStatus(status).value)


def plan_archive(status: CompanyStatus, now: datetime) -> ArchiveSchedule:
    """ACTIVE -> ARCHIVED. Returns the timestamps to stamp on the company."""
    if state_of(status) != CompanyState.ACTIVE:
        raise LifecycleError("Company is already archived", "ALREADY_ARCHIVED")
    return ArchiveSchedule(
        archived_at=now,
        deleted_at=now + timedelta(days=COMPANY_GRACE_PERIOD_DAYS),
    )


def check_restore(status: CompanyStatus, deleted_at: Optional[datetime], now: datetime) -> None:
    """ARCHIVED -> ACTIVE, only while the scheduled deletion is still ahead."""
    if state_of(status) != CompanyState.ARCHIVED:
        raise LifecycleError("Company is not archived", "NOT_ARCHIVED")
    if deleted_at is not None and now >= deleted_at:
        raise LifecycleError(
            "Grace period has expired; the company can no longer be restored",
            "GRACE_PERIOD_EXPIRED"
        )


def check_delete(
    status: CompanyStatus,
    deleted_at: Optional[datetime],
    now: datetime,
    force: bool = False
) -> None:
    """
    -> DELETED.

    Without force the company must be archived and its scheduled deletion
    reached. With force, deletion is immediate from any state.
    """
    if force:
        return
    if state_of(status) != CompanyState.ARCHIVED:
        raise LifecycleError(
            "Company must be archived before it can be deleted",
            "MUST_ARCHIVE_FIRST"
        )
    if deleted_at is not None and now < deleted_at:
        remaining = days_until(deleted_at, now)
        raise LifecycleError(
            f"Company is in its grace period; {remaining} day(s) remaining before deletion",
            "GRACE_PERIOD_ACTIVE",
            {"days_remaining": remaining}
        )


def days_remaining(deleted_at: Optional[datetime], now: datetime) -> Optional[int]:
    """Days left in the grace period for display, never negative."""
    if deleted_at is None:
        return None
    return max(days_until(deleted_at, now), 0)
