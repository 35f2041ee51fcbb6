# orgpanel/services/audit_service.py
"""Audit trail for administrative mutations"""
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from orgpanel.models import AuditLog


def record_audit(
    db: Session,
    actor_id: UUID,
    action: str,
    resource: str,
    resource_id: Optional[Any] = None,
    changes: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """Add an audit entry to the current transaction; it commits or rolls back with the mutation."""
    entry = AuditLog(
        actor_id=actor_id,
        action=action,
        resource=resource,
        resource_id=str(resource_id) if resource_id is not None else None,
        changes=changes,
    )
    db.add(entry)
    return entry
