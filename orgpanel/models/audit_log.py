# orgpanel/models/audit_log.py
from sqlalchemy import Column, String, DateTime, JSON, Index, UUID
import uuid
from .base import Base
from orgpanel.utils.datetime_utils import get_utc_now

class AuditLog(Base):
    """Administrative audit trail. actor_id is not a foreign key so entries outlive deleted users."""
    __tablename__ = "audit_log"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    actor_id = Column(UUID(as_uuid=True), nullable=False)
    action = Column(String(100), nullable=False)
    resource = Column(String(100), nullable=True)
    resource_id = Column(String(100), nullable=True)
    changes = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=get_utc_now)
    
    __table_args__ = (
        Index("idx_audit_actor", "actor_id"),
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_action", "action"),
    )
    
    def __repr__(self):
        return f"<AuditLog {self.action}>"
