# orgpanel/models/company.py
from sqlalchemy import Column, String, DateTime, Enum, UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from .base import Base, TimestampMixin

class CompanyStatus(str, enum.Enum):
    """Persisted lifecycle state. Deletion removes the row, so it has no stored value."""
    ACTIVE = "active"
    ARCHIVED = "archived"

class Company(Base, TimestampMixin):
    """Company entity - top-level tenant."""
    __tablename__ = "company"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    status = Column(Enum(CompanyStatus), nullable=False, default=CompanyStatus.ACTIVE)
    archived_at = Column(DateTime, nullable=True)
    # Scheduled permanent-deletion instant, fixed at archive time
    deleted_at = Column(DateTime, nullable=True)
    
    # Relationships
    departments = relationship(
        "Department",
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    users = relationship(
        "User",
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    def __repr__(self):
        return f"<Company {self.slug}>"
