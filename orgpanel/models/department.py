# orgpanel/models/department.py
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, UUID
from sqlalchemy.orm import relationship
import uuid
from .base import Base, TimestampMixin

class Department(Base, TimestampMixin):
    """Department entity - organizational sub-unit owned by exactly one company."""
    __tablename__ = "department"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("company.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    # Relationships
    company = relationship("Company", back_populates="departments")
    # No delete cascade: removing a department detaches its users
    users = relationship("User", back_populates="department")
    
    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_department_company_name"),
    )
    
    def __repr__(self):
        return f"<Department {self.name}>"
