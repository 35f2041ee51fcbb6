# orgpanel/models/user.py
from sqlalchemy import Column, String, ForeignKey, Index, Enum, UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from .base import Base, TimestampMixin

class UserRole(str, enum.Enum):
    """User roles for RBAC."""
    SUPER_USER = "SUPER_USER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"

class User(Base, TimestampMixin):
    """User entity - optionally belongs to one company and, within it, one department."""
    __tablename__ = "user"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.MEMBER)
    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("company.id", ondelete="CASCADE"),
        nullable=True,
    )
    department_id = Column(
        UUID(as_uuid=True),
        ForeignKey("department.id", ondelete="SET NULL"),
        nullable=True,
    )
    
    # Relationships
    company = relationship("Company", back_populates="users")
    department = relationship("Department", back_populates="users")
    account = relationship(
        "Account",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    __table_args__ = (
        Index("idx_user_company", "company_id"),
        Index("idx_user_department", "department_id"),
    )
    
    def __repr__(self):
        return f"<User {self.email}>"
