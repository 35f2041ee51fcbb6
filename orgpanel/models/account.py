# orgpanel/models/account.py
from sqlalchemy import Column, String, ForeignKey, UUID
from sqlalchemy.orm import relationship
import uuid
from .base import Base, TimestampMixin

CREDENTIAL_PROVIDER = "credential"

class Account(Base, TimestampMixin):
    """Credential account - holds the password hash for email/password sign-in."""
    __tablename__ = "account"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    provider_id = Column(String(50), nullable=False, default=CREDENTIAL_PROVIDER)
    password_hash = Column(String(255), nullable=False)
    
    user = relationship("User", back_populates="account")
    
    def __repr__(self):
        return f"<Account {self.provider_id}:{self.user_id}>"
