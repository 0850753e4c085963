"""User model"""

from sqlalchemy import Column, Integer, String, DateTime, Index, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from tbs.core.database import Base, in_list

USER_ROLES = ("admin", "foreman", "worker", "contractor", "labourer")
USER_STATUSES = ("active", "disabled")


class User(Base):
    """Staff account used for authentication and authorization"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    # Stored lower-cased; see tbs.core.security.normalize_email
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(40))
    role = Column(String(20), nullable=False, index=True)
    position = Column(String(120))
    password_hash = Column(String(255), nullable=False)
    status = Column(String(20), default="active", server_default="active", nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        CheckConstraint(in_list("role", USER_ROLES), name="chk_users_role"),
        CheckConstraint(in_list("status", USER_STATUSES), name="chk_users_status"),
        Index("idx_users_status", "status"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
