"""Project model"""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from tbs.core.database import Base, in_list

PROJECT_STATUSES = ("planned", "active", "on_hold", "complete")


class Project(Base):
    """Construction job, identified by a human-facing reference"""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    ref = Column(String(50), unique=True, nullable=False)
    address = Column(String(255), nullable=False)
    client_name = Column(String(120))
    status = Column(String(20), default="planned", server_default="planned", nullable=False, index=True)
    start_date = Column(Date)
    end_date_est = Column(Date)
    notes = Column(Text)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime, server_default=func.now(), index=True)

    tasks = relationship("Task", back_populates="project", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        CheckConstraint(in_list("status", PROJECT_STATUSES), name="chk_projects_status"),
    )

    def __repr__(self):
        return f"<Project(id={self.id}, ref='{self.ref}')>"
