"""Task model"""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from tbs.core.database import Base, in_list

TASK_STATUSES = ("todo", "in_progress", "blocked", "done")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")


class Task(Base):
    """Unit of work on a project, assigned to staff or a contractor"""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    status = Column(String(20), default="todo", server_default="todo", nullable=False)
    priority = Column(String(20), default="medium", server_default="medium", nullable=False)
    assignee_staff_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    assignee_contractor_id = Column(Integer, ForeignKey("contractors.id", ondelete="SET NULL"))
    due_date = Column(Date)
    start_date = Column(Date)
    end_date = Column(Date)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    project = relationship("Project", back_populates="tasks")

    __table_args__ = (
        CheckConstraint(in_list("status", TASK_STATUSES), name="chk_tasks_status"),
        CheckConstraint(in_list("priority", TASK_PRIORITIES), name="chk_tasks_priority"),
        Index("idx_tasks_project_status", "project_id", "status"),
    )
