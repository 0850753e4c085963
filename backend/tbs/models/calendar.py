"""Calendar event model"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.sql import false, func
from sqlalchemy.orm import relationship
from tbs.core.database import Base


class CalendarEvent(Base):
    """Scheduled slot, optionally pushed from a task"""

    __tablename__ = "calendar_events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime)
    all_day = Column(Boolean, default=False, server_default=false(), nullable=False)
    location = Column(String(255))
    notes = Column(Text)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"))
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), unique=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    task = relationship("Task")

    __table_args__ = (
        Index("idx_calendar_events_start", "start_at"),
    )
