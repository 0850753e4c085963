"""Site photo model"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
from tbs.core.database import Base, in_list

PHOTO_TAGS = ("before", "during", "after")


class Photo(Base):
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"))
    uploaded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    file_path = Column(String(500))
    caption = Column(String(500))
    tag = Column(String(20), default="during", server_default="during", nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(in_list("tag", PHOTO_TAGS), name="chk_photos_tag"),
    )
