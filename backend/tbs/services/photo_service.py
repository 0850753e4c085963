"""Photo service"""

from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
import logging

from tbs.models.photo import Photo
from tbs.models.project import Project
from tbs.models.task import Task
from tbs.schemas.photo import PhotoCreate, PhotoUpdate
from tbs.core.exceptions import ResourceNotFoundError, ValidationError
from tbs.core.security import utcnow


def _to_dict(row) -> Dict[str, Any]:
    photo, project_ref, project_address = row
    data = {column.key: getattr(photo, column.key) for column in Photo.__table__.columns}
    data.update(project_ref=project_ref, project_address=project_address)
    return data


class PhotoService:
    """Service for site photo records"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _joined_query(db: Session):
        return db.query(Photo, Project.ref, Project.address).outerjoin(Project, Photo.project_id == Project.id)

    def list_photos(self, db: Session, project_id: Optional[int] = None, tag: Optional[str] = None) -> List[Dict[str, Any]]:
        """Photos newest first, optionally for one project or tag"""
        query = self._joined_query(db)
        if project_id is not None:
            query = query.filter(Photo.project_id == project_id)
        if tag:
            query = query.filter(Photo.tag == tag)
        rows = query.order_by(Photo.created_at.desc(), Photo.id.desc()).all()
        return [_to_dict(row) for row in rows]

    def get_photo(self, db: Session, photo_id: int) -> Dict[str, Any]:
        row = self._joined_query(db).filter(Photo.id == photo_id).first()
        if not row:
            raise ResourceNotFoundError("Photo")
        return _to_dict(row)

    def create_photo(self, db: Session, data: PhotoCreate, uploaded_by: int) -> Dict[str, Any]:
        if not db.query(Project.id).filter(Project.id == data.project_id).first():
            self.logger.warning("Photo creation failed - project not found", extra={"project_id": data.project_id})
            raise ValidationError("Project not found")
        if data.task_id is not None and not db.query(Task.id).filter(Task.id == data.task_id).first():
            raise ValidationError("Task not found")

        photo = Photo(
            project_id=data.project_id,
            task_id=data.task_id,
            caption=data.caption or None,
            tag=data.tag.value,
            file_path=data.file_path,
            uploaded_by=uploaded_by,
        )
        db.add(photo)
        db.commit()

        self.logger.info("Photo created", extra={"photo_id": photo.id, "project_id": photo.project_id, "user_id": uploaded_by})
        return self.get_photo(db, photo.id)

    def update_photo(self, db: Session, photo_id: int, data: PhotoUpdate) -> Dict[str, Any]:
        photo = db.query(Photo).filter(Photo.id == photo_id).first()
        if not photo:
            raise ResourceNotFoundError("Photo")

        changes = data.model_dump(exclude_unset=True)
        if "caption" in changes:
            photo.caption = changes["caption"]
        if changes.get("tag") is not None:
            photo.tag = changes["tag"].value
        photo.updated_at = utcnow()

        db.commit()

        self.logger.info("Photo updated", extra={"photo_id": photo_id})
        return self.get_photo(db, photo_id)

    def delete_photo(self, db: Session, photo_id: int) -> None:
        photo = db.query(Photo).filter(Photo.id == photo_id).first()
        if not photo:
            raise ResourceNotFoundError("Photo")

        db.delete(photo)
        db.commit()

        self.logger.info("Photo deleted", extra={"photo_id": photo_id})
