"""Project service"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from tbs.models.project import Project
from tbs.schemas.project import ProjectCreate, ProjectPatch
from tbs.core.exceptions import ResourceAlreadyExistsError, ResourceNotFoundError


class ProjectService:
    """Service for construction projects"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def list_projects(db: Session) -> List[Project]:
        """All projects, newest first"""
        return db.query(Project).order_by(Project.created_at.desc(), Project.id.desc()).all()

    @staticmethod
    def get_project(db: Session, project_id: int) -> Project:
        project = db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise ResourceNotFoundError()
        return project

    def create_project(self, db: Session, data: ProjectCreate, created_by: int) -> Project:
        """
        Create a project in the planned state

        Raises:
            ResourceAlreadyExistsError: If the reference is taken
        """
        if db.query(Project.id).filter(Project.ref == data.ref).first():
            raise ResourceAlreadyExistsError("Project reference")

        project = Project(**data.model_dump(), created_by=created_by)
        db.add(project)
        try:
            db.commit()
        except IntegrityError:
            # Concurrent insert of the same ref
            db.rollback()
            raise ResourceAlreadyExistsError("Project reference")
        db.refresh(project)

        self.logger.info("Project created", extra={"project_id": project.id, "ref": project.ref, "user_id": created_by})
        return project

    def patch_project(self, db: Session, project_id: int, data: ProjectPatch) -> Project:
        project = self.get_project(db, project_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("status") is not None:
            project.status = changes["status"].value
        if "notes" in changes:
            project.notes = changes["notes"]

        db.commit()
        db.refresh(project)

        self.logger.info("Project updated", extra={"project_id": project.id, "fields": sorted(changes)})
        return project
