"""Project routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from tbs.core.database import get_db
from tbs.core.security import Identity
from tbs.schemas.project import ProjectCreate, ProjectCreated, ProjectPatch, ProjectResponse
from tbs.schemas.response import OkResponse
from tbs.services.project_service import ProjectService
from tbs.api.deps import get_current_identity, get_project_service, require_roles

router = APIRouter()


@router.get("", response_model=List[ProjectResponse])
def list_projects(
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    project_service: ProjectService = Depends(get_project_service),
):
    """List projects, newest first"""
    return project_service.list_projects(db)


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int,
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    project_service: ProjectService = Depends(get_project_service),
):
    return project_service.get_project(db, project_id)


@router.post("", response_model=ProjectCreated, status_code=status.HTTP_201_CREATED)
def create_project(
    data: ProjectCreate,
    identity: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    project_service: ProjectService = Depends(get_project_service),
):
    """Create a project (admin only); the reference must be unique"""
    project = project_service.create_project(db, data, created_by=identity.id)
    return ProjectCreated(id=project.id)


@router.patch("/{project_id}", response_model=OkResponse)
def patch_project(
    project_id: int,
    data: ProjectPatch,
    _: Identity = Depends(require_roles("admin", "foreman")),
    db: Session = Depends(get_db),
    project_service: ProjectService = Depends(get_project_service),
):
    """Change a project's status or notes"""
    project_service.patch_project(db, project_id, data)
    return OkResponse()
