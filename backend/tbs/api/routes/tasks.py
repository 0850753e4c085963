"""Task routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from tbs.core.database import get_db
from tbs.core.security import Identity
from tbs.schemas.task import TaskCreate, TaskResponse, TaskStatus, TaskUpdate
from tbs.schemas.response import MessageResponse
from tbs.services.task_service import TaskService
from tbs.api.deps import get_current_identity, get_task_service, require_roles

router = APIRouter()


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    project_id: Optional[int] = Query(None),
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    assignee_staff_id: Optional[int] = Query(None),
    assignee_contractor_id: Optional[int] = Query(None),
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    task_service: TaskService = Depends(get_task_service),
):
    """
    List tasks with project and assignee details

    Ordered by priority (urgent first), then due date with undated tasks last.
    """
    return task_service.list_tasks(
        db,
        project_id=project_id,
        status=status_filter.value if status_filter else None,
        assignee_staff_id=assignee_staff_id,
        assignee_contractor_id=assignee_contractor_id,
    )


@router.get("/project/{project_id}", response_model=List[TaskResponse])
def list_project_tasks(
    project_id: int,
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    task_service: TaskService = Depends(get_task_service),
):
    return task_service.list_tasks(
        db,
        project_id=project_id,
        status=status_filter.value if status_filter else None,
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    task_service: TaskService = Depends(get_task_service),
):
    return task_service.get_task(db, task_id)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    data: TaskCreate,
    identity: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    task_service: TaskService = Depends(get_task_service),
):
    """Create a task on an existing project (admin only)"""
    return task_service.create_task(db, data, created_by=identity.id)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    data: TaskUpdate,
    _: Identity = Depends(require_roles("admin", "foreman")),
    db: Session = Depends(get_db),
    task_service: TaskService = Depends(get_task_service),
):
    return task_service.update_task(db, task_id, data)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    soft: bool = Query(True, description="Mark done instead of deleting the row"),
    _: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    task_service: TaskService = Depends(get_task_service),
):
    return MessageResponse(message=task_service.delete_task(db, task_id, soft=soft))
