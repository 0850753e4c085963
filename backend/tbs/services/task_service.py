"""Task service - scheduling work on projects"""

from sqlalchemy import case
from sqlalchemy.orm import Session, aliased
from typing import Any, Dict, List, Optional
import logging

from tbs.models.contractor import Contractor
from tbs.models.project import Project
from tbs.models.task import Task
from tbs.models.user import User
from tbs.schemas.task import TaskCreate, TaskUpdate
from tbs.core.exceptions import ResourceNotFoundError, ValidationError
from tbs.core.security import utcnow

Staff = aliased(User, name="staff")

PRIORITY_RANK = {"urgent": 0, "high": 1, "medium": 2, "low": 3}

# Columns that cannot be cleared through an update
_NOT_NULL_FIELDS = {"title", "status", "priority"}


def _priority_order():
    return case(PRIORITY_RANK, value=Task.priority, else_=len(PRIORITY_RANK))


def _undated_last():
    return case((Task.due_date.is_(None), 1), else_=0)


def _to_dict(row) -> Dict[str, Any]:
    task, project_ref, project_address, staff_name, contractor_company, contractor_contact = row
    data = {column.key: getattr(task, column.key) for column in Task.__table__.columns}
    data.update(
        project_ref=project_ref,
        project_address=project_address,
        staff_name=staff_name,
        contractor_company=contractor_company,
        contractor_contact=contractor_contact,
    )
    return data


class TaskService:
    """Service for project tasks"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _joined_query(db: Session):
        return (
            db.query(
                Task,
                Project.ref,
                Project.address,
                Staff.name,
                Contractor.company,
                Contractor.contact_name,
            )
            .outerjoin(Project, Task.project_id == Project.id)
            .outerjoin(Staff, Task.assignee_staff_id == Staff.id)
            .outerjoin(Contractor, Task.assignee_contractor_id == Contractor.id)
        )

    def list_tasks(
        self,
        db: Session,
        project_id: Optional[int] = None,
        status: Optional[str] = None,
        assignee_staff_id: Optional[int] = None,
        assignee_contractor_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Tasks with project and assignee details

        Most urgent first; within a priority, earliest due date first and
        undated tasks last.
        """
        query = self._joined_query(db)
        if project_id is not None:
            query = query.filter(Task.project_id == project_id)
        if status:
            query = query.filter(Task.status == status)
        if assignee_staff_id is not None:
            query = query.filter(Task.assignee_staff_id == assignee_staff_id)
        if assignee_contractor_id is not None:
            query = query.filter(Task.assignee_contractor_id == assignee_contractor_id)

        rows = query.order_by(_priority_order(), _undated_last(), Task.due_date, Task.id).all()
        return [_to_dict(row) for row in rows]

    def get_task(self, db: Session, task_id: int) -> Dict[str, Any]:
        row = self._joined_query(db).filter(Task.id == task_id).first()
        if not row:
            raise ResourceNotFoundError("Task")
        return _to_dict(row)

    @staticmethod
    def _check_assignees(db: Session, staff_id: Optional[int], contractor_id: Optional[int]) -> None:
        if staff_id is not None and not db.query(User.id).filter(User.id == staff_id).first():
            raise ValidationError("Staff member not found")
        if contractor_id is not None and not db.query(Contractor.id).filter(Contractor.id == contractor_id).first():
            raise ValidationError("Contractor not found")

    def create_task(self, db: Session, data: TaskCreate, created_by: Optional[int] = None) -> Dict[str, Any]:
        """
        Create a task on an existing project

        Raises:
            ValidationError: Unknown project or assignee
        """
        if not db.query(Project.id).filter(Project.id == data.project_id).first():
            self.logger.warning("Task creation failed - project not found", extra={"project_id": data.project_id})
            raise ValidationError("Project not found")
        self._check_assignees(db, data.assignee_staff_id, data.assignee_contractor_id)

        values = data.model_dump()
        values["status"] = data.status.value
        values["priority"] = data.priority.value
        task = Task(**values)
        db.add(task)
        db.commit()

        self.logger.info(
            "Task created",
            extra={"task_id": task.id, "project_id": task.project_id, "priority": task.priority, "user_id": created_by},
        )
        return self.get_task(db, task.id)

    def update_task(self, db: Session, task_id: int, data: TaskUpdate) -> Dict[str, Any]:
        task = db.query(Task).filter(Task.id == task_id).first()
        if not task:
            raise ResourceNotFoundError("Task")

        changes = data.model_dump(exclude_unset=True)
        self._check_assignees(db, changes.get("assignee_staff_id"), changes.get("assignee_contractor_id"))

        for field, value in changes.items():
            if value is None and field in _NOT_NULL_FIELDS:
                continue
            setattr(task, field, value.value if hasattr(value, "value") else value)
        task.updated_at = utcnow()

        db.commit()

        self.logger.info("Task updated", extra={"task_id": task_id, "fields": sorted(changes)})
        return self.get_task(db, task_id)

    def delete_task(self, db: Session, task_id: int, soft: bool = True) -> str:
        """
        Remove a task from the active board

        Soft deletion marks the task done; hard deletion drops the row.

        Returns:
            Message describing what happened
        """
        task = db.query(Task).filter(Task.id == task_id).first()
        if not task:
            raise ResourceNotFoundError("Task")

        if soft:
            task.status = "done"
            task.updated_at = utcnow()
            db.commit()
            self.logger.info("Task marked as completed", extra={"task_id": task_id})
            return "Task marked as completed"

        db.delete(task)
        db.commit()
        self.logger.info("Task deleted", extra={"task_id": task_id})
        return "Task deleted successfully"
