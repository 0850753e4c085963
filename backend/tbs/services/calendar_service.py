"""Calendar service - scheduled events and task pushes"""

from datetime import date, datetime, time
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Tuple
import logging

from tbs.models.calendar import CalendarEvent
from tbs.models.project import Project
from tbs.models.task import Task
from tbs.schemas.calendar import CalendarEventCreate, CalendarEventUpdate, TaskPushRequest
from tbs.core.exceptions import ResourceNotFoundError, ValidationError
from tbs.core.security import to_naive_utc, utcnow

WORKDAY_START = time(8, 0)
WORKDAY_END = time(17, 0)
DAY_END = time(23, 59, 59)


def _to_dict(event: CalendarEvent) -> Dict[str, Any]:
    return {
        "id": event.id,
        "title": event.title,
        "start": event.start_at,
        "end": event.end_at,
        "all_day": event.all_day,
        "location": event.location,
        "notes": event.notes,
        "project_id": event.project_id,
        "task_id": event.task_id,
        "status": event.task.status if event.task is not None else None,
        "created_by": event.created_by,
    }


def task_window(task: Task, all_day: bool) -> Tuple[datetime, datetime]:
    """
    Start and end of the calendar slot for a task

    The first available of start date, due date and end date opens the slot;
    it closes on the end date, else the due date, else the opening day.

    Raises:
        ValidationError: The task has no dates at all
    """
    first_day: Optional[date] = task.start_date or task.due_date or task.end_date
    if first_day is None:
        raise ValidationError("Task has no start, end or due date to schedule")

    last_day = task.end_date or task.due_date or first_day
    if last_day < first_day:
        last_day = first_day

    if all_day:
        return datetime.combine(first_day, time.min), datetime.combine(last_day, DAY_END)
    return datetime.combine(first_day, WORKDAY_START), datetime.combine(last_day, WORKDAY_END)


class CalendarService:
    """Service for calendar events"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _get_or_404(db: Session, event_id: int) -> CalendarEvent:
        event = db.query(CalendarEvent).filter(CalendarEvent.id == event_id).first()
        if not event:
            raise ResourceNotFoundError("Event")
        return event

    def list_events(
        self,
        db: Session,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """
        Events overlapping the [start, end] range, earliest first

        An event without an end occupies only its start instant.
        """
        query = db.query(CalendarEvent)
        start, end = to_naive_utc(start), to_naive_utc(end)
        if start is not None:
            query = query.filter(func.coalesce(CalendarEvent.end_at, CalendarEvent.start_at) >= start)
        if end is not None:
            query = query.filter(CalendarEvent.start_at <= end)
        events = query.order_by(CalendarEvent.start_at, CalendarEvent.id).all()
        return [_to_dict(event) for event in events]

    def get_event(self, db: Session, event_id: int) -> Dict[str, Any]:
        return _to_dict(self._get_or_404(db, event_id))

    def _check_links(self, db: Session, project_id: Optional[int], task_id: Optional[int]) -> None:
        if project_id is not None and not db.query(Project.id).filter(Project.id == project_id).first():
            raise ValidationError("Project not found")
        if task_id is not None:
            if not db.query(Task.id).filter(Task.id == task_id).first():
                raise ValidationError("Task not found")
            if db.query(CalendarEvent.id).filter(CalendarEvent.task_id == task_id).first():
                raise ValidationError("Task is already on the calendar")

    def create_event(self, db: Session, data: CalendarEventCreate, created_by: int) -> Dict[str, Any]:
        self._check_links(db, data.project_id, data.task_id)

        event = CalendarEvent(
            title=data.title,
            start_at=to_naive_utc(data.start),
            end_at=to_naive_utc(data.end),
            all_day=data.all_day,
            location=data.location,
            notes=data.notes,
            project_id=data.project_id,
            task_id=data.task_id,
            created_by=created_by,
        )
        db.add(event)
        db.commit()
        db.refresh(event)

        self.logger.info("Calendar event created", extra={"event_id": event.id, "user_id": created_by})
        return _to_dict(event)

    def update_event(self, db: Session, event_id: int, data: CalendarEventUpdate) -> Dict[str, Any]:
        event = self._get_or_404(db, event_id)
        changes = data.model_dump(exclude_unset=True)

        start = to_naive_utc(changes["start"]) if changes.get("start") is not None else event.start_at
        end = to_naive_utc(changes["end"]) if "end" in changes else event.end_at
        if end is not None and end < start:
            raise ValidationError("end must not be before start")

        event.start_at = start
        event.end_at = end
        if changes.get("title"):
            event.title = changes["title"]
        if changes.get("all_day") is not None:
            event.all_day = changes["all_day"]
        for field in ("location", "notes"):
            if field in changes:
                setattr(event, field, changes[field])
        event.updated_at = utcnow()

        db.commit()
        db.refresh(event)

        self.logger.info("Calendar event updated", extra={"event_id": event_id, "fields": sorted(changes)})
        return _to_dict(event)

    def delete_event(self, db: Session, event_id: int) -> None:
        event = self._get_or_404(db, event_id)
        db.delete(event)
        db.commit()

        self.logger.info("Calendar event deleted", extra={"event_id": event_id})

    def push_task(
        self,
        db: Session,
        task_id: int,
        data: TaskPushRequest,
        pushed_by: int,
    ) -> Tuple[Dict[str, Any], bool]:
        """
        Put a task on the calendar, or refresh the event already linked to it

        Returns:
            (event, created) where created is False when an existing event
            was updated
        """
        task = db.query(Task).filter(Task.id == task_id).first()
        if not task:
            raise ResourceNotFoundError("Task")

        start_at, end_at = task_window(task, data.all_day)
        location = data.location
        if location is None and task.project is not None:
            location = task.project.address

        event = db.query(CalendarEvent).filter(CalendarEvent.task_id == task.id).first()
        created = event is None
        if created:
            event = CalendarEvent(task_id=task.id, created_by=pushed_by)
            db.add(event)
        else:
            event.updated_at = utcnow()

        event.title = task.title
        event.start_at = start_at
        event.end_at = end_at
        event.all_day = data.all_day
        event.location = location
        event.project_id = task.project_id

        db.commit()
        db.refresh(event)

        self.logger.info(
            "Task pushed to calendar",
            extra={"task_id": task.id, "event_id": event.id, "event_created": created, "user_id": pushed_by},
        )
        return _to_dict(event), created
