"""Calendar routes"""

from datetime import datetime
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from tbs.core.database import get_db
from tbs.core.security import Identity
from tbs.schemas.calendar import CalendarEventCreate, CalendarEventResponse, CalendarEventUpdate, TaskPushRequest
from tbs.schemas.response import MessageResponse
from tbs.services.calendar_service import CalendarService
from tbs.api.deps import get_calendar_service, get_current_identity, require_roles

router = APIRouter()


@router.get("/events", response_model=List[CalendarEventResponse])
def list_events(
    start: Optional[datetime] = Query(None, alias="from"),
    end: Optional[datetime] = Query(None, alias="to"),
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    """Events overlapping the ``from``/``to`` range (both optional)"""
    return calendar_service.list_events(db, start=start, end=end)


@router.post("/events", response_model=CalendarEventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    data: CalendarEventCreate,
    identity: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    return calendar_service.create_event(db, data, created_by=identity.id)


@router.put("/events/{event_id}", response_model=CalendarEventResponse)
def update_event(
    event_id: int,
    data: CalendarEventUpdate,
    _: Identity = Depends(require_roles("admin", "foreman")),
    db: Session = Depends(get_db),
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    return calendar_service.update_event(db, event_id, data)


@router.delete("/events/{event_id}", response_model=MessageResponse)
def delete_event(
    event_id: int,
    _: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    calendar_service.delete_event(db, event_id)
    return MessageResponse(message="Event deleted successfully")


@router.post("/tasks/{task_id}/push", response_model=CalendarEventResponse)
def push_task(
    task_id: int,
    response: Response,
    data: Optional[TaskPushRequest] = None,
    identity: Identity = Depends(require_roles("admin", "foreman")),
    db: Session = Depends(get_db),
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    """
    Schedule a task on the calendar from its dates

    Answers 201 when a new event is created and 200 when the task's
    existing event is refreshed.
    """
    event, created = calendar_service.push_task(db, task_id, data or TaskPushRequest(), pushed_by=identity.id)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return event
