"""Calendar event schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from tbs.core.security import to_naive_utc


class CalendarEventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    start: datetime
    end: Optional[datetime] = None
    all_day: bool = False
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    project_id: Optional[int] = Field(None, gt=0)
    task_id: Optional[int] = Field(None, gt=0)

    @model_validator(mode="after")
    def check_range(self):
        if self.end is not None and to_naive_utc(self.end) < to_naive_utc(self.start):
            raise ValueError("end must not be before start")
        return self


class CalendarEventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    all_day: Optional[bool] = None
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class TaskPushRequest(BaseModel):
    all_day: bool = True
    location: Optional[str] = Field(None, max_length=255)


class CalendarEventResponse(BaseModel):
    id: int
    title: str
    start: datetime
    end: Optional[datetime] = None
    all_day: bool
    location: Optional[str] = None
    notes: Optional[str] = None
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    status: Optional[str] = None
    created_by: Optional[int] = None
