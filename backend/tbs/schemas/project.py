"""Project schemas"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ProjectStatus(str, Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETE = "complete"


class ProjectCreate(BaseModel):
    ref: str = Field(..., min_length=1, max_length=50)
    address: str = Field(..., min_length=1, max_length=255)
    client_name: Optional[str] = Field(None, max_length=120)
    start_date: Optional[date] = None
    end_date_est: Optional[date] = None
    notes: Optional[str] = None


class ProjectPatch(BaseModel):
    status: Optional[ProjectStatus] = None
    notes: Optional[str] = None


class ProjectCreated(BaseModel):
    id: int


class ProjectResponse(BaseModel):
    id: int
    ref: str
    address: str
    client_name: Optional[str] = None
    status: str
    start_date: Optional[date] = None
    end_date_est: Optional[date] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
