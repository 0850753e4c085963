"""Photo schemas"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PhotoTag(str, Enum):
    BEFORE = "before"
    DURING = "during"
    AFTER = "after"


class PhotoCreate(BaseModel):
    project_id: int = Field(..., gt=0, alias="projectId")
    task_id: Optional[int] = Field(None, gt=0, alias="taskId")
    caption: Optional[str] = Field(None, max_length=500)
    tag: PhotoTag = PhotoTag.DURING
    file_path: Optional[str] = Field(None, max_length=500, alias="filePath")

    class Config:
        populate_by_name = True


class PhotoUpdate(BaseModel):
    caption: Optional[str] = Field(None, max_length=500)
    tag: Optional[PhotoTag] = None


class PhotoResponse(BaseModel):
    id: int
    project_id: int
    task_id: Optional[int] = None
    uploaded_by: Optional[int] = None
    file_path: Optional[str] = None
    caption: Optional[str] = None
    tag: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    project_ref: Optional[str] = None
    project_address: Optional[str] = None
