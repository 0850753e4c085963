"""Pydantic schemas for API validation"""

from tbs.schemas.user import (
    UserRole,
    UserStatus,
    LoginRequest,
    LoginResponse,
    AccessTokenResponse,
    SessionUserResponse,
    UserResponse,
    StaffCreate,
    StaffUpdate,
)
from tbs.schemas.project import ProjectCreate, ProjectPatch, ProjectCreated, ProjectResponse, ProjectStatus
from tbs.schemas.contractor import ContractorCreate, ContractorUpdate, ContractorResponse, ContractorStatus
from tbs.schemas.task import TaskCreate, TaskUpdate, TaskResponse, TaskStatus, TaskPriority
from tbs.schemas.photo import PhotoCreate, PhotoUpdate, PhotoResponse, PhotoTag
from tbs.schemas.calendar import CalendarEventCreate, CalendarEventUpdate, CalendarEventResponse, TaskPushRequest
from tbs.schemas.metrics import DashboardMetrics
from tbs.schemas.response import ErrorResponse, OkResponse, MessageResponse, HealthResponse

__all__ = [
    "UserRole", "UserStatus", "LoginRequest", "LoginResponse", "AccessTokenResponse",
    "SessionUserResponse", "UserResponse", "StaffCreate", "StaffUpdate",
    "ProjectCreate", "ProjectPatch", "ProjectCreated", "ProjectResponse", "ProjectStatus",
    "ContractorCreate", "ContractorUpdate", "ContractorResponse", "ContractorStatus",
    "TaskCreate", "TaskUpdate", "TaskResponse", "TaskStatus", "TaskPriority",
    "PhotoCreate", "PhotoUpdate", "PhotoResponse", "PhotoTag",
    "CalendarEventCreate", "CalendarEventUpdate", "CalendarEventResponse", "TaskPushRequest",
    "DashboardMetrics",
    "ErrorResponse", "OkResponse", "MessageResponse", "HealthResponse",
]
