"""Database models"""

from tbs.models.user import User
from tbs.models.security import RefreshToken
from tbs.models.project import Project
from tbs.models.contractor import Contractor
from tbs.models.task import Task
from tbs.models.photo import Photo
from tbs.models.calendar import CalendarEvent

__all__ = ["User", "RefreshToken", "Project", "Contractor", "Task", "Photo", "CalendarEvent"]
