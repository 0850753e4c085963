"""Dashboard metrics service"""

from datetime import timedelta
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional
import logging

from tbs.models.contractor import Contractor
from tbs.models.project import Project
from tbs.models.task import Task
from tbs.models.user import User
from tbs.core.security import utcnow

RECENT_ACTIVITY_DAYS = 7
RECENT_ACTIVITY_LIMIT = 10


def _grouped_counts(db: Session, column) -> Dict[str, int]:
    rows = db.query(column, func.count()).group_by(column).all()
    return {key: int(count) for key, count in rows}


class MetricsService:
    """Counts for the back-office dashboard"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def overview(self, db: Session, user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Project, task and staff breakdowns plus recent project activity

        Recent activity lists projects created in the last seven days,
        newest first, at most ten.
        """
        projects = _grouped_counts(db, Project.status)
        tasks = _grouped_counts(db, Task.status)
        staff = _grouped_counts(db, User.role)
        active_contractors = db.query(func.count(Contractor.id)).filter(Contractor.status == "active").scalar() or 0

        since = utcnow() - timedelta(days=RECENT_ACTIVITY_DAYS)
        recent = (
            db.query(Project.ref, Project.created_at)
            .filter(Project.created_at >= since)
            .order_by(Project.created_at.desc(), Project.id.desc())
            .limit(RECENT_ACTIVITY_LIMIT)
            .all()
        )

        metrics = {
            "projects": {"total": sum(projects.values()), "by_status": projects},
            "tasks": {"total": sum(tasks.values()), "by_status": tasks},
            "staff": {"total": sum(staff.values()), "by_role": staff},
            "contractors": {"active": int(active_contractors)},
            "recent_activity": [
                {
                    "type": "project_created",
                    "description": f"New project '{ref}' started",
                    "timestamp": created_at,
                    "user": "System",
                }
                for ref, created_at in recent
            ],
        }

        self.logger.info(
            "Dashboard metrics retrieved",
            extra={
                "user_id": user_id,
                "projects_total": metrics["projects"]["total"],
                "tasks_total": metrics["tasks"]["total"],
                "staff_total": metrics["staff"]["total"],
            },
        )
        return metrics
