"""Dashboard metrics schemas"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class StatusBreakdown(BaseModel):
    total: int
    by_status: Dict[str, int] = Field(..., alias="byStatus")

    class Config:
        populate_by_name = True


class RoleBreakdown(BaseModel):
    total: int
    by_role: Dict[str, int] = Field(..., alias="byRole")

    class Config:
        populate_by_name = True


class ContractorCounts(BaseModel):
    active: int


class ActivityEntry(BaseModel):
    type: str
    description: str
    timestamp: Optional[datetime] = None
    user: str


class DashboardMetrics(BaseModel):
    projects: StatusBreakdown
    tasks: StatusBreakdown
    staff: RoleBreakdown
    contractors: ContractorCounts
    recent_activity: List[ActivityEntry] = Field(..., alias="recentActivity")

    class Config:
        populate_by_name = True
