"""Dashboard metrics routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tbs.core.database import get_db
from tbs.core.security import Identity
from tbs.schemas.metrics import DashboardMetrics
from tbs.services.metrics_service import MetricsService
from tbs.api.deps import get_current_identity, get_metrics_service

router = APIRouter()


@router.get("/overview", response_model=DashboardMetrics)
def get_overview(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    metrics_service: MetricsService = Depends(get_metrics_service),
):
    """Counts by status and role plus projects created in the last week"""
    return metrics_service.overview(db, user_id=identity.id)
