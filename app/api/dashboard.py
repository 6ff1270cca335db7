import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext, require_access
from app.auth.policy import Resource
from app.core.db import get_db
from app.models.schemas import DailyMetrics, DashboardStats
from app.services import dashboard_service

router = APIRouter()
logger = logging.getLogger("nexus.api.dashboard")


@router.get("/stats", response_model=DashboardStats)
def stats(auth: AuthContext = Depends(require_access(Resource.DASHBOARD)), db: Session = Depends(get_db)):
    out = dashboard_service.agent_stats(db, auth)
    logger.info("GET /dashboard/stats user=%s leads=%d", auth.user_id, out.total_leads)
    return out


@router.get("/metrics", response_model=DailyMetrics)
def metrics(auth: AuthContext = Depends(require_access(Resource.DASHBOARD)), db: Session = Depends(get_db)):
    return dashboard_service.daily_metrics(db, auth)
