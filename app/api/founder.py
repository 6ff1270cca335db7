from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext, require_access
from app.auth.policy import Resource
from app.core.db import get_db
from app.models.schemas import AgencySummary, FounderStats
from app.services import dashboard_service

router = APIRouter()

founder = require_access(Resource.FOUNDER)


@router.get("/stats", response_model=FounderStats)
def founder_stats(auth: AuthContext = Depends(founder), db: Session = Depends(get_db)):
    return dashboard_service.founder_stats(db)


@router.get("/agencies", response_model=List[AgencySummary])
def agencies(auth: AuthContext = Depends(founder), db: Session = Depends(get_db)):
    return dashboard_service.agency_summaries(db)
