from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext, require_access
from app.auth.policy import Resource
from app.core.db import get_db
from app.models.schemas import TeamMember, TeamStats
from app.services import dashboard_service

router = APIRouter()

manager = require_access(Resource.MANAGER)


@router.get("/stats", response_model=TeamStats)
def team_stats(auth: AuthContext = Depends(manager), db: Session = Depends(get_db)):
    return dashboard_service.team_stats(db, auth)


@router.get("/members", response_model=List[TeamMember])
def team_members(auth: AuthContext = Depends(manager), db: Session = Depends(get_db)):
    """Agents of the caller's agency, newest first."""
    return dashboard_service.team_members(db, auth)
