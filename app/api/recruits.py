from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext, require_access
from app.auth.policy import Resource
from app.core.db import get_db
from app.models.schemas import RecruitProfileResponse, RecruitProfileUpdate
from app.services import recruit_service

router = APIRouter()

recruit = require_access(Resource.RECRUIT)


@router.get("/profile", response_model=RecruitProfileResponse)
def get_profile(auth: AuthContext = Depends(recruit), db: Session = Depends(get_db)):
    return recruit_service.get_profile(db, auth)


@router.put("/profile", response_model=RecruitProfileResponse)
def update_profile(
    payload: RecruitProfileUpdate,
    auth: AuthContext = Depends(recruit),
    db: Session = Depends(get_db),
):
    return recruit_service.update_profile(db, auth, payload)
