# app/services/recruit_service.py
"""Onboarding profile a RECRUIT fills in while moving toward activation."""
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext
from app.core.db import transaction
from app.models.enums import RECRUIT_PROGRESS, RecruitStatus
from app.models.orm import RecruitProfile
from app.models.schemas import RecruitProfileResponse, RecruitProfileUpdate
from app.services.errors import NotFoundError

logger = logging.getLogger("nexus.services.recruits")


def to_response(profile: RecruitProfile) -> RecruitProfileResponse:
    return RecruitProfileResponse(
        id=profile.id,
        status=profile.status,
        progress=RECRUIT_PROGRESS[profile.status],
        phone=profile.phone,
        address=profile.address,
        city=profile.city,
        state=profile.state,
        zip_code=profile.zip_code,
        date_of_birth=profile.date_of_birth,
        submitted_at=profile.created_at,
        approved_at=profile.updated_at if profile.status == RecruitStatus.ACTIVATED else None,
    )


def _own_profile(db: Session, auth: AuthContext) -> RecruitProfile:
    profile = db.scalars(
        select(RecruitProfile).where(RecruitProfile.user_id == auth.user_id)
    ).first()
    if profile is None:
        raise NotFoundError("Recruit profile not found")
    return profile


def get_profile(db: Session, auth: AuthContext) -> RecruitProfileResponse:
    return to_response(_own_profile(db, auth))


def update_profile(db: Session, auth: AuthContext, payload: RecruitProfileUpdate) -> RecruitProfileResponse:
    fields = payload.model_dump(exclude_unset=True)
    with transaction(db):
        profile = _own_profile(db, auth)
        for key, value in fields.items():
            setattr(profile, key, value)
    db.refresh(profile)
    logger.info("Recruit profile %s updated (%s)", profile.id, ", ".join(fields) or "no fields")
    return to_response(profile)
