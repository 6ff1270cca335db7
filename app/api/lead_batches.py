import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext, require_access
from app.auth.policy import Resource
from app.core.db import get_db
from app.models.schemas import LeadBatchCreate, LeadBatchResponse
from app.services import batch_service

router = APIRouter()
logger = logging.getLogger("nexus.api.lead_batches")


@router.get("", response_model=List[LeadBatchResponse])
def list_batches(auth: AuthContext = Depends(require_access(Resource.CRM)), db: Session = Depends(get_db)):
    batches = batch_service.list_batches(db, auth)
    logger.info("GET /lead-batches user=%s count=%d", auth.user_id, len(batches))
    return batches


@router.post("", response_model=LeadBatchResponse, status_code=201)
def create_batch(
    payload: LeadBatchCreate,
    auth: AuthContext = Depends(require_access(Resource.CRM)),
    db: Session = Depends(get_db),
):
    return batch_service.create_batch(db, auth, payload)
