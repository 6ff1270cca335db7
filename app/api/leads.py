from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext, require_access
from app.auth.policy import Resource
from app.core.db import get_db
from app.models.enums import LeadSource, LeadStatus
from app.models.orm import Lead
from app.models.schemas import (
    ActivityResponse,
    CallLogRequest,
    DialReadyLead,
    DispositionRequest,
    LeadBatchSummary,
    LeadCreate,
    LeadDetail,
    LeadListItem,
    LeadResponse,
    LeadUpdate,
)
from app.services import lead_service

router = APIRouter()
logger = logging.getLogger("nexus.api.leads")

crm_user = require_access(Resource.CRM)
dialer = require_access(Resource.DIAL)


def _activity(a) -> ActivityResponse:
    return ActivityResponse(
        id=a.id,
        type=a.type,
        disposition=a.disposition,
        description=a.description,
        user_id=a.user_id,
        user_name=a.user.name if a.user else None,
        created_at=a.created_at,
    )


def _detail(lead: Lead) -> LeadDetail:
    batch = None
    if lead.batch is not None:
        batch = LeadBatchSummary(
            id=lead.batch.id,
            name=lead.batch.name,
            vendor=lead.batch.vendor.name if lead.batch.vendor else "Unknown",
        )
    return LeadDetail(
        **LeadResponse.model_validate(lead).model_dump(),
        activities=[_activity(a) for a in lead.activities],
        batch=batch,
    )


# Registered before /{lead_id} so "dial-ready" is never parsed as an id
@router.get("/dial-ready", response_model=List[DialReadyLead])
def dial_ready(auth: AuthContext = Depends(dialer), db: Session = Depends(get_db)):
    return lead_service.dial_ready_leads(db, auth)


@router.post("/{lead_id}/disposition", response_model=LeadResponse)
def disposition(
    lead_id: int,
    payload: DispositionRequest,
    auth: AuthContext = Depends(dialer),
    db: Session = Depends(get_db),
):
    return lead_service.record_disposition(
        db,
        auth,
        lead_id,
        payload.disposition,
        notes=payload.notes,
        callback_date=payload.callback_date,
        appointment_date=payload.appointment_date,
    )


@router.post("/{lead_id}/calls", response_model=ActivityResponse, status_code=201)
def log_call(
    lead_id: int,
    payload: Optional[CallLogRequest] = None,
    auth: AuthContext = Depends(dialer),
    db: Session = Depends(get_db),
):
    activity = lead_service.log_call(db, auth, lead_id, payload.notes if payload else None)
    return _activity(activity)


@router.get("", response_model=List[LeadListItem])
def list_leads(
    status: Optional[LeadStatus] = Query(None),
    source: Optional[LeadSource] = Query(None),
    search: Optional[str] = Query(None, max_length=120),
    auth: AuthContext = Depends(crm_user),
    db: Session = Depends(get_db),
):
    rows = lead_service.list_leads(db, auth, status=status, source=source, search=search)
    out = []
    for lead, last_contact in rows:
        item = LeadListItem.model_validate(lead)
        item.last_contact = last_contact
        out.append(item)
    logger.info("Returning %d leads for user %s", len(out), auth.user_id)
    return out


@router.post("", response_model=LeadResponse, status_code=201)
def create_lead(payload: LeadCreate, auth: AuthContext = Depends(crm_user), db: Session = Depends(get_db)):
    return lead_service.create_lead(db, auth, payload)


@router.get("/{lead_id}", response_model=LeadDetail)
def get_lead(lead_id: int, auth: AuthContext = Depends(crm_user), db: Session = Depends(get_db)):
    return _detail(lead_service.get_lead(db, auth, lead_id))


@router.put("/{lead_id}", response_model=LeadResponse)
def update_lead(
    lead_id: int,
    payload: LeadUpdate,
    auth: AuthContext = Depends(crm_user),
    db: Session = Depends(get_db),
):
    return lead_service.update_lead(db, auth, lead_id, payload)


@router.delete("/{lead_id}", response_model=LeadResponse)
def delete_lead(lead_id: int, auth: AuthContext = Depends(crm_user), db: Session = Depends(get_db)):
    """Soft delete: the lead is kept with status DEAD and returned."""
    return lead_service.delete_lead(db, auth, lead_id)
