# app/services/lead_service.py
"""
Lead lifecycle: the dial-ready working set, call dispositions, and the
plain CRUD around a lead. Every function takes the caller's AuthContext
and only ever sees leads that caller owns.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext
from app.core.clock import as_naive_utc, utcnow
from app.core.config import (
    APPOINTMENT_DURATION_MIN,
    DIAL_READY_LIMIT,
    DIAL_RECENT_CALL_WINDOW_MIN,
)
from app.core.db import transaction
from app.models.enums import (
    ActivityType,
    DIALABLE_STATUSES,
    Disposition,
    LeadStatus,
    TaskPriority,
    TaskStatus,
)
from app.models.orm import Appointment, Lead, LeadActivity, LeadBatch, Task
from app.models.schemas import LeadCreate, LeadUpdate
from app.services.errors import DomainValidationError, NotFoundError

logger = logging.getLogger("nexus.services.leads")

# Outcome of a contact attempt -> the lead's next status. The prior status
# plays no part.
DISPOSITION_STATUS = {
    Disposition.NO_ANSWER: LeadStatus.CONTACTED,
    Disposition.NOT_INTERESTED: LeadStatus.DEAD,
    Disposition.CALLBACK: LeadStatus.CONTACTED,
    Disposition.SET: LeadStatus.SET,
    Disposition.SAT: LeadStatus.SAT,
    Disposition.SALE: LeadStatus.CLOSED,
    Disposition.DEAD: LeadStatus.DEAD,
}
if set(DISPOSITION_STATUS) != set(Disposition):
    raise RuntimeError("DISPOSITION_STATUS must map every Disposition")

# Fields a lead can never have cleared by an edit
_REQUIRED_FIELDS = {"first_name", "last_name", "phone", "source", "status"}


def next_status(disposition: Disposition) -> LeadStatus:
    return DISPOSITION_STATUS[disposition]


def _owned_lead(db: Session, auth: AuthContext, lead_id: int, *, for_update: bool = False) -> Lead:
    stmt = select(Lead).where(Lead.id == lead_id, Lead.owner_id == auth.user_id)
    if for_update:
        # Row lock on Postgres; SQLite serializes writers anyway
        stmt = stmt.with_for_update()
    lead = db.scalars(stmt).first()
    if lead is None:
        logger.info("Lead %s not found for user %s", lead_id, auth.user_id)
        raise NotFoundError(f"Lead {lead_id} not found")
    return lead


def _log(db: Session, lead: Lead, auth: AuthContext, type_: ActivityType, description: str,
         *, disposition: Optional[Disposition] = None, at: Optional[datetime] = None) -> LeadActivity:
    activity = LeadActivity(
        lead_id=lead.id,
        user_id=auth.user_id,
        type=type_,
        disposition=disposition,
        description=description,
        created_at=at or utcnow(),
    )
    db.add(activity)
    return activity


# -------------------
# Dial session
# -------------------
def dial_ready_leads(
    db: Session,
    auth: AuthContext,
    *,
    now: Optional[datetime] = None,
    window_min: int = DIAL_RECENT_CALL_WINDOW_MIN,
    limit: int = DIAL_READY_LIMIT,
) -> List[Lead]:
    """
    The caller's leads that can be dialed next.

    Eligible: status NEW or CONTACTED, and no call logged within the last
    `window_min` minutes. NEW sorts before CONTACTED, then oldest first,
    then the least-worked lead (fewest activities) first.
    """
    now = now or utcnow()
    cutoff = now - timedelta(minutes=window_min)

    recently_called = (
        select(LeadActivity.id)
        .where(
            LeadActivity.lead_id == Lead.id,
            LeadActivity.type == ActivityType.CALL,
            LeadActivity.created_at >= cutoff,
        )
        .exists()
    )
    activity_count = (
        select(func.count(LeadActivity.id))
        .where(LeadActivity.lead_id == Lead.id)
        .correlate(Lead)
        .scalar_subquery()
    )
    status_rank = case((Lead.status == LeadStatus.NEW, 0), else_=1)

    stmt = (
        select(Lead)
        .where(
            Lead.owner_id == auth.user_id,
            Lead.status.in_(DIALABLE_STATUSES),
            ~recently_called,
        )
        .order_by(status_rank, Lead.created_at.asc(), activity_count.asc(), Lead.id.asc())
        .limit(limit)
    )
    leads = list(db.scalars(stmt))
    logger.info("Dial-ready for user %s: %d leads", auth.user_id, len(leads))
    return leads


def record_disposition(
    db: Session,
    auth: AuthContext,
    lead_id: int,
    disposition: Disposition,
    *,
    notes: Optional[str] = None,
    callback_date: Optional[datetime] = None,
    appointment_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> Lead:
    """
    Apply the outcome of one contact attempt.

    Status write, activity row and any appointment/task are committed
    together; if any of them fails nothing is written and the error
    propagates to the caller, who may resubmit.
    """
    now = now or utcnow()

    with transaction(db):
        lead = _owned_lead(db, auth, lead_id, for_update=True)
        new_status = next_status(disposition)

        lead.status = new_status
        lead.updated_at = now

        description = f"Lead status changed to {new_status.value}. Disposition: {disposition.value}."
        if notes and notes.strip():
            description = f"{description} {notes.strip()}"
        _log(db, lead, auth, ActivityType.STATUS_CHANGE, description, disposition=disposition, at=now)

        if disposition == Disposition.SET and appointment_date is not None:
            start = as_naive_utc(appointment_date)
            db.add(Appointment(
                title=f"Appointment with {lead.full_name}",
                start_time=start,
                end_time=start + timedelta(minutes=APPOINTMENT_DURATION_MIN),
                user_id=auth.user_id,
                lead_id=lead.id,
            ))

        if disposition == Disposition.CALLBACK and callback_date is not None:
            db.add(Task(
                title=f"Call back {lead.full_name}",
                description="Scheduled callback from lead disposition",
                priority=TaskPriority.MEDIUM,
                status=TaskStatus.PENDING,
                due_date=as_naive_utc(callback_date),
                created_by_id=auth.user_id,
                assigned_to_id=auth.user_id,
                lead_id=lead.id,
            ))

    db.refresh(lead)
    logger.info(
        "Disposition %s on lead %s by user %s -> %s",
        disposition.value, lead.id, auth.user_id, lead.status.value,
    )
    return lead


def log_call(db: Session, auth: AuthContext, lead_id: int, notes: Optional[str] = None,
             *, now: Optional[datetime] = None) -> LeadActivity:
    """Record a dial attempt. Holds the lead back from the dial list for the re-dial window."""
    with transaction(db):
        lead = _owned_lead(db, auth, lead_id)
        description = f"Call dialed to {lead.phone}."
        if notes and notes.strip():
            description = f"{description} {notes.strip()}"
        activity = _log(db, lead, auth, ActivityType.CALL, description, at=now)
    db.refresh(activity)
    logger.info("Call logged on lead %s by user %s", lead_id, auth.user_id)
    return activity


# -------------------
# CRUD
# -------------------
def list_leads(
    db: Session,
    auth: AuthContext,
    *,
    status: Optional[LeadStatus] = None,
    source=None,
    search: Optional[str] = None,
) -> List[Tuple[Lead, Optional[datetime]]]:
    """Caller's leads, newest first, each paired with its latest activity time."""
    last_contact = (
        select(func.max(LeadActivity.created_at))
        .where(LeadActivity.lead_id == Lead.id)
        .correlate(Lead)
        .scalar_subquery()
    )
    stmt = select(Lead, last_contact).where(Lead.owner_id == auth.user_id)
    if status is not None:
        stmt = stmt.where(Lead.status == status)
    if source is not None:
        stmt = stmt.where(Lead.source == source)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(
            Lead.first_name.ilike(pattern),
            Lead.last_name.ilike(pattern),
            Lead.email.ilike(pattern),
            Lead.phone.like(pattern),
        ))
    stmt = stmt.order_by(Lead.created_at.desc(), Lead.id.desc())
    return [(lead, ts) for lead, ts in db.execute(stmt).all()]


def get_lead(db: Session, auth: AuthContext, lead_id: int) -> Lead:
    return _owned_lead(db, auth, lead_id)


def create_lead(db: Session, auth: AuthContext, payload: LeadCreate) -> Lead:
    with transaction(db):
        if payload.batch_id is not None:
            batch = db.scalars(
                select(LeadBatch).where(
                    LeadBatch.id == payload.batch_id, LeadBatch.owner_id == auth.user_id
                )
            ).first()
            if batch is None:
                raise NotFoundError(f"Lead batch {payload.batch_id} not found")

        lead = Lead(
            owner_id=auth.user_id,
            status=LeadStatus.NEW,
            **payload.model_dump(),
        )
        db.add(lead)
        db.flush()  # get id
        _log(db, lead, auth, ActivityType.CREATED, "Lead created manually")

    db.refresh(lead)
    logger.info("Lead %s created by user %s", lead.id, auth.user_id)
    return lead


def update_lead(db: Session, auth: AuthContext, lead_id: int, payload: LeadUpdate) -> Lead:
    fields = payload.model_dump(exclude_unset=True)
    if not fields:
        raise DomainValidationError("No fields to update")
    cleared = sorted(k for k in _REQUIRED_FIELDS if k in fields and fields[k] is None)
    if cleared:
        raise DomainValidationError(f"Fields cannot be empty: {', '.join(cleared)}")

    with transaction(db):
        lead = _owned_lead(db, auth, lead_id, for_update=True)
        for key, value in fields.items():
            setattr(lead, key, value)
        lead.updated_at = utcnow()
        _log(db, lead, auth, ActivityType.UPDATED, f"Lead updated: {', '.join(fields)}")

    db.refresh(lead)
    logger.info("Lead %s updated by user %s (%s)", lead.id, auth.user_id, ", ".join(fields))
    return lead


def delete_lead(db: Session, auth: AuthContext, lead_id: int) -> Lead:
    """Soft delete: the row stays, the status becomes DEAD."""
    with transaction(db):
        lead = _owned_lead(db, auth, lead_id, for_update=True)
        lead.status = LeadStatus.DEAD
        lead.updated_at = utcnow()
        _log(db, lead, auth, ActivityType.DELETED, "Lead marked as dead")

    db.refresh(lead)
    logger.info("Lead %s marked dead by user %s", lead.id, auth.user_id)
    return lead
