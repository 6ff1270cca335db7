# app/services/batch_service.py
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.auth.permissions import AuthContext
from app.core.config import BATCH_AVERAGE_PREMIUM
from app.core.db import transaction
from app.models.enums import CONTACTED_STATUSES, LeadStatus, VendorType
from app.models.orm import LeadBatch, Vendor
from app.models.schemas import LeadBatchCreate, LeadBatchResponse
from app.services.errors import NotFoundError

logger = logging.getLogger("nexus.services.batches")


def _pct(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def batch_metrics(batch: LeadBatch, average_premium: float = BATCH_AVERAGE_PREMIUM) -> LeadBatchResponse:
    """
    Contact/conversion rates over the batch's leads, and ROI assuming each
    CLOSED lead is worth `average_premium`.
    """
    total = len(batch.leads)
    contacted = sum(1 for l in batch.leads if l.status in CONTACTED_STATUSES)
    closed = sum(1 for l in batch.leads if l.status == LeadStatus.CLOSED)

    cost = float(batch.cost or 0)
    revenue = closed * average_premium
    roi = ((revenue - cost) / cost) * 100 if cost > 0 else 0.0

    return LeadBatchResponse(
        id=batch.id,
        name=batch.name,
        cost=cost,
        size=batch.size,
        purchase_date=batch.purchase_date,
        vendor=batch.vendor.name if batch.vendor else "Unknown",
        vendor_type=batch.vendor.type if batch.vendor else VendorType.THIRD_PARTY,
        total_leads=total,
        contacted_leads=contacted,
        closed_leads=closed,
        contact_rate=_pct(contacted, total),
        conversion_rate=_pct(closed, total),
        roi=round(roi, 2),
    )


def list_batches(db: Session, auth: AuthContext) -> List[LeadBatchResponse]:
    stmt = (
        select(LeadBatch)
        .where(LeadBatch.owner_id == auth.user_id)
        .options(selectinload(LeadBatch.leads), selectinload(LeadBatch.vendor))
        .order_by(LeadBatch.purchase_date.desc(), LeadBatch.id.desc())
    )
    return [batch_metrics(b) for b in db.scalars(stmt)]


def create_batch(db: Session, auth: AuthContext, payload: LeadBatchCreate) -> LeadBatchResponse:
    with transaction(db):
        vendor: Optional[Vendor] = None
        if payload.vendor_id is not None:
            vendor = db.get(Vendor, payload.vendor_id)
            if vendor is None:
                raise NotFoundError(f"Vendor {payload.vendor_id} not found")
        batch = LeadBatch(
            owner_id=auth.user_id,
            vendor_id=vendor.id if vendor else None,
            name=payload.name,
            cost=payload.cost,
            size=payload.size,
        )
        db.add(batch)

    db.refresh(batch)
    logger.info("Lead batch %s created by user %s (cost=%.2f size=%d)",
                batch.id, auth.user_id, batch.cost, batch.size)
    return batch_metrics(batch)
