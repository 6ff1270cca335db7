# app/services/finance_service.py
import logging
from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext
from app.core.db import transaction
from app.models.orm import FinanceTransaction
from app.models.schemas import TransactionCreate, TransactionResponse

logger = logging.getLogger("nexus.services.finance")

RECENT_LIMIT = 100


def to_response(txn: FinanceTransaction) -> TransactionResponse:
    return TransactionResponse(
        id=txn.id,
        type=txn.type,
        amount=float(txn.amount),
        category=txn.category,
        description=txn.description or "",
        txn_date=txn.txn_date.date(),
    )


def recent_transactions(db: Session, auth: AuthContext, limit: int = RECENT_LIMIT) -> List[TransactionResponse]:
    stmt = (
        select(FinanceTransaction)
        .where(FinanceTransaction.user_id == auth.user_id)
        .order_by(FinanceTransaction.txn_date.desc(), FinanceTransaction.id.desc())
        .limit(limit)
    )
    return [to_response(t) for t in db.scalars(stmt)]


def add_transaction(db: Session, auth: AuthContext, payload: TransactionCreate) -> TransactionResponse:
    with transaction(db):
        txn = FinanceTransaction(
            user_id=auth.user_id,
            type=payload.type,
            amount=payload.amount,
            category=payload.category,
            description=payload.description or "",
            txn_date=datetime.combine(payload.txn_date, datetime.min.time()),
        )
        db.add(txn)

    db.refresh(txn)
    logger.info("Transaction %s (%s %.2f) recorded for user %s",
                txn.id, txn.type.value, txn.amount, auth.user_id)
    return to_response(txn)
