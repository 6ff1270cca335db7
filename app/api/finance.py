from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext, require_access
from app.auth.policy import Resource
from app.core.db import get_db
from app.models.schemas import TransactionCreate, TransactionResponse
from app.services import finance_service

router = APIRouter()

finance_user = require_access(Resource.FINANCE)


@router.get("/transactions", response_model=List[TransactionResponse])
def transactions(auth: AuthContext = Depends(finance_user), db: Session = Depends(get_db)):
    """Latest 100 transactions, most recent first."""
    return finance_service.recent_transactions(db, auth)


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def add_transaction(
    payload: TransactionCreate,
    auth: AuthContext = Depends(finance_user),
    db: Session = Depends(get_db),
):
    return finance_service.add_transaction(db, auth, payload)
