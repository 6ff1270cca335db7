import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext, require_access
from app.auth.policy import Resource
from app.core.db import get_db
from app.models.schemas import ClientCreate, ClientResponse, PolicyCreate
from app.services import client_service

router = APIRouter()
logger = logging.getLogger("nexus.api.clients")

clients_user = require_access(Resource.CLIENTS)


@router.get("", response_model=List[ClientResponse])
def list_clients(auth: AuthContext = Depends(clients_user), db: Session = Depends(get_db)):
    return client_service.list_clients(db, auth)


@router.post("", response_model=ClientResponse, status_code=201)
def create_client(payload: ClientCreate, auth: AuthContext = Depends(clients_user), db: Session = Depends(get_db)):
    return client_service.create_client(db, auth, payload)


@router.post("/{client_id}/policies", response_model=ClientResponse, status_code=201)
def add_policy(
    client_id: int,
    payload: PolicyCreate,
    auth: AuthContext = Depends(clients_user),
    db: Session = Depends(get_db),
):
    return client_service.add_policy(db, auth, client_id, payload)
