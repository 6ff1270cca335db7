# app/services/client_service.py
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.auth.permissions import AuthContext
from app.core.db import transaction
from app.models.enums import ACTIVE_POLICY_STATUSES
from app.models.orm import Client, Lead, Policy
from app.models.schemas import ClientCreate, ClientResponse, PolicyCreate, PolicyResponse
from app.services.errors import NotFoundError

logger = logging.getLogger("nexus.services.clients")


def to_response(client: Client) -> ClientResponse:
    policies = list(client.policies)
    active = any(p.status in ACTIVE_POLICY_STATUSES for p in policies)
    return ClientResponse(
        id=client.id,
        first_name=client.first_name,
        last_name=client.last_name,
        email=client.email,
        phone=client.phone,
        lead_id=client.lead_id,
        policies=[PolicyResponse.model_validate(p) for p in policies],
        total_premium=sum(float(p.premium or 0) for p in policies),
        status="active" if active else "inactive",
        created_at=client.created_at,
    )


def _owned_client(db: Session, auth: AuthContext, client_id: int) -> Client:
    client = db.scalars(
        select(Client).where(Client.id == client_id, Client.agent_id == auth.user_id)
    ).first()
    if client is None:
        raise NotFoundError(f"Client {client_id} not found")
    return client


def list_clients(db: Session, auth: AuthContext) -> List[ClientResponse]:
    stmt = (
        select(Client)
        .where(Client.agent_id == auth.user_id)
        .options(selectinload(Client.policies))
        .order_by(Client.created_at.desc(), Client.id.desc())
    )
    return [to_response(c) for c in db.scalars(stmt)]


def create_client(db: Session, auth: AuthContext, payload: ClientCreate) -> ClientResponse:
    with transaction(db):
        if payload.lead_id is not None:
            lead = db.scalars(
                select(Lead).where(Lead.id == payload.lead_id, Lead.owner_id == auth.user_id)
            ).first()
            if lead is None:
                raise NotFoundError(f"Lead {payload.lead_id} not found")
        client = Client(agent_id=auth.user_id, **payload.model_dump())
        db.add(client)

    db.refresh(client)
    logger.info("Client %s created by user %s", client.id, auth.user_id)
    return to_response(client)


def add_policy(db: Session, auth: AuthContext, client_id: int, payload: PolicyCreate) -> ClientResponse:
    with transaction(db):
        client = _owned_client(db, auth, client_id)
        client.policies.append(Policy(**payload.model_dump()))

    db.refresh(client)
    logger.info("Policy written on client %s by user %s (%s)",
                client.id, auth.user_id, payload.carrier)
    return to_response(client)
