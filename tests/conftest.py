import itertools
import os

# Keep the app's own engine off the developer database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.permissions import AuthContext
from app.auth.security import create_token, hash_password
from app.core.clock import utcnow
from app.core.db import Base, get_db
from app.main import app
from app.models.enums import ActivityType, LeadSource, LeadStatus, Role
from app.models.orm import Agency, Lead, LeadActivity, User

PASSWORD = "test123"
PASSWORD_HASH = hash_password(PASSWORD)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

_seq = itertools.count(1)


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def agency(db_session):
    a = Agency(name="Test Agency", slug=f"test-agency-{next(_seq)}", active=True)
    db_session.add(a)
    db_session.commit()
    return a


@pytest.fixture()
def make_user(db_session, agency):
    def _make(role=Role.AGENT, email=None, agency_id="default", is_active=True, name=None):
        n = next(_seq)
        user = User(
            email=email or f"user{n}@test.com",
            name=name or f"User {n}",
            hashed_password=PASSWORD_HASH,
            role=role,
            agency_id=agency.id if agency_id == "default" else agency_id,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def agent(make_user):
    return make_user(Role.AGENT, email="agent@test.com", name="Alex Agent")


@pytest.fixture()
def other_agent(make_user):
    return make_user(Role.AGENT, email="other@test.com", name="Olive Other")


@pytest.fixture()
def make_lead(db_session):
    def _make(owner, status=LeadStatus.NEW, created_at=None, **fields):
        n = next(_seq)
        lead = Lead(
            owner_id=owner.id,
            first_name=fields.pop("first_name", f"Lead{n}"),
            last_name=fields.pop("last_name", "Doe"),
            phone=fields.pop("phone", f"555-{n:04d}"),
            status=status,
            source=fields.pop("source", LeadSource.MANUAL),
            created_at=created_at or utcnow(),
            **fields,
        )
        db_session.add(lead)
        db_session.commit()
        return lead

    return _make


@pytest.fixture()
def add_activity(db_session):
    def _add(lead, user, type_=ActivityType.CALL, created_at=None, disposition=None, description=""):
        activity = LeadActivity(
            lead_id=lead.id,
            user_id=user.id,
            type=type_,
            disposition=disposition,
            description=description,
            created_at=created_at or utcnow(),
        )
        db_session.add(activity)
        db_session.commit()
        return activity

    return _add


def auth_headers(user) -> dict:
    token = create_token({
        "sub": user.email,
        "user_id": user.id,
        "role": user.role.value,
        "agency_id": user.agency_id,
    })
    return {"Authorization": f"Bearer {token}"}


def auth_context(user) -> AuthContext:
    return AuthContext(user_id=user.id, email=user.email, role=user.role, agency_id=user.agency_id)
