from datetime import datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.clock import utcnow
from app.models.enums import (
    ActivityType,
    Disposition,
    LeadStatus,
    TaskPriority,
    TaskStatus,
)
from app.models.orm import Appointment, Lead, LeadActivity, Task
from app.services import lead_service

from conftest import auth_context, auth_headers

EXPECTED = {
    Disposition.NO_ANSWER: LeadStatus.CONTACTED,
    Disposition.NOT_INTERESTED: LeadStatus.DEAD,
    Disposition.CALLBACK: LeadStatus.CONTACTED,
    Disposition.SET: LeadStatus.SET,
    Disposition.SAT: LeadStatus.SAT,
    Disposition.SALE: LeadStatus.CLOSED,
    Disposition.DEAD: LeadStatus.DEAD,
}


def _activities(db_session, lead_id):
    return list(db_session.scalars(
        select(LeadActivity).where(LeadActivity.lead_id == lead_id).order_by(LeadActivity.id)
    ))


def test_mapping_covers_every_disposition():
    assert set(lead_service.DISPOSITION_STATUS) == set(Disposition)
    for disposition, status in EXPECTED.items():
        assert lead_service.next_status(disposition) == status


@pytest.mark.parametrize("disposition,status", list(EXPECTED.items()))
def test_disposition_sets_status_regardless_of_prior(client, agent, make_lead, db_session, disposition, status):
    # Prior status plays no part; start from a closed lead on purpose
    lead = make_lead(agent, LeadStatus.CLOSED)

    r = client.post(f"/leads/{lead.id}/disposition",
                    json={"disposition": disposition.value}, headers=auth_headers(agent))
    assert r.status_code == 200
    assert r.json()["status"] == status.value

    db_session.refresh(lead)
    assert lead.status == status


def test_disposition_appends_status_change_activity(client, agent, make_lead, db_session):
    lead = make_lead(agent, LeadStatus.NEW)

    r = client.post(f"/leads/{lead.id}/disposition",
                    json={"disposition": "NO_ANSWER", "notes": "rang out"},
                    headers=auth_headers(agent))
    assert r.status_code == 200

    acts = _activities(db_session, lead.id)
    assert len(acts) == 1
    act = acts[0]
    assert act.type == ActivityType.STATUS_CHANGE
    assert act.disposition == Disposition.NO_ANSWER
    assert act.user_id == agent.id
    assert act.description == "Lead status changed to CONTACTED. Disposition: NO_ANSWER. rang out"


def test_activities_accumulate(client, agent, make_lead, db_session):
    lead = make_lead(agent, LeadStatus.NEW)
    headers = auth_headers(agent)
    for d in ("NO_ANSWER", "NO_ANSWER", "CALLBACK"):
        client.post(f"/leads/{lead.id}/disposition", json={"disposition": d}, headers=headers)

    assert [a.disposition for a in _activities(db_session, lead.id)] == [
        Disposition.NO_ANSWER, Disposition.NO_ANSWER, Disposition.CALLBACK,
    ]


def test_set_with_date_books_one_hour_appointment(client, agent, make_lead, db_session):
    lead = make_lead(agent, LeadStatus.CONTACTED, first_name="Jane", last_name="Roe")

    r = client.post(f"/leads/{lead.id}/disposition",
                    json={"disposition": "SET", "appointmentDate": "2026-05-01T14:00:00"},
                    headers=auth_headers(agent))
    assert r.status_code == 200

    appts = list(db_session.scalars(select(Appointment)))
    assert len(appts) == 1
    appt = appts[0]
    assert appt.title == "Appointment with Jane Roe"
    assert appt.start_time == datetime(2026, 5, 1, 14, 0)
    assert appt.end_time == datetime(2026, 5, 1, 15, 0)
    assert appt.user_id == agent.id
    assert appt.lead_id == lead.id


def test_appointment_time_is_normalized_to_utc(client, agent, make_lead, db_session):
    lead = make_lead(agent, LeadStatus.CONTACTED)

    client.post(f"/leads/{lead.id}/disposition",
                json={"disposition": "SET", "appointmentDate": "2026-05-01T10:00:00-04:00"},
                headers=auth_headers(agent))

    appt = db_session.scalars(select(Appointment)).one()
    assert appt.start_time == datetime(2026, 5, 1, 14, 0)


def test_set_without_date_books_nothing(client, agent, make_lead, db_session):
    lead = make_lead(agent, LeadStatus.CONTACTED)

    r = client.post(f"/leads/{lead.id}/disposition",
                    json={"disposition": "SET", "appointmentDate": ""},
                    headers=auth_headers(agent))
    assert r.status_code == 200
    assert r.json()["status"] == "SET"
    assert list(db_session.scalars(select(Appointment))) == []


def test_callback_with_date_creates_task(client, agent, make_lead, db_session):
    lead = make_lead(agent, LeadStatus.NEW, first_name="Sam", last_name="Lee")

    client.post(f"/leads/{lead.id}/disposition",
                json={"disposition": "CALLBACK", "callbackDate": "2026-05-02T09:30:00Z"},
                headers=auth_headers(agent))

    task = db_session.scalars(select(Task)).one()
    assert task.title == "Call back Sam Lee"
    assert task.priority == TaskPriority.MEDIUM
    assert task.status == TaskStatus.PENDING
    assert task.due_date == datetime(2026, 5, 2, 9, 30)
    assert task.assigned_to_id == agent.id
    assert task.created_by_id == agent.id
    assert task.lead_id == lead.id


def test_callback_date_ignored_for_other_dispositions(client, agent, make_lead, db_session):
    lead = make_lead(agent, LeadStatus.NEW)

    client.post(f"/leads/{lead.id}/disposition",
                json={"disposition": "NO_ANSWER", "callbackDate": "2026-05-02T09:30:00Z",
                      "appointmentDate": "2026-05-02T09:30:00Z"},
                headers=auth_headers(agent))

    assert list(db_session.scalars(select(Task))) == []
    assert list(db_session.scalars(select(Appointment))) == []


def test_unknown_disposition_is_rejected_without_writes(client, agent, make_lead, db_session):
    lead = make_lead(agent, LeadStatus.NEW)

    r = client.post(f"/leads/{lead.id}/disposition",
                    json={"disposition": "MAYBE_LATER"}, headers=auth_headers(agent))
    assert r.status_code == 400
    body = r.json()
    assert body["detail"] == "Validation error"
    assert body["errors"]

    db_session.refresh(lead)
    assert lead.status == LeadStatus.NEW
    assert _activities(db_session, lead.id) == []


def test_missing_disposition_is_rejected(client, agent, make_lead):
    lead = make_lead(agent, LeadStatus.NEW)
    r = client.post(f"/leads/{lead.id}/disposition", json={}, headers=auth_headers(agent))
    assert r.status_code == 400


def test_other_owners_lead_looks_missing(client, agent, other_agent, make_lead, db_session):
    theirs = make_lead(other_agent, LeadStatus.NEW)

    r = client.post(f"/leads/{theirs.id}/disposition",
                    json={"disposition": "SALE"}, headers=auth_headers(agent))
    assert r.status_code == 404

    db_session.refresh(theirs)
    assert theirs.status == LeadStatus.NEW
    assert _activities(db_session, theirs.id) == []


def test_missing_lead(client, agent):
    r = client.post("/leads/99999/disposition", json={"disposition": "SALE"}, headers=auth_headers(agent))
    assert r.status_code == 404
    assert r.json()["detail"] == "Lead 99999 not found"


def test_disposition_requires_auth(client, agent, make_lead):
    lead = make_lead(agent, LeadStatus.NEW)
    r = client.post(f"/leads/{lead.id}/disposition", json={"disposition": "SALE"})
    assert r.status_code == 401


def test_failed_follow_up_rolls_back_everything(db_session, agent, make_lead, monkeypatch):
    lead = make_lead(agent, LeadStatus.CONTACTED)

    def boom(**kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(lead_service, "Appointment", boom)

    with pytest.raises(SQLAlchemyError):
        lead_service.record_disposition(
            db_session, auth_context(agent), lead.id, Disposition.SET,
            appointment_date=datetime(2026, 5, 1, 14, 0),
        )

    fresh = db_session.get(Lead, lead.id)
    assert fresh.status == LeadStatus.CONTACTED
    assert _activities(db_session, lead.id) == []


def test_store_failure_maps_to_500(client, agent, make_lead, db_session, monkeypatch):
    lead = make_lead(agent, LeadStatus.CONTACTED)

    def boom(**kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(lead_service, "Appointment", boom)

    r = client.post(f"/leads/{lead.id}/disposition",
                    json={"disposition": "SET", "appointmentDate": "2026-05-01T14:00:00"},
                    headers=auth_headers(agent))
    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error"}

    db_session.refresh(lead)
    assert lead.status == LeadStatus.CONTACTED


def test_dial_session_scenario(client, agent, make_lead):
    """NEW lead: no answer, dialed again later, then booked."""
    headers = auth_headers(agent)
    lead = make_lead(agent, LeadStatus.NEW)

    r = client.post(f"/leads/{lead.id}/disposition", json={"disposition": "NO_ANSWER"}, headers=headers)
    assert r.json()["status"] == "CONTACTED"
    # A disposition alone is not a logged call, so the lead stays dialable
    ready = client.get("/leads/dial-ready", headers=headers).json()
    assert [l["id"] for l in ready] == [lead.id]
    assert ready[0]["status"] == "CONTACTED"

    client.post(f"/leads/{lead.id}/calls", headers=headers)
    assert client.get("/leads/dial-ready", headers=headers).json() == []

    future = (utcnow() + timedelta(days=1)).replace(microsecond=0).isoformat()
    r = client.post(f"/leads/{lead.id}/disposition",
                    json={"disposition": "SET", "appointmentDate": future}, headers=headers)
    assert r.json()["status"] == "SET"

    appts = client.get("/appointments", headers=headers).json()
    assert len(appts) == 1
    assert appts[0]["leadId"] == lead.id

    detail = client.get(f"/leads/{lead.id}", headers=headers).json()
    assert [a["type"] for a in detail["activities"]] == ["status_change", "call", "status_change"]
