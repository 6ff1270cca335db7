from datetime import datetime, timedelta

import pytest

from app.models.enums import ActivityType, Disposition, LeadStatus
from app.services import lead_service

from conftest import auth_context, auth_headers

NOW = datetime(2026, 3, 2, 15, 0, 0)


def _ids(leads):
    return [l.id for l in leads]


def _ready(db_session, user, **kw):
    return lead_service.dial_ready_leads(db_session, auth_context(user), now=NOW, **kw)


@pytest.mark.parametrize("status", [
    LeadStatus.SET, LeadStatus.SAT, LeadStatus.CLOSED, LeadStatus.NO_SHOW,
    LeadStatus.DEAD, LeadStatus.DUPLICATE,
])
def test_only_new_and_contacted_are_dialable(db_session, agent, make_lead, status):
    new = make_lead(agent, LeadStatus.NEW, created_at=NOW - timedelta(days=2))
    contacted = make_lead(agent, LeadStatus.CONTACTED, created_at=NOW - timedelta(days=1))
    make_lead(agent, status, created_at=NOW - timedelta(days=3))

    assert _ids(_ready(db_session, agent)) == [new.id, contacted.id]


def test_new_sorts_before_contacted_regardless_of_age(db_session, agent, make_lead):
    old_contacted = make_lead(agent, LeadStatus.CONTACTED, created_at=NOW - timedelta(days=30))
    fresh_new = make_lead(agent, LeadStatus.NEW, created_at=NOW - timedelta(minutes=5))

    assert _ids(_ready(db_session, agent)) == [fresh_new.id, old_contacted.id]


def test_oldest_first_within_a_status(db_session, agent, make_lead):
    b = make_lead(agent, LeadStatus.NEW, created_at=NOW - timedelta(days=1))
    a = make_lead(agent, LeadStatus.NEW, created_at=NOW - timedelta(days=3))
    c = make_lead(agent, LeadStatus.NEW, created_at=NOW - timedelta(hours=1))

    assert _ids(_ready(db_session, agent)) == [a.id, b.id, c.id]


def test_fewest_activities_breaks_created_at_ties(db_session, agent, make_lead, add_activity):
    created = NOW - timedelta(days=1)
    worked = make_lead(agent, LeadStatus.CONTACTED, created_at=created)
    untouched = make_lead(agent, LeadStatus.CONTACTED, created_at=created)
    for _ in range(2):
        add_activity(worked, agent, ActivityType.STATUS_CHANGE,
                     created_at=NOW - timedelta(days=1), disposition=Disposition.NO_ANSWER)

    assert _ids(_ready(db_session, agent)) == [untouched.id, worked.id]


def test_recent_call_holds_lead_back(db_session, agent, make_lead, add_activity):
    called = make_lead(agent, LeadStatus.CONTACTED, created_at=NOW - timedelta(days=2))
    add_activity(called, agent, ActivityType.CALL, created_at=NOW - timedelta(minutes=119))
    other = make_lead(agent, LeadStatus.CONTACTED, created_at=NOW - timedelta(days=1))

    assert _ids(_ready(db_session, agent)) == [other.id]


def test_call_older_than_window_does_not_hold_back(db_session, agent, make_lead, add_activity):
    lead = make_lead(agent, LeadStatus.CONTACTED, created_at=NOW - timedelta(days=2))
    add_activity(lead, agent, ActivityType.CALL, created_at=NOW - timedelta(minutes=121))

    assert _ids(_ready(db_session, agent)) == [lead.id]


def test_non_call_activity_does_not_hold_back(db_session, agent, make_lead, add_activity):
    lead = make_lead(agent, LeadStatus.CONTACTED, created_at=NOW - timedelta(days=2))
    add_activity(lead, agent, ActivityType.STATUS_CHANGE, created_at=NOW - timedelta(minutes=1),
                 disposition=Disposition.NO_ANSWER)

    assert _ids(_ready(db_session, agent)) == [lead.id]


def test_window_is_configurable(db_session, agent, make_lead, add_activity):
    lead = make_lead(agent, LeadStatus.NEW, created_at=NOW - timedelta(days=2))
    add_activity(lead, agent, ActivityType.CALL, created_at=NOW - timedelta(minutes=30))

    assert _ready(db_session, agent, window_min=120) == []
    assert _ids(_ready(db_session, agent, window_min=15)) == [lead.id]


def test_other_owners_leads_are_never_returned(db_session, agent, other_agent, make_lead):
    mine = make_lead(agent, LeadStatus.NEW)
    make_lead(other_agent, LeadStatus.NEW, created_at=NOW - timedelta(days=10))

    assert _ids(_ready(db_session, agent)) == [mine.id]


def test_result_is_capped(db_session, agent, make_lead):
    for i in range(55):
        make_lead(agent, LeadStatus.NEW, created_at=NOW - timedelta(minutes=i + 1))

    assert len(_ready(db_session, agent)) == 50
    assert len(_ready(db_session, agent, limit=10)) == 10


def test_empty_when_nothing_eligible(db_session, agent, make_lead):
    make_lead(agent, LeadStatus.CLOSED)
    assert _ready(db_session, agent) == []


# -------------------
# HTTP
# -------------------
def test_dial_ready_requires_auth(client):
    assert client.get("/leads/dial-ready").status_code == 401


def test_dial_ready_endpoint_returns_view_models(client, agent, make_lead):
    lead = make_lead(agent, LeadStatus.NEW, first_name="Jane", last_name="Roe", age=61, state="TX")

    r = client.get("/leads/dial-ready", headers=auth_headers(agent))
    assert r.status_code == 200
    rows = r.json()
    assert len(rows) == 1
    row = rows[0]
    assert row["id"] == lead.id
    assert row["firstName"] == "Jane"
    assert row["lastName"] == "Roe"
    assert row["age"] == 61
    assert row["status"] == "NEW"
    assert row["source"] == "MANUAL"
    assert "createdAt" in row


def test_logged_call_removes_lead_from_dial_list(client, agent, make_lead):
    lead = make_lead(agent, LeadStatus.NEW)
    headers = auth_headers(agent)

    r = client.post(f"/leads/{lead.id}/calls", json={"notes": "left voicemail"}, headers=headers)
    assert r.status_code == 201
    assert r.json()["type"] == "call"
    assert r.json()["description"].startswith(f"Call dialed to {lead.phone}.")

    assert client.get("/leads/dial-ready", headers=headers).json() == []
