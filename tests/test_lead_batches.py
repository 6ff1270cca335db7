from app.models.enums import LeadStatus, VendorType
from app.models.orm import LeadBatch, Vendor
from app.services.batch_service import batch_metrics

from conftest import auth_headers


def _batch(db_session, owner, cost=1000, vendor=None, name="Batch"):
    b = LeadBatch(owner_id=owner.id, name=name, cost=cost, size=4, vendor_id=vendor.id if vendor else None)
    db_session.add(b)
    db_session.commit()
    return b


def test_batch_metrics(client, agent, make_lead, db_session):
    vendor = Vendor(name="FFL Direct", type=VendorType.FFL)
    db_session.add(vendor)
    db_session.commit()
    batch = _batch(db_session, agent, cost=1000, vendor=vendor)
    for status in (LeadStatus.NEW, LeadStatus.CONTACTED, LeadStatus.CLOSED, LeadStatus.DEAD):
        make_lead(agent, status, batch_id=batch.id)

    rows = client.get("/lead-batches", headers=auth_headers(agent)).json()
    assert len(rows) == 1
    row = rows[0]
    assert row["vendor"] == "FFL Direct"
    assert row["vendorType"] == "FFL"
    assert row["totalLeads"] == 4
    assert row["contactedLeads"] == 2
    assert row["closedLeads"] == 1
    assert row["contactRate"] == 50.0
    assert row["conversionRate"] == 25.0
    # one close at 2000 against 1000 spent
    assert row["roi"] == 100.0


def test_roi_is_zero_for_free_batch(agent, db_session):
    batch = _batch(db_session, agent, cost=0)
    assert batch_metrics(batch).roi == 0.0


def test_empty_batch_rates_are_zero(agent, db_session):
    out = batch_metrics(_batch(db_session, agent), average_premium=500)
    assert out.contact_rate == 0.0
    assert out.conversion_rate == 0.0
    assert out.roi == -100.0
    assert out.vendor == "Unknown"
    assert out.vendor_type == VendorType.THIRD_PARTY


def test_batches_are_private(client, agent, other_agent, db_session):
    _batch(db_session, other_agent)
    assert client.get("/lead-batches", headers=auth_headers(agent)).json() == []


def test_create_batch(client, agent):
    r = client.post("/lead-batches", json={"name": "April aged", "cost": 450, "size": 100},
                    headers=auth_headers(agent))
    assert r.status_code == 201
    data = r.json()
    assert data["name"] == "April aged"
    assert data["cost"] == 450
    assert data["totalLeads"] == 0
    assert data["vendor"] == "Unknown"


def test_create_batch_validation(client, agent):
    headers = auth_headers(agent)
    assert client.post("/lead-batches", json={"name": "", "cost": 10, "size": 1}, headers=headers).status_code == 400
    assert client.post("/lead-batches", json={"name": "x", "cost": 0, "size": 1}, headers=headers).status_code == 400
    assert client.post("/lead-batches", json={"name": "x", "cost": 10, "size": -1}, headers=headers).status_code == 400
    assert client.post("/lead-batches", json={"cost": 10, "size": 1}, headers=headers).status_code == 400


def test_create_batch_unknown_vendor(client, agent):
    r = client.post("/lead-batches", json={"name": "x", "cost": 10, "size": 1, "vendorId": 999},
                    headers=auth_headers(agent))
    assert r.status_code == 404
