from app.models.enums import RecruitStatus, Role
from app.models.orm import RecruitProfile, User

from conftest import PASSWORD, auth_headers


def test_login_success_agent(client, agent):
    r = client.post("/api/auth/login", json={"email": "agent@test.com", "password": PASSWORD})
    assert r.status_code == 200
    data = r.json()
    assert "token" in data
    assert data["tokenType"] == "bearer"
    assert data["user"]["role"] == "AGENT"
    assert data["user"]["email"] == "agent@test.com"
    assert data["landingPage"] == "/dashboard"


def test_login_is_case_insensitive_on_email(client, agent):
    r = client.post("/api/auth/login", json={"email": "  Agent@Test.com ", "password": PASSWORD})
    assert r.status_code == 200


def test_login_sets_last_login(client, agent, db_session):
    assert agent.last_login is None
    client.post("/api/auth/login", json={"email": agent.email, "password": PASSWORD})
    db_session.refresh(agent)
    assert agent.last_login is not None


def test_login_fail(client, agent):
    r = client.post("/api/auth/login", json={"email": agent.email, "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"


def test_login_unknown_user(client):
    r = client.post("/api/auth/login", json={"email": "nobody@test.com", "password": PASSWORD})
    assert r.status_code == 401


def test_login_inactive_user(client, make_user):
    user = make_user(Role.AGENT, is_active=False)
    r = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})
    assert r.status_code == 401


def test_me_requires_token(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401


def test_me_rejects_garbage_token(client):
    r = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_me_returns_current_user(client, agent):
    r = client.get("/api/auth/me", headers=auth_headers(agent))
    assert r.status_code == 200
    data = r.json()
    assert data["user"]["id"] == agent.id
    assert data["user"]["agencyId"] == agent.agency_id
    assert data["recruitStatus"] is None
    assert data["landingPage"] == "/dashboard"


def test_me_recruit_lands_on_portal_until_activated(client, make_user, db_session):
    recruit = make_user(Role.RECRUIT)
    profile = RecruitProfile(user_id=recruit.id, status=RecruitStatus.LICENSED)
    db_session.add(profile)
    db_session.commit()

    r = client.get("/api/auth/me", headers=auth_headers(recruit))
    assert r.json()["recruitStatus"] == "LICENSED"
    assert r.json()["landingPage"] == "/recruit"

    profile.status = RecruitStatus.ACTIVATED
    db_session.commit()
    r = client.get("/api/auth/me", headers=auth_headers(recruit))
    assert r.json()["landingPage"] == "/dashboard"


def test_token_stops_working_once_user_is_deactivated(client, agent, db_session):
    headers = auth_headers(agent)
    assert client.get("/api/auth/me", headers=headers).status_code == 200

    db_session.get(User, agent.id).is_active = False
    db_session.commit()
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_role_is_read_from_database_not_token(client, agent, db_session):
    headers = auth_headers(agent)
    assert client.get("/team/stats", headers=headers).status_code == 403

    agent.role = Role.MANAGER
    db_session.commit()
    assert client.get("/team/stats", headers=headers).status_code == 200
