from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.websockets import WebSocketDisconnect

from timeless.core.config import get_config
from timeless.core.dependencies import get_db_session
from timeless.main import create_app
from timeless.models import Base, Track
from timeless.realtime.websocket import WebSocketNotifier

PREFIX = get_config().API_PREFIX
PASSWORD = "s3cret-pass"
TERMS = {"usage_type": "SYNC", "rights": "NON_EXCLUSIVE", "duration": 12, "price": "1000.00"}


@pytest.fixture
def api():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def _override_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app = create_app(notifier=WebSocketNotifier(), run_bootstrap=False)
    app.dependency_overrides[get_db_session] = _override_db
    with TestClient(app) as client:
        yield client, TestingSessionLocal
    engine.dispose()


def _signup_and_login(client, email: str, role: str) -> tuple[str, dict]:
    created = client.post(
        f"{PREFIX}/auth/signup",
        json={"email": email, "full_name": email.split("@")[0], "password": PASSWORD, "role": role},
    )
    assert created.status_code == 201, created.text
    login = client.post(f"{PREFIX}/auth/login", json={"email": email, "password": PASSWORD})
    assert login.status_code == 200, login.text
    return created.json()["id"], {"Authorization": f"Bearer {login.json()['access_token']}"}


def _seed_track(session_factory, artist_id: str) -> str:
    db = session_factory()
    try:
        track = Track(title="Golden Hour", artist_id=artist_id)
        db.add(track)
        db.commit()
        return track.id
    finally:
        db.close()


@pytest.fixture
def negotiation(api):
    client, session_factory = api
    artist_id, artist_headers = _signup_and_login(client, "artist@example.com", "ARTIST")
    exec_id, exec_headers = _signup_and_login(client, "exec@example.com", "EXEC")
    track_id = _seed_track(session_factory, artist_id)
    created = client.post(f"{PREFIX}/deals", json={"track_id": track_id, "terms": TERMS}, headers=exec_headers)
    assert created.status_code == 201, created.text
    return client, created.json(), artist_headers, exec_headers


def test_health_and_root(api):
    client, _ = api
    health = client.get(f"{PREFIX}/health").json()
    assert health["status"] == "ok"
    assert health["database"] == "ok"
    assert health["notifier"] == "websocket"
    assert client.get("/").json()["api_prefix"] == PREFIX


def test_admin_signup_is_refused(api):
    client, _ = api
    response = client.post(
        f"{PREFIX}/auth/signup",
        json={"email": "root@example.com", "full_name": "Root", "password": PASSWORD, "role": "ADMIN"},
    )
    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_login_with_bad_password_is_unauthorized(api):
    client, _ = api
    _signup_and_login(client, "artist@example.com", "ARTIST")
    response = client.post(f"{PREFIX}/auth/login", json={"email": "artist@example.com", "password": "wrong-pass"})
    assert response.status_code == 401


def test_refresh_issues_new_access_token(api):
    client, _ = api
    client.post(
        f"{PREFIX}/auth/signup",
        json={"email": "exec@example.com", "full_name": "Exec", "password": PASSWORD, "role": "EXEC"},
    )
    tokens = client.post(f"{PREFIX}/auth/login", json={"email": "exec@example.com", "password": PASSWORD}).json()

    refreshed = client.post(f"{PREFIX}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    rejected = client.post(f"{PREFIX}/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert rejected.status_code == 401


def test_deal_routes_require_bearer_token(api):
    client, _ = api
    assert client.get(f"{PREFIX}/deals").status_code == 401
    assert client.get(f"{PREFIX}/deals", headers={"Authorization": "Token abc"}).status_code == 401
    assert client.get(f"{PREFIX}/deals", headers={"Authorization": "Bearer "}).status_code == 401


def test_artist_cannot_open_deal(negotiation, caplog):
    client, deal, artist_headers, _ = negotiation
    caplog.set_level(logging.INFO, logger="timeless.api.v1._authz")
    response = client.post(
        f"{PREFIX}/deals", json={"track_id": deal["track_id"], "terms": TERMS}, headers=artist_headers
    )
    assert response.status_code == 403
    denied = next(r for r in caplog.records if r.getMessage() == "api.scope_denied")
    assert denied.context["scopes"] == ["deals.create"]


def test_full_negotiation_over_http(negotiation):
    client, deal, artist_headers, exec_headers = negotiation
    deal_id = deal["id"]
    assert deal["state"] == "PENDING"
    assert deal["track"]["title"] == "Golden Hour"

    countered = client.post(
        f"{PREFIX}/deals/{deal_id}/state",
        json={"new_state": "COUNTERED", "changes": {"price": "1500"}, "expected_version": 1},
        headers=artist_headers,
    )
    assert countered.status_code == 200, countered.text
    assert countered.json()["terms"]["price"] == "1500.00"
    assert countered.json()["version"] == 2

    transitions = client.get(f"{PREFIX}/deals/{deal_id}/transitions", headers=exec_headers).json()
    assert transitions == {"deal_id": deal_id, "state": "COUNTERED", "available": ["PENDING", "CANCELLED"]}

    assert client.post(
        f"{PREFIX}/deals/{deal_id}/state", json={"new_state": "PENDING", "expected_version": 2}, headers=exec_headers
    ).status_code == 200
    accepted = client.post(f"{PREFIX}/deals/{deal_id}/state", json={"new_state": "ACCEPTED", "expected_version": 3}, headers=artist_headers)
    assert accepted.json()["state"] == "ACCEPTED"

    history = client.get(f"{PREFIX}/deals/{deal_id}/history", headers=artist_headers).json()
    assert [entry["action"] for entry in history] == ["COUNTER", "ACCEPT_COUNTER", "ACCEPT"]
    assert history[0]["changes"] == {"price": "1500"}

    listed = client.get(f"{PREFIX}/deals", headers=exec_headers).json()
    assert [item["id"] for item in listed] == [deal_id]


def test_domain_errors_use_the_error_envelope(negotiation):
    client, deal, artist_headers, exec_headers = negotiation
    deal_id = deal["id"]

    unauthorized = client.post(f"{PREFIX}/deals/{deal_id}/state", json={"new_state": "CANCELLED", "expected_version": 1}, headers=artist_headers)
    assert unauthorized.status_code == 403
    assert unauthorized.json()["error_code"] == "UNAUTHORIZED_ACTION"

    invalid = client.post(
        f"{PREFIX}/deals/{deal_id}/state", json={"new_state": "AWAITING_RESPONSE", "expected_version": 1}, headers=exec_headers
    )
    assert invalid.status_code == 409
    assert invalid.json() == {
        "status": "error",
        "error_code": "INVALID_STATE_TRANSITION",
        "detail": "Transition not allowed: PENDING -> AWAITING_RESPONSE",
    }

    stale = client.post(
        f"{PREFIX}/deals/{deal_id}/state",
        json={"new_state": "CANCELLED", "expected_version": 7},
        headers=exec_headers,
    )
    assert stale.status_code == 409
    assert stale.json()["detail"] == "Deal state changed, please refresh."

    missing = client.get(f"{PREFIX}/deals/does-not-exist", headers=exec_headers)
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "NOT_FOUND"


def test_state_change_without_version_is_rejected(negotiation):
    client, deal, artist_headers, _ = negotiation

    response = client.post(f"{PREFIX}/deals/{deal['id']}/state", json={"new_state": "ACCEPTED"}, headers=artist_headers)
    assert response.status_code == 422
    assert client.get(f"{PREFIX}/deals/{deal['id']}", headers=artist_headers).json()["state"] == "PENDING"


def test_second_party_acting_on_same_snapshot_is_refused(negotiation):
    client, deal, artist_headers, exec_headers = negotiation
    deal_id = deal["id"]

    countered = client.post(
        f"{PREFIX}/deals/{deal_id}/state",
        json={"new_state": "COUNTERED", "changes": {"price": "900"}, "expected_version": 1},
        headers=exec_headers,
    )
    assert countered.status_code == 200
    # The artist accepts the original 1000.00 offer without having seen the counter.
    accepted = client.post(
        f"{PREFIX}/deals/{deal_id}/state",
        json={"new_state": "ACCEPTED", "expected_version": 1},
        headers=artist_headers,
    )
    assert accepted.status_code == 409
    assert accepted.json()["detail"] == "Deal state changed, please refresh."

    current = client.get(f"{PREFIX}/deals/{deal_id}", headers=artist_headers).json()
    assert current["state"] == "COUNTERED"
    assert current["version"] == 2
    history = client.get(f"{PREFIX}/deals/{deal_id}/history", headers=artist_headers).json()
    assert [entry["action"] for entry in history] == ["COUNTER"]


def test_outsider_cannot_see_deal(negotiation):
    client, deal, _, _ = negotiation
    _, outsider_headers = _signup_and_login(client, "outsider@example.com", "EXEC")

    response = client.get(f"{PREFIX}/deals/{deal['id']}", headers=outsider_headers)
    assert response.status_code == 403
    assert client.get(f"{PREFIX}/deals", headers=outsider_headers).json() == []
    assert client.get(f"{PREFIX}/admin/deals", headers=outsider_headers).status_code == 403


def test_chat_endpoints_close_with_the_deal(negotiation):
    client, deal, artist_headers, exec_headers = negotiation
    deal_id = deal["id"]

    posted = client.post(f"{PREFIX}/deals/{deal_id}/messages", json={"content": "Can we talk price?"}, headers=exec_headers)
    assert posted.status_code == 201
    assert posted.json()["user"]["full_name"] == "exec"

    client.post(f"{PREFIX}/deals/{deal_id}/state", json={"new_state": "DECLINED", "expected_version": 1}, headers=artist_headers)

    closed = client.post(f"{PREFIX}/deals/{deal_id}/messages", json={"content": "Wait!"}, headers=exec_headers)
    assert closed.status_code == 409
    assert closed.json()["error_code"] == "CHAT_READ_ONLY"

    messages = client.get(f"{PREFIX}/deals/{deal_id}/messages", headers=artist_headers).json()
    assert [m["content"] for m in messages] == ["Can we talk price?"]


def test_websocket_pushes_deal_updates_to_parties(negotiation):
    client, deal, artist_headers, exec_headers = negotiation
    token = exec_headers["Authorization"].split(" ", 1)[1]

    with client.websocket_connect(f"{PREFIX}/ws?token={token}") as websocket:
        assert websocket.receive_json() == {"type": "connected"}
        response = client.post(
            f"{PREFIX}/deals/{deal['id']}/state",
            json={"new_state": "COUNTERED", "changes": {"duration": 24}, "expected_version": 1},
            headers=artist_headers,
        )
        assert response.status_code == 200

        message = websocket.receive_json()
        assert message["type"] == "dealUpdate"
        assert message["deal"]["id"] == deal["id"]
        assert message["deal"]["state"] == "COUNTERED"
        assert message["deal"]["terms"]["duration"] == 24


def test_websocket_rejects_bad_token(api):
    client, _ = api
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"{PREFIX}/ws?token=nope") as websocket:
            websocket.receive_json()
