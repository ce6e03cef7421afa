# tests/test_session_routes.py

"""
Tests for the /session and /health endpoints.
"""

from fastapi.testclient import TestClient

from conftest import login_payload


def test_health_app(client: TestClient):
    response = client.get("/health/app")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health_backend_reaches_stub(client: TestClient):
    response = client.get("/health/backend")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["details"]["http_status"] == 200


def test_anonymous_session_state(client: TestClient):
    response = client.get("/session")
    assert response.status_code == 200
    assert response.json() == {
        "is_authenticated": False,
        "user": None,
        "role": None,
        "permissions": {},
    }


def test_login_loads_permissions(client: TestClient):
    response = client.post("/session/login", json=login_payload("User"))
    assert response.status_code == 200

    body = response.json()
    assert body["is_authenticated"] is True
    assert body["role"] == "user"
    assert body["permissions"]["sales"] == {
        "view": True,
        "create": False,
        "update": False,
        "delete": False,
    }
    assert "purchase" not in body["permissions"]


def test_login_with_rejected_token(client: TestClient, session):
    payload = login_payload(token="stolen")
    payload["validate_token"] = True

    response = client.post("/session/login", json=payload)

    assert response.status_code == 401
    assert session.is_authenticated is False


def test_logout_clears_everything(client: TestClient, session):
    client.post("/session/login", json=login_payload())
    assert client.get("/access/check", params={"path": "/sales"}).json()["allowed"] is True

    response = client.post("/session/logout")
    assert response.status_code == 200
    assert session.is_authenticated is False
    assert client.get("/access/check", params={"path": "/sales"}).json()["allowed"] is False


def test_validate_endpoint(client: TestClient, admin_session):
    response = client.post("/session/validate")
    assert response.json() == {"valid": True}


def test_validate_endpoint_signs_out_invalid_token(client: TestClient, session):
    client.post("/session/login", json=login_payload(token="expired"))

    response = client.post("/session/validate")

    assert response.json() == {"valid": False}
    assert session.is_authenticated is False


def test_permissions_refresh_requires_sign_in(client: TestClient):
    response = client.post("/session/permissions/refresh")
    assert response.status_code == 401


def test_permissions_refresh_picks_up_backend_changes(client: TestClient, backend_state, user_session):
    assert client.get("/access/check", params={"path": "/purchase"}).json()["allowed"] is False

    _, grants = backend_state.role_grants[3]
    grants.add("purchase.view")

    # cached until refreshed
    assert client.get("/access/check", params={"path": "/purchase"}).json()["allowed"] is False

    response = client.post("/session/permissions/refresh")
    assert response.status_code == 200
    assert response.json()["permissions"]["purchase"]["view"] is True
    assert client.get("/access/check", params={"path": "/purchase"}).json()["allowed"] is True
