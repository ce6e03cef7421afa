# tests/test_access_routes.py

"""
Tests for the /access endpoints used by guarded views and the sidebar.
"""

from fastapi.testclient import TestClient


def test_path_checks_for_user_role(client: TestClient, user_session):
    def allowed(path):
        return client.get("/access/check", params={"path": path}).json()["allowed"]

    assert allowed("/inventory/raw") is True
    assert allowed("/inventory/raw/42") is True
    assert allowed("/inventory/design") is False
    assert allowed("/purchase") is False
    assert allowed("/auth") is True


def test_module_check(client: TestClient, user_session):
    response = client.get("/access/check", params={"resource_id": "sales", "operation": "create"})
    assert response.json()["allowed"] is False

    response = client.get("/access/check", params={"resource_id": "sales", "operation": "view"})
    assert response.json()["allowed"] is True


def test_module_permissions_endpoint(client: TestClient, admin_session):
    response = client.get("/access/permissions/sales")
    assert response.status_code == 200
    assert response.json() == {
        "module_id": "sales",
        "can_view": True,
        "can_create": True,
        "can_update": True,
        "can_delete": True,
    }


def test_unknown_module_denied(client: TestClient, admin_session):
    body = client.get("/access/permissions/warp_drive").json()
    assert not any(body[key] for key in ("can_view", "can_create", "can_update", "can_delete"))


def test_guard_render_and_fallbacks(client: TestClient, user_session):
    response = client.post("/access/guard", json={"resource_id": "sales", "children": {"page": "sales"}})
    assert response.json()["kind"] == "render"
    assert response.json()["children"] == {"page": "sales"}

    response = client.post(
        "/access/guard",
        json={"resource_id": "sales", "operation": "delete", "fallback": "redirect"},
    )
    assert response.json()["kind"] == "redirect"
    assert response.json()["redirect_to"] == "/"

    response = client.post("/access/guard", json={"path": "/purchase", "fallback": "hide"})
    assert response.json()["kind"] == "hide"

    response = client.post("/access/guard", json={"resource_id": "purchase", "operation": "update"})
    body = response.json()
    assert body["kind"] == "message"
    assert body["title"] == "Access Denied"
    assert "update" in body["message"]


def test_guard_anonymous_denies(client: TestClient):
    response = client.post("/access/guard", json={"resource_id": "sales", "fallback": "hide"})
    assert response.json()["kind"] == "hide"


def test_menu_lists_allowed_paths(client: TestClient, user_session):
    body = client.get("/access/menu").json()
    assert body["paths"] == ["/inventory/raw", "/sales"]
    assert [item["id"] for item in body["items"]] == ["inventory_raw", "sales"]
