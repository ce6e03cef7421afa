# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.

The REST backend is replaced by a small FastAPI app reached through
httpx.ASGITransport, so every request the gateway or a ListController
makes stays in-process.
"""

from typing import Generator, List, Optional

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from core.access_control import get_access_control
from core.cache import cache_clear
from core.notifications import get_notifications
from core.session import Session, set_session
from main import create_app
from models.auth import SessionUser
from services.list_registry import get_list_registry

GOOD_TOKEN = "good-token"

OPERATIONS = ("view", "create", "update", "delete")
CATEGORIES = {
    "Operations": ["sales", "purchase"],
    "Inventory": ["inventory_raw"],
    "Admin": ["role_management"],
}


# ============================================================
# Stub backend
# ============================================================
class StubBackend:
    """Mutable state behind the stub backend app."""

    def __init__(self):
        self.items = [{"id": i, "name": f"Item {i:02d}"} for i in range(1, 26)]
        self.permission_ids = {}
        self.catalog = []
        next_id = 1
        for category, modules in CATEGORIES.items():
            for module_id in modules:
                for op in OPERATIONS:
                    name = f"{module_id}.{op}"
                    self.permission_ids[name] = next_id
                    self.catalog.append({"id": next_id, "name": name, "category": category})
                    next_id += 1

        self.role_grants = {
            1: ("admin", {p["name"] for p in self.catalog}),
            2: ("manager", {"sales.view", "sales.create", "purchase.view"}),
            3: ("user", {"sales.view", "inventory_raw.view"}),
        }
        self.requests: List[httpx.QueryParams] = []
        self.saved = []
        self.fail_permissions = False

    def role_payload(self, role_id: int) -> dict:
        name, grants = self.role_grants[role_id]
        return {
            "id": role_id,
            "name": name,
            "guard_name": "web",
            "permissions": [p for p in self.catalog if p["name"] in grants],
            "permissions_by_category": {
                category: [p for p in self.catalog if p["category"] == category]
                for category in CATEGORIES
            },
        }


def build_stub_backend(state: StubBackend) -> FastAPI:
    backend = FastAPI()

    def authorized(request: Request) -> bool:
        return request.headers.get("Authorization") == f"Bearer {GOOD_TOKEN}"

    @backend.get("/")
    async def root():
        return {"status": "ok"}

    @backend.post("/validate-token")
    async def validate_token(request: Request):
        if not authorized(request):
            return JSONResponse(status_code=401, content={"valid": False})
        return {"valid": True}

    @backend.get("/permissions")
    async def permissions(request: Request):
        if state.fail_permissions:
            return JSONResponse(status_code=500, content={"message": "permissions down"})
        if not authorized(request):
            return JSONResponse(status_code=401, content={"message": "Unauthenticated."})
        return [state.role_payload(role_id) for role_id in sorted(state.role_grants)]

    @backend.post("/permissions/{role_id}/update")
    async def update_permissions(role_id: int, request: Request):
        body = await request.json()
        ids = set(body.get("permission_ids", []))
        name, _ = state.role_grants[role_id]
        state.role_grants[role_id] = (name, {p["name"] for p in state.catalog if p["id"] in ids})
        state.saved.append((role_id, sorted(ids)))
        return {"status": "success"}

    @backend.get("/items")
    async def items(request: Request):
        params = request.query_params
        state.requests.append(params)

        search = params.get("search", "").lower()
        rows = [row for row in state.items if search in row["name"].lower()]
        page = int(params.get("page", 1))
        per_page = int(params.get("per_page", 10))
        start = (page - 1) * per_page

        return {
            "data": rows[start:start + per_page],
            "recordsTotal": len(rows),
            "summary": {"matched": len(rows)},
        }

    @backend.get("/broken")
    async def broken():
        return JSONResponse(status_code=500, content={"message": "boom"})

    return backend


@pytest.fixture
def backend_state() -> StubBackend:
    return StubBackend()


@pytest.fixture
def backend_app(backend_state) -> FastAPI:
    return build_stub_backend(backend_state)


@pytest.fixture
def backend_transport(backend_app) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=backend_app)


# ============================================================
# Session (credential file under tmp_path)
# ============================================================
@pytest.fixture
def session(tmp_path) -> Generator[Session, None, None]:
    current = set_session(Session(str(tmp_path / "auth.json")))
    yield current
    set_session(None)


def make_user(role: str = "Administrator", user_id: int = 1) -> SessionUser:
    return SessionUser(id=user_id, name=f"{role} user", email=f"{role.lower()}@example.com", role=role)


@pytest.fixture
def admin_session(session) -> Session:
    session.login(GOOD_TOKEN, make_user("Administrator"))
    return session


@pytest.fixture
def user_session(session) -> Session:
    session.login(GOOD_TOKEN, make_user("User", user_id=3))
    return session


# ============================================================
# Gateway app
# ============================================================
@pytest.fixture(scope="function")
def app(backend_transport):
    """Create a test FastAPI application wired to the stub backend."""
    return create_app(backend_transport=backend_transport)


@pytest.fixture(scope="function")
def client(app, session) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


def login_payload(role: str = "Administrator", token: Optional[str] = GOOD_TOKEN) -> dict:
    return {"token": token, "user": make_user(role).model_dump()}


@pytest.fixture(autouse=True)
def reset_state():
    """Reset process-wide state before and after each test."""
    cache_clear()
    get_access_control().clear()
    get_notifications().drain()
    yield
    get_list_registry().close_all()
    get_access_control().clear()
    get_notifications().drain()
    cache_clear()
