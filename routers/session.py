# routers/session.py

import httpx
from fastapi import APIRouter, Depends, HTTPException

from core.access_control import AccessControl, get_access_control
from core.logging_config import logger
from core.session import Session
from dependencies.auth import (
    get_backend_client,
    get_current_session,
    get_loaded_access_control,
    get_optional_session,
)
from models.auth import LoginRequest, SessionState
from services.list_registry import get_list_registry
from services.permission_service import refresh_access_control

router = APIRouter(
    prefix="/session",
    tags=["Session"],
)


def session_state(session: Session, access: AccessControl) -> SessionState:
    user = session.user
    if user is None:
        return SessionState(is_authenticated=False)

    permission_set = access.permission_set
    permissions = {}
    if permission_set is not None:
        permissions = {
            module_id: perms.model_dump()
            for module_id, perms in permission_set.modules.items()
        }

    return SessionState(
        is_authenticated=True,
        user=user,
        role=user.app_role,
        permissions=permissions,
    )


# -----------------------------------------------------
# GET /session
# -----------------------------------------------------
@router.get("", summary="Current session", response_model=SessionState)
async def get_session_state(
    session: Session = Depends(get_optional_session),
    access: AccessControl = Depends(get_loaded_access_control),
):
    return session_state(session, access)


# -----------------------------------------------------
# POST /session/login
# Stores a token acquired by the auth screen
# -----------------------------------------------------
@router.post("/login", summary="Store credential and load permissions", response_model=SessionState)
async def login(
    payload: LoginRequest,
    session: Session = Depends(get_optional_session),
    client: httpx.AsyncClient = Depends(get_backend_client),
):
    session.login(payload.token, payload.user)

    if payload.validate_token and not await session.validate(client):
        get_access_control().clear()
        raise HTTPException(401, "Token rejected by backend")

    access = get_access_control()
    await refresh_access_control(access, client, session, force=True)
    return session_state(session, access)


# -----------------------------------------------------
# POST /session/logout
# -----------------------------------------------------
@router.post("/logout", summary="Clear credential")
async def logout(session: Session = Depends(get_optional_session)):
    session.logout()
    get_access_control().clear()
    get_list_registry().close_all()
    return {"status": "logged_out"}


# -----------------------------------------------------
# POST /session/validate
# Invalid or unreachable → signed out
# -----------------------------------------------------
@router.post("/validate", summary="Validate stored token with the backend")
async def validate(
    session: Session = Depends(get_optional_session),
    client: httpx.AsyncClient = Depends(get_backend_client),
):
    valid = await session.validate(client)
    if not valid:
        get_access_control().clear()
        get_list_registry().close_all()
    return {"valid": valid}


# -----------------------------------------------------
# POST /session/permissions/refresh
# -----------------------------------------------------
@router.post("/permissions/refresh", summary="Reload permissions from the backend", response_model=SessionState)
async def refresh_permissions(
    session: Session = Depends(get_current_session),
    client: httpx.AsyncClient = Depends(get_backend_client),
):
    access = get_access_control()
    permission_set = await refresh_access_control(access, client, session, force=True)
    logger.info(f"Permissions refreshed ({len(permission_set.modules)} modules)")
    return session_state(session, access)
