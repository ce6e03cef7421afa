from typing import Optional

import httpx
from fastapi import Depends, HTTPException, Request, status

from core.access_control import AccessControl, get_access_control
from core.session import Session, get_session
from models.enums import Operation
from services.permission_service import refresh_access_control


# ============================================================
# Backend client (created on startup, stored on app.state)
# ============================================================
def get_backend_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "backend_client", None)
    if client is None:
        raise HTTPException(500, "Backend client not configured")
    return client


# ============================================================
# SESSION
# ============================================================
def get_optional_session() -> Session:
    """The process session, signed in or not (for hybrid endpoints)."""
    return get_session()


def get_current_session(session: Session = Depends(get_optional_session)) -> Session:
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
        )
    return session


# ============================================================
# ACCESS CONTROL (loads the actor's permissions on first use)
# ============================================================
async def get_loaded_access_control(
    session: Session = Depends(get_optional_session),
    client: httpx.AsyncClient = Depends(get_backend_client),
) -> AccessControl:
    access = get_access_control()
    if not session.is_authenticated:
        access.clear()
    elif not access.is_loaded:
        await refresh_access_control(access, client, session)
    return access


# ============================================================
# PERMISSION CHECK
# ============================================================
def requires_permission(module_id: str, operation: Operation = Operation.view):
    """
    Route dependency: signed in AND allowed `operation` on `module_id`.
    """
    operation = Operation(operation)

    async def checker(
        session: Session = Depends(get_current_session),
        access: AccessControl = Depends(get_loaded_access_control),
    ) -> Session:
        if not access.has_permission(module_id, operation):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions: '{module_id}.{operation.value}' required",
            )
        return session

    return checker


def ensure_permission(access: AccessControl, module_id: Optional[str], operation: Operation = Operation.view):
    """Inline variant for routes where the module id comes from the request body."""
    if module_id and not access.has_permission(module_id, operation):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Insufficient permissions: '{module_id}.{Operation(operation).value}' required",
        )
