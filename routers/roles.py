# routers/roles.py

from typing import List, Optional

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException

from core.access_control import get_access_control
from core.cache import cache_delete, cache_get, cache_set
from core.errors import FetchError, backend_error
from core.logging_config import logger
from core.notifications import get_notifications
from core.permission_helpers import (
    build_category_modules,
    build_permission_state,
    count_permissions,
    humanize_module,
    select_all_for_module,
    toggle_all_in_category,
    toggle_permission,
)
from core.session import Session
from dependencies.auth import get_backend_client, requires_permission
from models.enums import Operation
from models.permission import ApiRole, PermissionToggle, RolePermissionsUpdate
from services.permission_service import fetch_roles, find_role, refresh_access_control, save_role_permissions

router = APIRouter(
    prefix="/roles",
    tags=["Role Management"],
)

ROLE_MODULE = "role_management"


def draft_key(role_id: int) -> str:
    return f"role_draft:{role_id}"


async def _load_roles(client: httpx.AsyncClient, session: Session) -> List[ApiRole]:
    try:
        return await fetch_roles(client, session)
    except FetchError as e:
        backend_error(e, "Failed to load roles")


def _find_by_id(roles: List[ApiRole], role_id: int) -> ApiRole:
    for role in roles:
        if role.id == role_id:
            return role
    raise HTTPException(404, f"Role {role_id} not found")


def _serialize_matrix(matrix) -> dict:
    return {module_id: perms.model_dump() for module_id, perms in matrix.items()}


# ============================================================
# GET /roles
# Every role with its CRUD matrix, grouped modules per category
# ============================================================
@router.get("", summary="List roles and their permission matrices")
async def list_roles(
    session: Session = Depends(requires_permission(ROLE_MODULE, Operation.view)),
    client: httpx.AsyncClient = Depends(get_backend_client),
):
    roles = await _load_roles(client, session)
    categories = build_category_modules(roles)

    results = []
    for role in roles:
        matrix = cache_get(draft_key(role.id)) or build_permission_state(role)
        results.append({
            "id": role.id,
            "name": role.name,
            "permissions": _serialize_matrix(matrix),
            "count": count_permissions(matrix),
            "has_draft": cache_get(draft_key(role.id)) is not None,
        })

    labels = {
        module_id: humanize_module(module_id)
        for modules in categories.values()
        for module_id in modules
    }

    return {"roles": results, "categories": categories, "labels": labels}


# ============================================================
# POST /roles/{role_id}/toggle
# Edits the unsaved draft for one role
# ============================================================
@router.post("/{role_id}/toggle", summary="Toggle a permission in the role draft")
async def toggle_role_permission(
    role_id: int,
    payload: PermissionToggle,
    session: Session = Depends(requires_permission(ROLE_MODULE, Operation.update)),
    client: httpx.AsyncClient = Depends(get_backend_client),
):
    roles = await _load_roles(client, session)
    role = _find_by_id(roles, role_id)
    matrix = cache_get(draft_key(role_id)) or build_permission_state(role)

    if payload.select_all and payload.module_id:
        matrix = select_all_for_module(matrix, payload.module_id)
    elif payload.category and payload.operation:
        modules = build_category_modules(roles).get(payload.category)
        if modules is None:
            raise HTTPException(404, f"Category '{payload.category}' not found")
        matrix = toggle_all_in_category(matrix, modules, payload.operation)
    elif payload.module_id and payload.operation:
        matrix = toggle_permission(matrix, payload.module_id, payload.operation)
    else:
        raise HTTPException(422, "Give module_id + operation, category + operation, or module_id + select_all")

    cache_set(draft_key(role_id), matrix)

    return {
        "id": role_id,
        "permissions": _serialize_matrix(matrix),
        "count": count_permissions(matrix),
    }


# ============================================================
# PUT /roles/{role_id}
# Save the given matrix (or the draft) to the backend
# ============================================================
@router.put("/{role_id}", summary="Save role permissions")
async def save_role(
    role_id: int,
    payload: Optional[RolePermissionsUpdate] = Body(None),
    session: Session = Depends(requires_permission(ROLE_MODULE, Operation.update)),
    client: httpx.AsyncClient = Depends(get_backend_client),
):
    roles = await _load_roles(client, session)
    role = _find_by_id(roles, role_id)

    matrix = payload.permissions if payload is not None else cache_get(draft_key(role_id))
    if matrix is None:
        raise HTTPException(400, "No permission changes to save")

    try:
        refreshed = await save_role_permissions(client, session, role, matrix, roles)
    except FetchError as e:
        get_notifications().error("Error", f"Failed to update permissions: {e.message}")
        backend_error(e, "Failed to save role permissions")

    cache_delete(draft_key(role_id))
    get_notifications().success("Success", "Permissions updated successfully")

    # The actor's own role changed: reload what they may do
    if find_role([role], session.role) is not None:
        await refresh_access_control(get_access_control(), client, session, force=True)
        logger.info(f"Reloaded own permissions after editing role '{role.name}'")

    return {
        "roles": [
            {
                "id": r.id,
                "name": r.name,
                "permissions": _serialize_matrix(build_permission_state(r)),
            }
            for r in refreshed
        ]
    }
