# routers/access.py

from typing import Optional

from fastapi import APIRouter, Depends

from core.access_control import AccessControl, normalize_path
from dependencies.auth import get_loaded_access_control
from models.render import GuardRequest, RenderOutcome

router = APIRouter(
    prefix="/access",
    tags=["Access Control"],
)


# -----------------------------------------------------
# GET /access/check
# Module check when resource_id is given, path check otherwise
# -----------------------------------------------------
@router.get("/check", summary="Can the actor see this path / do this operation?")
async def check_access(
    path: Optional[str] = None,
    resource_id: Optional[str] = None,
    operation: str = "view",
    access: AccessControl = Depends(get_loaded_access_control),
):
    return {
        "path": normalize_path(path) if path else None,
        "resource_id": resource_id,
        "operation": operation,
        "allowed": access.check(resource_id, operation, path),
    }


# -----------------------------------------------------
# GET /access/permissions/{module_id}
# CRUD flags for toolbar buttons
# -----------------------------------------------------
@router.get("/permissions/{module_id}", summary="CRUD answers for one module")
async def module_permission_check(
    module_id: str,
    access: AccessControl = Depends(get_loaded_access_control),
):
    return {"module_id": module_id, **access.permission_check(module_id)}


# -----------------------------------------------------
# POST /access/guard
# -----------------------------------------------------
@router.post("/guard", summary="Guard a view", response_model=RenderOutcome)
async def guard_view(
    payload: GuardRequest,
    access: AccessControl = Depends(get_loaded_access_control),
):
    return access.guard(
        payload.children,
        resource_id=payload.resource_id,
        operation=payload.operation,
        fallback=payload.fallback,
        path=payload.path,
    )


# -----------------------------------------------------
# GET /access/menu
# Sidebar: module paths the actor may view
# -----------------------------------------------------
@router.get("/menu", summary="Allowed navigation entries")
async def menu(access: AccessControl = Depends(get_loaded_access_control)):
    allowed = set(access.allowed_paths())
    items = [
        module.model_dump()
        for module in access.modules
        if module.path in allowed and access.has_permission(module.id)
    ]
    return {"paths": access.allowed_paths(), "items": items}
