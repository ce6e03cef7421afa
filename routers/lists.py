# routers/lists.py

import httpx
from fastapi import APIRouter, Depends, HTTPException

from core.access_control import AccessControl
from core.list_controller import ListController, bind
from core.session import Session
from dependencies.auth import (
    ensure_permission,
    get_backend_client,
    get_current_session,
    get_loaded_access_control,
)
from models.enums import Operation
from models.query import (
    FilterUpdate,
    ListBindRequest,
    ListSnapshot,
    PageSizeUpdate,
    PageUpdate,
    SearchUpdate,
)
from services.list_registry import get_list_registry, snapshot

router = APIRouter(
    prefix="/lists",
    tags=["Lists"],
)


def _controller(handle: str) -> ListController:
    controller = get_list_registry().get(handle)
    if controller is None:
        raise HTTPException(404, f"List '{handle}' not found")
    return controller


async def _respond(handle: str, controller: ListController, wait: bool) -> ListSnapshot:
    """`wait=true` returns once the debounce and every fetch have finished."""
    if wait:
        await controller.settle()
    return snapshot(handle, controller)


# ============================================================
# POST /lists
# Bind a controller to a backend endpoint and start the first fetch
# ============================================================
@router.post("", summary="Bind a list", response_model=ListSnapshot)
async def bind_list(
    payload: ListBindRequest,
    wait: bool = False,
    session: Session = Depends(get_current_session),
    access: AccessControl = Depends(get_loaded_access_control),
    client: httpx.AsyncClient = Depends(get_backend_client),
):
    ensure_permission(access, payload.module_id, Operation.view)

    controller = bind(
        payload.endpoint,
        session=session,
        client=client,
        page_size=payload.page_size,
        initial_search=payload.initial_search,
    )
    handle = get_list_registry().add(controller)
    return await _respond(handle, controller, wait)


# ============================================================
# GET / DELETE /lists/{handle}
# ============================================================
@router.get("/{handle}", summary="Current list state", response_model=ListSnapshot, dependencies=[Depends(get_current_session)])
async def get_list(handle: str, wait: bool = False):
    return await _respond(handle, _controller(handle), wait)


@router.delete("/{handle}", summary="Close a list", dependencies=[Depends(get_current_session)])
async def close_list(handle: str):
    if get_list_registry().remove(handle) is None:
        raise HTTPException(404, f"List '{handle}' not found")
    return {"status": "closed", "handle": handle}


# ============================================================
# Search (debounced)
# ============================================================
@router.put("/{handle}/search", summary="Update search text", response_model=ListSnapshot, dependencies=[Depends(get_current_session)])
async def update_search(handle: str, payload: SearchUpdate, wait: bool = False):
    controller = _controller(handle)
    controller.set_search_text(payload.text)
    return await _respond(handle, controller, wait)


# ============================================================
# Filters (immediate)
# ============================================================
@router.put("/{handle}/filters", summary="Apply filters", response_model=ListSnapshot, dependencies=[Depends(get_current_session)])
async def apply_filters(handle: str, payload: FilterUpdate, wait: bool = False):
    controller = _controller(handle)
    controller.apply_filters(payload.date_range, payload.key_value_filters)
    return await _respond(handle, controller, wait)


@router.delete("/{handle}/filters", summary="Clear filters", response_model=ListSnapshot, dependencies=[Depends(get_current_session)])
async def clear_filters(handle: str, wait: bool = False):
    controller = _controller(handle)
    controller.clear_filters()
    return await _respond(handle, controller, wait)


# ============================================================
# Pagination (out-of-range pages are ignored)
# ============================================================
@router.put("/{handle}/page", summary="Go to page", response_model=ListSnapshot, dependencies=[Depends(get_current_session)])
async def set_page(handle: str, payload: PageUpdate, wait: bool = False):
    controller = _controller(handle)
    controller.set_page(payload.page)
    return await _respond(handle, controller, wait)


@router.post("/{handle}/next", summary="Next page", response_model=ListSnapshot, dependencies=[Depends(get_current_session)])
async def next_page(handle: str, wait: bool = False):
    controller = _controller(handle)
    controller.next_page()
    return await _respond(handle, controller, wait)


@router.post("/{handle}/previous", summary="Previous page", response_model=ListSnapshot, dependencies=[Depends(get_current_session)])
async def previous_page(handle: str, wait: bool = False):
    controller = _controller(handle)
    controller.previous_page()
    return await _respond(handle, controller, wait)


@router.put("/{handle}/page-size", summary="Change page size", response_model=ListSnapshot, dependencies=[Depends(get_current_session)])
async def set_page_size(handle: str, payload: PageSizeUpdate, wait: bool = False):
    controller = _controller(handle)
    controller.set_page_size(payload.page_size)
    return await _respond(handle, controller, wait)


# ============================================================
# Refresh (after a create/update/delete elsewhere)
# ============================================================
@router.post("/{handle}/refresh", summary="Re-fetch", response_model=ListSnapshot, dependencies=[Depends(get_current_session)])
async def refresh(handle: str, wait: bool = False):
    controller = _controller(handle)
    controller.refresh()
    return await _respond(handle, controller, wait)
