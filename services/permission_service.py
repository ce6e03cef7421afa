# services/permission_service.py

"""
Backend permission list → PermissionSet for the signed-in actor.

GET /permissions returns every role with its granted permissions:

    [{"id": 1, "name": "admin", "guard_name": "web",
      "permissions": [{"id": 7, "name": "sales.view", "category": "Operations"}, ...],
      "permissions_by_category": {"Operations": [...]}}, ...]

The actor's set is cached for the session under "permissions:<role>" and
dropped on login, logout and after a successful save.
"""

from typing import Dict, List, Optional

import httpx
from pydantic import ValidationError

from core.access_control import AccessControl
from core.cache import cache_get, cache_set, cache_delete_prefix
from core.config import settings
from core.errors import FetchError, extract_http_error
from core.logging_config import logger
from core.permission_helpers import build_permission_id_map, to_permission_ids
from core.session import PERMISSION_CACHE_PREFIX, Session
from models.enums import Role
from models.permission import ApiRole, ModulePermissions, PermissionSet


def permission_cache_key(role) -> str:
    return f"{PERMISSION_CACHE_PREFIX}{role}"


def invalidate_permission_cache():
    cache_delete_prefix(PERMISSION_CACHE_PREFIX)


# -----------------------------------------------------
# Fetch roles
# -----------------------------------------------------
async def fetch_roles(client: httpx.AsyncClient, session: Session) -> List[ApiRole]:
    """
    Raises:
        FetchError: request failed or the body is not a list of roles.
    """
    try:
        response = await client.get(
            settings.PERMISSIONS_ENDPOINT,
            headers=session.auth_headers(),
        )
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        status = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
        raise FetchError(extract_http_error(e), status_code=status) from e

    if not isinstance(data, list):
        raise FetchError("Permissions response is not a list")

    roles = []
    for raw in data:
        try:
            roles.append(ApiRole.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping malformed role record: {e.error_count()} errors")
    return roles


def find_role(roles: List[ApiRole], role) -> Optional[ApiRole]:
    """Match a backend role record to the actor's role (by id name or display name)."""
    wanted = Role.from_backend(role)
    for api_role in roles:
        name = (api_role.name or "").strip().lower()
        if name in (wanted.value, wanted.display_name.lower()):
            return api_role
    return None


# -----------------------------------------------------
# Actor permission set
# -----------------------------------------------------
async def load_permission_set(
    client: httpx.AsyncClient,
    session: Session,
    *,
    force: bool = False,
) -> PermissionSet:
    """
    PermissionSet for the session's role, from cache unless `force`.

    Never raises: an anonymous session, a failed request or a missing role
    all give an empty set (every check denies). Failures are not cached.
    """
    role = session.role
    if role is None:
        return PermissionSet()

    key = permission_cache_key(role.value)
    if not force:
        cached = cache_get(key)
        if cached is not None:
            return cached

    try:
        roles = await fetch_roles(client, session)
    except FetchError as e:
        logger.error(f"Failed to load permissions for role '{role}': {e.message}")
        return PermissionSet(role=role.value)

    api_role = find_role(roles, role)
    if api_role is None:
        logger.warning(f"Role '{role}' not present in backend permission list, denying all")
        permission_set = PermissionSet(role=role.value)
    else:
        permission_set = PermissionSet.from_names(api_role.permission_names(), role=role.value)

    cache_set(key, permission_set)
    return permission_set


async def refresh_access_control(
    access: AccessControl,
    client: httpx.AsyncClient,
    session: Session,
    *,
    force: bool = False,
) -> PermissionSet:
    """Load (or reload) the actor's set into `access`; anonymous sessions unload it."""
    if not session.is_authenticated:
        access.clear()
        return PermissionSet()

    permission_set = await load_permission_set(client, session, force=force)
    access.load(permission_set)
    return permission_set


# -----------------------------------------------------
# Save edited role permissions
# -----------------------------------------------------
async def save_role_permissions(
    client: httpx.AsyncClient,
    session: Session,
    role: ApiRole,
    edited: Dict[str, ModulePermissions],
    roles: Optional[List[ApiRole]] = None,
) -> List[ApiRole]:
    """
    POST /permissions/{role_id}/update with the granted permission ids,
    then drop the cache and return the refreshed role list.

    Raises:
        FetchError: the save or the refresh failed.
    """
    id_map = build_permission_id_map(roles or [role])
    permission_ids = to_permission_ids(edited, id_map)

    try:
        response = await client.post(
            f"{settings.PERMISSIONS_ENDPOINT}/{role.id}/update",
            json={"permission_ids": permission_ids},
            headers=session.auth_headers(),
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        status = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
        raise FetchError(extract_http_error(e), status_code=status) from e

    logger.info(f"Saved {len(permission_ids)} permissions for role '{role.name}'")
    invalidate_permission_cache()

    return await fetch_roles(client, session)
