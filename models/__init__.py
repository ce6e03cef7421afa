# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    Operation,
    GuardFallback,
    RenderKind,
    NotificationLevel,
)

# -------------------------
# Permission Models
# -------------------------
from .permission import (
    Module,
    NavigationRule,
    ModulePermissions,
    PermissionSet,
    ApiPermission,
    ApiRole,
    RolePermissionsUpdate,
    PermissionToggle,
)

# -------------------------
# List / Query Models
# -------------------------
from .query import (
    DateRange,
    FilterValue,
    FilterUpdate,
    QueryState,
    PageResult,
    ListBindRequest,
    SearchUpdate,
    PageUpdate,
    PageSizeUpdate,
    ListSnapshot,
)

# -------------------------
# Session Models
# -------------------------
from .auth import SessionUser, LoginRequest, Credential, SessionState

# -------------------------
# Render / Notification Models
# -------------------------
from .render import RenderOutcome, Notification, GuardRequest

__all__ = [
    # enums
    "Role",
    "Operation",
    "GuardFallback",
    "RenderKind",
    "NotificationLevel",

    # permissions
    "Module",
    "NavigationRule",
    "ModulePermissions",
    "PermissionSet",
    "ApiPermission",
    "ApiRole",
    "RolePermissionsUpdate",
    "PermissionToggle",

    # lists
    "DateRange",
    "FilterValue",
    "FilterUpdate",
    "QueryState",
    "PageResult",
    "ListBindRequest",
    "SearchUpdate",
    "PageUpdate",
    "PageSizeUpdate",
    "ListSnapshot",

    # session
    "SessionUser",
    "LoginRequest",
    "Credential",
    "SessionState",

    # render
    "RenderOutcome",
    "Notification",
    "GuardRequest",
]
