# models/permission.py

from typing import Dict, Iterable, List, Optional
from pydantic import BaseModel, Field, model_validator

from models.enums import Operation


# ===============================================================
# MODULE CATALOG ENTRIES
# ===============================================================

class Module(BaseModel):
    """A permission-gated area of the application (one sidebar entry)."""
    id: str
    label: str
    path: str
    category: Optional[str] = None


class NavigationRule(BaseModel):
    """
    Maps a route path (or path prefix) to the module whose view permission
    it requires. resource_id=None with public=True means always allowed.
    exact=True only matches the path itself, never its children.
    """
    path: str
    resource_id: Optional[str] = None
    public: bool = False
    exact: bool = False


# ===============================================================
# PERMISSION STATE
# ===============================================================

class ModulePermissions(BaseModel):
    """
    CRUD flags for one module.

    create/update/delete imply view: construction normalizes raw flags and
    every mutation below keeps the implication.
    """
    view: bool = False
    create: bool = False
    update: bool = False
    delete: bool = False

    @model_validator(mode="after")
    def _mutations_imply_view(self):
        if self.create or self.update or self.delete:
            self.view = True
        return self

    def allows(self, operation: Operation) -> bool:
        return bool(getattr(self, operation.value))

    def granted(self) -> List[Operation]:
        return [op for op in Operation if self.allows(op)]

    def grant(self, operation: Operation) -> "ModulePermissions":
        flags = self.model_dump()
        flags[operation.value] = True
        return ModulePermissions(**flags)

    def revoke(self, operation: Operation) -> "ModulePermissions":
        if operation == Operation.view:
            return ModulePermissions()
        flags = self.model_dump()
        flags[operation.value] = False
        return ModulePermissions(**flags)

    def toggle(self, operation: Operation) -> "ModulePermissions":
        if self.allows(operation):
            return self.revoke(operation)
        return self.grant(operation)

    @property
    def is_full(self) -> bool:
        return all(self.allows(op) for op in Operation)

    @classmethod
    def full(cls) -> "ModulePermissions":
        return cls(view=True, create=True, update=True, delete=True)


class PermissionSet(BaseModel):
    """
    (module, operation) -> granted for one role.

    Modules absent from `modules` are denied every operation.
    """
    role: Optional[str] = None
    modules: Dict[str, ModulePermissions] = Field(default_factory=dict)

    @classmethod
    def from_names(cls, names: Iterable[str], role: Optional[str] = None) -> "PermissionSet":
        """
        Parse backend permission names ("sales.view", "inventory_raw.create").
        Malformed names and unknown operations are skipped.
        """
        permission_set = cls(role=role)
        for raw in names or []:
            if not isinstance(raw, str) or "." not in raw:
                continue
            module_id, _, action = raw.strip().rpartition(".")
            operation = Operation.parse(action)
            if not module_id or operation is None:
                continue
            permission_set.grant(module_id, operation)
        return permission_set

    def module(self, module_id: str) -> ModulePermissions:
        return self.modules.get(module_id) or ModulePermissions()

    def allows(self, module_id: str, operation: Operation) -> bool:
        permissions = self.modules.get(module_id)
        if permissions is None:
            return False
        return permissions.allows(operation)

    def grant(self, module_id: str, operation: Operation):
        self.modules[module_id] = self.module(module_id).grant(operation)

    def revoke(self, module_id: str, operation: Operation):
        if module_id in self.modules:
            self.modules[module_id] = self.modules[module_id].revoke(operation)

    def toggle(self, module_id: str, operation: Operation):
        self.modules[module_id] = self.module(module_id).toggle(operation)

    def names(self) -> List[str]:
        """Flatten back to the backend's "{module}.{operation}" form."""
        return [
            f"{module_id}.{op.value}"
            for module_id, permissions in sorted(self.modules.items())
            for op in permissions.granted()
        ]


# ===============================================================
# BACKEND ROLE / PERMISSION RECORDS (GET /permissions)
# ===============================================================

class ApiPermission(BaseModel):
    id: int
    name: str
    category: Optional[str] = None


class ApiRole(BaseModel):
    id: int
    name: str
    guard_name: Optional[str] = None
    permissions: List[ApiPermission] = Field(default_factory=list)
    permissions_by_category: Dict[str, List[ApiPermission]] = Field(default_factory=dict)

    def permission_names(self) -> List[str]:
        return [p.name for p in self.permissions]


class RolePermissionsUpdate(BaseModel):
    """Edited permission matrix for one role, as sent by the role screen."""
    permissions: Dict[str, ModulePermissions]


class PermissionToggle(BaseModel):
    module_id: Optional[str] = None
    category: Optional[str] = None
    operation: Optional[Operation] = None
    select_all: bool = False
