from typing import Dict, Iterable, List

from models.enums import Operation
from models.permission import ApiPermission, ApiRole, ModulePermissions

PermissionMatrix = Dict[str, ModulePermissions]


# -----------------------------------------------------
# Reading backend role records
# -----------------------------------------------------
def module_of(permission_name: str) -> str:
    return permission_name.rpartition(".")[0] or permission_name


def extract_modules(permissions: Iterable[ApiPermission]) -> List[str]:
    """Unique module ids, first-seen order."""
    modules: List[str] = []
    for p in permissions:
        module_id = module_of(p.name)
        if module_id not in modules:
            modules.append(module_id)
    return modules


def build_permission_state(role: ApiRole) -> PermissionMatrix:
    """
    One entry per module the backend knows about (from permissions_by_category),
    flags set from the role's assigned permission names.
    """
    assigned = set(role.permission_names())
    state: PermissionMatrix = {}

    known = [p for perms in role.permissions_by_category.values() for p in perms]
    for module_id in extract_modules(known + list(role.permissions)):
        state[module_id] = ModulePermissions(**{
            op.value: f"{module_id}.{op.value}" in assigned for op in Operation
        })

    return state


def build_category_modules(roles: Iterable[ApiRole]) -> Dict[str, List[str]]:
    """Category → module ids, merged across every role."""
    categories: Dict[str, List[str]] = {}
    for role in roles:
        for category, perms in role.permissions_by_category.items():
            bucket = categories.setdefault(category, [])
            for module_id in extract_modules(perms):
                if module_id not in bucket:
                    bucket.append(module_id)
    return categories


def build_permission_id_map(roles: Iterable[ApiRole]) -> Dict[str, int]:
    """ "module.operation" → backend permission id."""
    id_map: Dict[str, int] = {}
    for role in roles:
        for p in role.permissions:
            id_map[p.name] = p.id
        for perms in role.permissions_by_category.values():
            for p in perms:
                id_map[p.name] = p.id
    return id_map


def humanize_module(module_id: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in module_id.split("_") if w)


# -----------------------------------------------------
# Editing (every edit keeps "create/update/delete ⇒ view")
# -----------------------------------------------------
def toggle_permission(matrix: PermissionMatrix, module_id: str, operation: Operation) -> PermissionMatrix:
    """
    Flip one flag. Turning view off clears the module; turning any other
    flag on turns view on.
    """
    updated = dict(matrix)
    current = updated.get(module_id) or ModulePermissions()
    updated[module_id] = current.toggle(Operation(operation))
    return updated


def toggle_all_in_category(
    matrix: PermissionMatrix,
    module_ids: Iterable[str],
    operation: Operation,
) -> PermissionMatrix:
    """
    Column toggle for one category: if every module already has the flag,
    clear it everywhere, otherwise set it everywhere.
    """
    operation = Operation(operation)
    module_ids = list(module_ids)
    all_enabled = bool(module_ids) and all(
        (matrix.get(m) or ModulePermissions()).allows(operation) for m in module_ids
    )

    updated = dict(matrix)
    for module_id in module_ids:
        current = updated.get(module_id) or ModulePermissions()
        if all_enabled:
            updated[module_id] = current.revoke(operation)
        else:
            updated[module_id] = current.grant(operation)
    return updated


def select_all_for_module(matrix: PermissionMatrix, module_id: str) -> PermissionMatrix:
    """Row toggle: full access, or nothing if it already had full access."""
    updated = dict(matrix)
    current = updated.get(module_id) or ModulePermissions()
    updated[module_id] = ModulePermissions() if current.is_full else ModulePermissions.full()
    return updated


def to_permission_names(matrix: PermissionMatrix) -> List[str]:
    return [
        f"{module_id}.{op.value}"
        for module_id, perms in matrix.items()
        for op in perms.granted()
    ]


def to_permission_ids(matrix: PermissionMatrix, id_map: Dict[str, int]) -> List[int]:
    """Granted flags → backend ids. Flags without a backend permission are dropped."""
    return [id_map[name] for name in to_permission_names(matrix) if name in id_map]


def count_permissions(matrix: PermissionMatrix) -> int:
    return sum(len(perms.granted()) for perms in matrix.values())

