# core/access_control.py

"""
Permission evaluation for page views.

Two independent checks, kept as separate entry points:
  • has_permission(resource_id, operation)  (module-based)
  • can_access_path(path)                   (navigation-based)

guard() picks one explicitly: the module check when a resource id is given,
the path check otherwise. Missing or unloaded permission data always denies.
"""

from typing import Any, Dict, Iterable, List, Optional

from core.config import settings
from core.logging_config import logger
from core.permissions import ALL_MODULES, build_navigation_rules
from models.enums import GuardFallback, Operation, RenderKind
from models.permission import Module, ModulePermissions, NavigationRule, PermissionSet
from models.render import RenderOutcome


ACCESS_DENIED_TITLE = "Access Denied"


def access_denied_message(operation) -> str:
    operation = getattr(operation, "value", operation)
    return (
        f"You don't have permission to {operation} this content. "
        "Please contact your administrator if you believe this is an error."
    )


def normalize_path(path: Optional[str]) -> str:
    """Drop query/fragment and trailing slashes: "/sales/?page=2" → "/sales"."""
    if not path:
        return "/"
    path = path.split("?", 1)[0].split("#", 1)[0].strip()
    if not path.startswith("/"):
        path = "/" + path
    return path.rstrip("/") or "/"


class AccessControl:
    """
    Answers permission questions for the signed-in actor.

    Holds the actor's PermissionSet (None until loaded). Never raises for
    bad input; every unknown is a denial.
    """

    def __init__(
        self,
        *,
        modules: Optional[Iterable[Module]] = None,
        navigation_rules: Optional[Iterable[NavigationRule]] = None,
        default_route: Optional[str] = None,
        permission_set: Optional[PermissionSet] = None,
    ) -> None:
        self._modules: List[Module] = list(modules if modules is not None else ALL_MODULES)
        if navigation_rules is None:
            navigation_rules = build_navigation_rules(self._modules, settings.PUBLIC_PATHS)
        self._rules: List[NavigationRule] = [
            rule.model_copy(update={"path": normalize_path(rule.path)})
            for rule in navigation_rules
        ]
        self._default_route = default_route or settings.DEFAULT_ROUTE
        self._permission_set = permission_set

    # -------------------------------------------------
    # PermissionSet lifecycle
    # -------------------------------------------------
    @property
    def permission_set(self) -> Optional[PermissionSet]:
        return self._permission_set

    @property
    def is_loaded(self) -> bool:
        return self._permission_set is not None

    @property
    def modules(self) -> List[Module]:
        return list(self._modules)

    def load(self, permission_set: Optional[PermissionSet]):
        self._permission_set = permission_set
        if permission_set is not None:
            logger.info(
                f"Permissions loaded for role '{permission_set.role}' "
                f"({len(permission_set.modules)} modules)"
            )

    def load_names(self, names: Iterable[str], role: Optional[str] = None) -> PermissionSet:
        permission_set = PermissionSet.from_names(names, role=role)
        self.load(permission_set)
        return permission_set

    def clear(self):
        """Back to the unloaded (deny-all) state, e.g. on logout."""
        self._permission_set = None

    # -------------------------------------------------
    # Module-based check
    # -------------------------------------------------
    def has_permission(self, resource_id: Optional[str], operation: Any = Operation.view) -> bool:
        if self._permission_set is None:
            return False
        if not resource_id:
            return False

        op = Operation.parse(operation)
        if op is None:
            logger.debug(f"Unknown operation '{operation}' for '{resource_id}', denied")
            return False

        return self._permission_set.allows(resource_id, op)

    def module_permissions(self, module_id: str) -> ModulePermissions:
        if self._permission_set is None:
            return ModulePermissions()
        return self._permission_set.module(module_id)

    def permission_check(self, module_id: str) -> Dict[str, bool]:
        """All four CRUD answers for one module, for toolbar buttons."""
        return {
            "can_view": self.has_permission(module_id, Operation.view),
            "can_create": self.has_permission(module_id, Operation.create),
            "can_update": self.has_permission(module_id, Operation.update),
            "can_delete": self.has_permission(module_id, Operation.delete),
        }

    # -------------------------------------------------
    # Path-based check
    # -------------------------------------------------
    def match_rule(self, path: str) -> Optional[NavigationRule]:
        """Longest rule whose path equals `path` or is a segment prefix of it."""
        target = normalize_path(path)
        best: Optional[NavigationRule] = None

        for rule in self._rules:
            if rule.path == target:
                matched = True
            elif rule.exact:
                matched = False
            elif rule.path == "/":
                matched = True
            else:
                matched = target.startswith(rule.path + "/")

            if matched and (best is None or len(rule.path) > len(best.path)):
                best = rule

        return best

    def can_access_path(self, path: str) -> bool:
        rule = self.match_rule(path)
        if rule is None or rule.public or not rule.resource_id:
            return True
        return self.has_permission(rule.resource_id, Operation.view)

    def allowed_paths(self) -> List[str]:
        """Module paths the actor may view, in catalog order (sidebar menu)."""
        seen = set()
        paths = []
        for module in self._modules:
            if module.path in seen:
                continue
            if self.has_permission(module.id, Operation.view):
                seen.add(module.path)
                paths.append(module.path)
        return paths

    # -------------------------------------------------
    # Guard
    # -------------------------------------------------
    def check(
        self,
        resource_id: Optional[str] = None,
        operation: Any = Operation.view,
        path: Optional[str] = None,
    ) -> bool:
        """Module check when resource_id is given, otherwise path check."""
        if resource_id:
            return self.has_permission(resource_id, operation)
        return self.can_access_path(path or self._default_route)

    def guard(
        self,
        children: Any = None,
        *,
        resource_id: Optional[str] = None,
        operation: Any = Operation.view,
        fallback: Any = GuardFallback.message,
        path: Optional[str] = None,
    ) -> RenderOutcome:
        if self.check(resource_id, operation, path):
            return RenderOutcome(kind=RenderKind.render, children=children)

        try:
            fallback = GuardFallback(fallback)
        except ValueError:
            fallback = GuardFallback.message

        logger.debug(
            f"Guard denied {operation} on {resource_id or normalize_path(path)} ({fallback})"
        )

        if fallback == GuardFallback.redirect:
            return RenderOutcome(kind=RenderKind.redirect, redirect_to=self._default_route)

        if fallback == GuardFallback.hide:
            return RenderOutcome(kind=RenderKind.hide)

        return RenderOutcome(
            kind=RenderKind.message,
            title=ACCESS_DENIED_TITLE,
            message=access_denied_message(operation),
        )


# Global instance for the signed-in actor
_access_control = AccessControl()


def get_access_control() -> AccessControl:
    return _access_control
