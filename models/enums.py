from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Actor categories the permission sets are scoped to."""

    admin = "admin"
    manager = "manager"
    user = "user"

    @property
    def display_name(self) -> str:
        return ROLE_DISPLAY_NAMES[self]

    @classmethod
    def from_backend(cls, name) -> "Role":
        """
        Map a backend role name ("Administrator", "manager", ...) onto the
        closed role set. Anything unrecognized becomes the least privileged
        role.
        """
        key = str(name or "").strip().lower()
        for role in cls:
            if key in (role.value, role.display_name.lower()):
                return role
        return cls.user


ROLE_DISPLAY_NAMES = {
    Role.admin: "Administrator",
    Role.manager: "Manager",
    Role.user: "User",
}


# -----------------------------------------------------
# CRUD OPERATION
# -----------------------------------------------------
class Operation(BaseStrEnum):
    """Operations a permission can grant on a module."""

    view = "view"
    create = "create"
    update = "update"
    delete = "delete"

    @classmethod
    def parse(cls, value):
        """Return the Operation for value, or None when it is not one."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


# -----------------------------------------------------
# GUARD FALLBACK
# -----------------------------------------------------
class GuardFallback(BaseStrEnum):
    """What a guard renders when the check fails."""

    redirect = "redirect"
    hide = "hide"
    message = "message"


# -----------------------------------------------------
# RENDER OUTCOME
# -----------------------------------------------------
class RenderKind(BaseStrEnum):
    render = "render"
    redirect = "redirect"
    hide = "hide"
    message = "message"


# -----------------------------------------------------
# NOTIFICATION LEVEL
# -----------------------------------------------------
class NotificationLevel(BaseStrEnum):
    """Toast variant shown to the user."""

    info = "info"
    success = "success"
    error = "error"
