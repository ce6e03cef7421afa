from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict

from models.enums import Role


# -----------------------------------------------------
# SIGNED-IN USER (as stored next to the token)
# -----------------------------------------------------
class SessionUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[Any] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None    # backend role name, e.g. "Administrator"

    @property
    def app_role(self) -> Role:
        return Role.from_backend(self.role)


# -----------------------------------------------------
# LOGIN REQUEST (token already acquired by the auth screen)
# -----------------------------------------------------
class LoginRequest(BaseModel):
    token: str
    user: SessionUser
    validate_token: bool = False


# -----------------------------------------------------
# STORED CREDENTIAL
# -----------------------------------------------------
class Credential(BaseModel):
    token: str
    user: SessionUser


# -----------------------------------------------------
# SESSION STATE (returned to views)
# -----------------------------------------------------
class SessionState(BaseModel):
    is_authenticated: bool
    user: Optional[SessionUser] = None
    role: Optional[Role] = None
    permissions: Dict[str, Dict[str, bool]] = {}
