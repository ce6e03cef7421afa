# models/render.py

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field

from models.enums import GuardFallback, NotificationLevel, RenderKind


# -----------------------------------------------------
# GUARD RESULT
# -----------------------------------------------------
class RenderOutcome(BaseModel):
    """
    What a guarded view should do.

    kind=render    -> render `children`
    kind=redirect  -> navigate to `redirect_to`
    kind=hide      -> render nothing
    kind=message   -> render the access-denied notice (`title` + `message`)
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: RenderKind
    children: Optional[Any] = None
    redirect_to: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.kind == RenderKind.render


# -----------------------------------------------------
# TRANSIENT NOTIFICATION (toast)
# -----------------------------------------------------
class Notification(BaseModel):
    title: str
    description: str = ""
    level: NotificationLevel = NotificationLevel.info
    created_at: datetime = Field(default_factory=datetime.now)


# -----------------------------------------------------
# GUARD REQUEST (view asks before rendering)
# -----------------------------------------------------
class GuardRequest(BaseModel):
    resource_id: Optional[str] = None
    operation: str = "view"
    fallback: GuardFallback = GuardFallback.message
    path: Optional[str] = None
    children: Optional[Any] = None
