# routers/notifications.py

from typing import List

from fastapi import APIRouter

from core.notifications import get_notifications
from models.render import Notification

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
)


# -----------------------------------------------------
# GET /notifications
# Pending toasts; each is returned once
# -----------------------------------------------------
@router.get("", summary="Drain pending notifications", response_model=List[Notification])
async def drain_notifications(peek: bool = False):
    center = get_notifications()
    return center.peek() if peek else center.drain()
