# core/notifications.py

from collections import deque
from threading import Lock
from typing import List, Optional

from core.config import settings
from core.logging_config import logger
from models.enums import NotificationLevel
from models.render import Notification


# -----------------------------------------------------
# Transient notifications (toasts)
# -----------------------------------------------------
class NotificationCenter:
    """
    Collects transient user-visible notifications until a view drains them.
    Oldest entries fall off once `history` is exceeded.
    """

    def __init__(self, history: Optional[int] = None):
        self._items: deque = deque(maxlen=history or settings.NOTIFICATION_HISTORY)
        self._lock = Lock()

    def push(
        self,
        title: str,
        description: str = "",
        level: NotificationLevel = NotificationLevel.info,
    ) -> Notification:
        notification = Notification(title=title, description=description, level=level)
        with self._lock:
            self._items.append(notification)

        if level == NotificationLevel.error:
            logger.warning(f"Notify [{title}] {description}")
        else:
            logger.info(f"Notify [{title}] {description}")
        return notification

    def error(self, title: str, description: str = "") -> Notification:
        return self.push(title, description, NotificationLevel.error)

    def success(self, title: str, description: str = "") -> Notification:
        return self.push(title, description, NotificationLevel.success)

    def peek(self) -> List[Notification]:
        with self._lock:
            return list(self._items)

    def drain(self) -> List[Notification]:
        """Return pending notifications and forget them."""
        with self._lock:
            items = list(self._items)
            self._items.clear()
        return items


# Global instance shared by controllers and the gateway
_notifications = NotificationCenter()


def get_notifications() -> NotificationCenter:
    return _notifications
