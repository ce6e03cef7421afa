# services/list_registry.py

"""
Bound list controllers, keyed by an opaque handle.

A page view binds once (POST /lists), keeps the handle while mounted and
closes it on unmount (DELETE /lists/{handle}).
"""

import uuid
from threading import Lock
from typing import Dict, List, Optional

from core.list_controller import ListController
from core.logging_config import logger
from models.query import ListSnapshot


class ListRegistry:
    def __init__(self):
        self._controllers: Dict[str, ListController] = {}
        self._lock = Lock()

    def add(self, controller: ListController) -> str:
        handle = uuid.uuid4().hex
        with self._lock:
            self._controllers[handle] = controller
        logger.debug(f"List bound: {handle} → {controller.endpoint}")
        return handle

    def get(self, handle: str) -> Optional[ListController]:
        with self._lock:
            return self._controllers.get(handle)

    def remove(self, handle: str) -> Optional[ListController]:
        with self._lock:
            controller = self._controllers.pop(handle, None)
        if controller is not None:
            controller.close()
            logger.debug(f"List closed: {handle}")
        return controller

    def close_all(self):
        with self._lock:
            handles = list(self._controllers)
        for handle in handles:
            self.remove(handle)

    def handles(self) -> List[str]:
        with self._lock:
            return list(self._controllers)

    def size(self) -> int:
        with self._lock:
            return len(self._controllers)


def snapshot(handle: str, controller: ListController) -> ListSnapshot:
    state = controller.state
    return ListSnapshot(
        handle=handle,
        endpoint=controller.endpoint,
        search_text=state.search_text,
        date_range=state.date_range,
        key_value_filters=state.key_value_filters,
        page=state.page,
        page_size=state.page_size,
        rows=state.rows,
        summary=state.summary,
        total_records=state.total_records,
        total_pages=state.total_pages,
        is_loading=state.is_loading,
        has_active_filters=state.has_active_filters,
    )


# Global registry
_registry = ListRegistry()


def get_list_registry() -> ListRegistry:
    return _registry
