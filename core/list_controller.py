# core/list_controller.py

"""
Server-driven list state for one remote collection endpoint.

One ListController per mounted page view. It owns the QueryState, turns
search/filter/page changes into GET requests and keeps the displayed rows
consistent when requests overlap:

  • search text updates are debounced (one pending timer per controller)
  • filter, page, page-size and refresh changes fetch immediately
  • every fetch gets a sequence number; only the most recently triggered
    one may write rows/summary/totals, late answers are dropped
  • failures keep the previous rows and surface a notification

Runs on the asyncio event loop; all state changes happen on that loop.
"""

import asyncio
from typing import Any, Callable, Generic, Iterable, List, Optional, Set, TypeVar

import httpx

from core.config import settings
from core.errors import FetchError, handle_fetch_error
from core.logging_config import logger
from core.notifications import NotificationCenter, get_notifications
from core.pagination import build_query_params, normalize_page
from core.session import Session
from models.query import DateRange, FilterValue, QueryState, relative_endpoint

RowT = TypeVar("RowT")
SummaryT = TypeVar("SummaryT")


class ListController(Generic[RowT, SummaryT]):
    """
    Generic over the row and summary types; rows/summary are passed through
    `row_parser` / `summary_parser` when given, otherwise kept as decoded JSON.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        session: Session,
        client: httpx.AsyncClient,
        page_size: Optional[int] = None,
        debounce_seconds: Optional[float] = None,
        initial_search: str = "",
        notifier: Optional[NotificationCenter] = None,
        row_parser: Optional[Callable[[Any], RowT]] = None,
        summary_parser: Optional[Callable[[Any], SummaryT]] = None,
    ) -> None:
        page_size = page_size if page_size is not None else settings.DEFAULT_PAGE_SIZE
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")

        self.endpoint = relative_endpoint(endpoint)
        self._session = session
        self._client = client
        self._notifier = notifier or get_notifications()
        self._row_parser = row_parser
        self._summary_parser = summary_parser
        self._debounce_seconds = (
            debounce_seconds
            if debounce_seconds is not None
            else settings.SEARCH_DEBOUNCE_MS / 1000
        )

        self.state = QueryState(search_text=initial_search, page=1, page_size=page_size)

        self._sequence = 0
        self._debounce_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self._closed = False

    # -------------------------------------------------
    # Read-only views of the state
    # -------------------------------------------------
    @property
    def rows(self) -> List[RowT]:
        return self.state.rows

    @property
    def summary(self) -> Optional[SummaryT]:
        return self.state.summary

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def has_active_filters(self) -> bool:
        return self.state.has_active_filters

    @property
    def sequence(self) -> int:
        """Number of fetches triggered so far."""
        return self._sequence

    @property
    def has_pending_search(self) -> bool:
        return self._debounce_task is not None and not self._debounce_task.done()

    @property
    def closed(self) -> bool:
        return self._closed

    # -------------------------------------------------
    # User interactions
    # -------------------------------------------------
    def start(self) -> asyncio.Task:
        """Initial fetch after binding."""
        return self._trigger_fetch()

    def set_search_text(self, text: str):
        """
        Update the search text now; fetch once typing pauses for the
        debounce window. A new search always starts from page 1.
        """
        self.state.search_text = text or ""
        self.state.page = 1
        self._restart_debounce()

    def apply_filters(
        self,
        date_range: Optional[DateRange] = None,
        key_value_filters: Optional[Iterable[FilterValue]] = None,
    ) -> Optional[asyncio.Task]:
        self.state.date_range = date_range.model_copy() if date_range else DateRange()
        self.state.key_value_filters = [f.model_copy() for f in (key_value_filters or [])]
        self.state.page = 1
        return self._trigger_fetch()

    def clear_filters(self) -> Optional[asyncio.Task]:
        return self.apply_filters(DateRange(), [])

    def set_page(self, page: int) -> Optional[asyncio.Task]:
        """Out-of-range pages are ignored (returns None, no fetch)."""
        if page < 1 or page > self.state.total_pages:
            logger.debug(f"{self.endpoint}: page {page} outside 1..{self.state.total_pages}, ignored")
            return None
        self.state.page = page
        return self._trigger_fetch()

    def next_page(self) -> Optional[asyncio.Task]:
        return self.set_page(self.state.page + 1)

    def previous_page(self) -> Optional[asyncio.Task]:
        return self.set_page(self.state.page - 1)

    def set_page_size(self, page_size: int) -> Optional[asyncio.Task]:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.state.page_size = page_size
        self.state.page = 1
        return self._trigger_fetch()

    def refresh(self) -> Optional[asyncio.Task]:
        """Re-fetch with unchanged state (after a create/update/delete elsewhere)."""
        return self._trigger_fetch()

    def close(self):
        """Unmount: cancel the pending search; responses still in flight are ignored."""
        self._closed = True
        self._cancel_debounce()
        self.state.is_loading = False

    async def settle(self):
        """Wait until no search timer is pending and no fetch is in flight."""
        while self.has_pending_search or self._inflight:
            pending = list(self._inflight)
            if self.has_pending_search:
                pending.append(self._debounce_task)
            await asyncio.gather(*pending, return_exceptions=True)

    # -------------------------------------------------
    # Debounce
    # -------------------------------------------------
    def _cancel_debounce(self):
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    def _restart_debounce(self):
        if self._closed:
            return
        self._cancel_debounce()
        self._debounce_task = asyncio.get_running_loop().create_task(self._debounce())

    async def _debounce(self):
        await asyncio.sleep(self._debounce_seconds)
        # Detach first so _trigger_fetch does not cancel this running task
        self._debounce_task = None
        self._trigger_fetch()

    # -------------------------------------------------
    # Fetching
    # -------------------------------------------------
    def _trigger_fetch(self) -> Optional[asyncio.Task]:
        if self._closed:
            return None

        # The immediate fetch already carries the latest search text
        self._cancel_debounce()

        self._sequence += 1
        sequence = self._sequence
        params = build_query_params(self.state)
        self.state.is_loading = True

        task = asyncio.get_running_loop().create_task(
            self._fetch(sequence, params, self.state.page_size)
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    def _is_current(self, sequence: int) -> bool:
        return not self._closed and sequence == self._sequence

    def _parse(self, response: httpx.Response, page_size: int):
        """Decode and parse one page. Any error in the body or the parsers is a FetchError."""
        try:
            result = normalize_page(response.json(), page_size)
            rows = result.rows
            if self._row_parser is not None:
                rows = [self._row_parser(row) for row in rows]
            summary = result.summary
            if summary is not None and self._summary_parser is not None:
                summary = self._summary_parser(summary)
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"Unusable response body: {e.__class__.__name__}") from e
        return result, rows, summary

    async def _fetch(self, sequence: int, params, page_size: int):
        logger.debug(f"GET {self.endpoint} #{sequence} {params}")
        try:
            response = await self._client.get(
                self.endpoint,
                params=params,
                headers=self._session.auth_headers(),
            )
            response.raise_for_status()
            result, rows, summary = self._parse(response, page_size)
        except (httpx.HTTPError, FetchError, ValueError) as e:
            if not self._is_current(sequence):
                logger.debug(f"{self.endpoint}: stale failure #{sequence} dropped")
                return
            self.state.is_loading = False
            message = handle_fetch_error(e, f"Loading {self.endpoint}")
            self._notifier.error("Error", message)
            return

        if not self._is_current(sequence):
            logger.debug(f"{self.endpoint}: stale response #{sequence} dropped (latest #{self._sequence})")
            return

        # No await between these assignments: the update is atomic on the loop
        self.state.rows = rows
        self.state.summary = summary
        self.state.total_records = result.total_records
        self.state.total_pages = result.total_pages
        self.state.is_loading = False


def bind(
    endpoint: str,
    *,
    session: Session,
    client: httpx.AsyncClient,
    page_size: Optional[int] = None,
    **options,
) -> ListController:
    """
    Create a controller for `endpoint` and start its first fetch.
    Must be called with an event loop running.
    """
    controller = ListController(
        endpoint,
        session=session,
        client=client,
        page_size=page_size,
        **options,
    )
    controller.start()
    return controller
