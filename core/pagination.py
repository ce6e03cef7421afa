"""
Query-string building and response normalization for paginated list endpoints.

Backends in this system do not agree on one list envelope. Shapes handled:

    {"data": [...], "recordsTotal": 25, "summary": {...}}          (datatables style)
    {"data": [...], "total": 25, "current_page": 2, "last_page": 3} (Laravel paginator)
    {"data": [...], "pagination": {"total": 25, "total_pages": 3}}
    {"data": [...], "meta": {"total": 25, "last_page": 3}}
    {"status": "success", "data": {"count": 25, "results": [...]}}  (DRF page wrapper)

All of them normalize to a PageResult. A body whose rows cannot be found is
rejected with FetchError; everything else falls back to safe defaults.
"""
import math
from typing import Any, List, Optional, Tuple

from core.config import settings
from core.errors import FetchError
from models.query import PageResult, QueryState

TOTAL_KEYS = ("recordsTotal", "total", "count", "totalRecords", "total_records")
LAST_PAGE_KEYS = ("last_page", "total_pages", "totalPages", "lastPage")
CURRENT_PAGE_KEYS = ("current_page", "currentPage", "page")
NESTED_KEYS = ("pagination", "meta")


def build_query_params(state: QueryState, page_size_param: Optional[str] = None) -> List[Tuple[str, str]]:
    """
    Query parameters for one fetch, in a stable order.
    Unset fields are omitted; filters keep their order and may repeat keys.
    """
    params: List[Tuple[str, str]] = []

    if state.search_text:
        params.append(("search", state.search_text))

    if state.date_range.from_date:
        params.append(("from_date", state.date_range.from_date.isoformat()))

    if state.date_range.to_date:
        params.append(("to_date", state.date_range.to_date.isoformat()))

    for item in state.key_value_filters:
        if item.is_set:
            params.append((item.key, item.value))

    params.append(("page", str(state.page)))
    params.append((page_size_param or settings.PAGE_SIZE_PARAM, str(state.page_size)))

    return params


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None


def _first_int(sources: List[dict], keys) -> Optional[int]:
    for source in sources:
        for key in keys:
            number = _as_int(source.get(key))
            if number is not None:
                return number
    return None


def normalize_page(payload: Any, page_size: int) -> PageResult:
    """
    Turn a decoded JSON body into a PageResult.

    Raises:
        FetchError: body is not an object or carries no row list.
    """
    if not isinstance(payload, dict):
        raise FetchError("Unexpected response body")

    data = payload.get("data")
    sources = [payload]

    if isinstance(data, dict) and isinstance(data.get("results"), list):
        # DRF page wrapper: counts live next to the results
        sources.insert(0, data)
        rows = data["results"]
    elif isinstance(data, list):
        rows = data
    else:
        raise FetchError("Response has no data list")

    for key in NESTED_KEYS:
        nested = payload.get(key)
        if isinstance(nested, dict):
            sources.append(nested)

    summary = payload.get("summary")
    if summary is None:
        summary = payload.get("info")

    total_records = _first_int(sources, TOTAL_KEYS)
    if total_records is None:
        total_records = len(rows)

    total_pages = _first_int(sources, LAST_PAGE_KEYS)
    if not total_pages:
        total_pages = math.ceil(total_records / page_size) if page_size > 0 else 1

    return PageResult(
        rows=rows,
        summary=summary,
        total_records=total_records,
        total_pages=max(total_pages, 1),
        current_page=_first_int(sources, CURRENT_PAGE_KEYS),
    )
