# models/query.py

from datetime import date
from typing import Any, List, Optional
import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator


def relative_endpoint(endpoint: str) -> str:
    """
    Endpoints are paths on the configured backend ("/items"). Absolute or
    protocol-relative URLs would take the bearer token to another host.
    """
    if not endpoint or not endpoint.startswith("/") or endpoint.startswith("//"):
        raise ValueError(f"endpoint must be a path starting with '/', got '{endpoint}'")
    if not httpx.URL(endpoint).is_relative_url:
        raise ValueError(f"endpoint must be relative to the backend, got '{endpoint}'")
    return endpoint


# -----------------------------------------------------
# FILTER INPUTS (filter dialog)
# -----------------------------------------------------
class DateRange(BaseModel):
    """Both ends optional; either one alone is a valid filter."""
    model_config = ConfigDict(populate_by_name=True)

    from_date: Optional[date] = Field(None, alias="from")
    to_date: Optional[date] = Field(None, alias="to")

    @property
    def is_set(self) -> bool:
        return self.from_date is not None or self.to_date is not None


class FilterValue(BaseModel):
    """Arbitrary field filter forwarded verbatim as `key=value`."""
    key: str
    value: str

    @property
    def is_set(self) -> bool:
        return bool(self.key) and bool(self.value)


class FilterUpdate(BaseModel):
    date_range: DateRange = Field(default_factory=DateRange)
    key_value_filters: List[FilterValue] = Field(default_factory=list)


# -----------------------------------------------------
# QUERY STATE (one per bound endpoint)
# -----------------------------------------------------
class QueryState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    search_text: str = ""
    date_range: DateRange = Field(default_factory=DateRange)
    key_value_filters: List[FilterValue] = Field(default_factory=list)
    page: int = 1
    page_size: int = 10

    rows: List[Any] = Field(default_factory=list)
    summary: Optional[Any] = None
    total_records: int = 0
    total_pages: int = 1
    is_loading: bool = False

    @property
    def has_active_filters(self) -> bool:
        return self.date_range.is_set or any(f.is_set for f in self.key_value_filters)


# -----------------------------------------------------
# NORMALIZED RESPONSE PAGE
# -----------------------------------------------------
class PageResult(BaseModel):
    """A backend list response after envelope normalization."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    rows: List[Any] = Field(default_factory=list)
    summary: Optional[Any] = None
    total_records: int = 0
    total_pages: int = 1
    current_page: Optional[int] = None


# -----------------------------------------------------
# GATEWAY PAYLOADS
# -----------------------------------------------------
class ListBindRequest(BaseModel):
    endpoint: str
    module_id: Optional[str] = None
    page_size: Optional[int] = Field(None, ge=1)
    initial_search: str = ""

    @field_validator("endpoint")
    @classmethod
    def _endpoint_is_backend_path(cls, value: str) -> str:
        return relative_endpoint(value)


class SearchUpdate(BaseModel):
    text: str = ""


class PageUpdate(BaseModel):
    page: int


class PageSizeUpdate(BaseModel):
    page_size: int = Field(..., ge=1)


class ListSnapshot(BaseModel):
    """What a page view renders: the current QueryState plus derived flags."""
    handle: str
    endpoint: str
    search_text: str
    date_range: DateRange
    key_value_filters: List[FilterValue]
    page: int
    page_size: int
    rows: List[Any]
    summary: Optional[Any] = None
    total_records: int
    total_pages: int
    is_loading: bool
    has_active_filters: bool
