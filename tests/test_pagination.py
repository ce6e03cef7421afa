# tests/test_pagination.py

"""
Tests for query-string building and list envelope normalization.
"""

from datetime import date

import pytest

from core.errors import FetchError
from core.pagination import build_query_params, normalize_page
from models.query import DateRange, FilterValue, QueryState


# -----------------------------------------------------
# build_query_params
# -----------------------------------------------------
def test_default_state_only_sends_page_params():
    assert build_query_params(QueryState()) == [("page", "1"), ("per_page", "10")]


def test_full_state_params_in_order():
    state = QueryState(
        search_text="silk",
        date_range=DateRange(from_date=date(2024, 1, 1), to_date=date(2024, 1, 31)),
        key_value_filters=[
            FilterValue(key="status", value="paid"),
            FilterValue(key="vendor", value=""),
            FilterValue(key="status", value="partial"),
        ],
        page=3,
        page_size=25,
    )

    assert build_query_params(state) == [
        ("search", "silk"),
        ("from_date", "2024-01-01"),
        ("to_date", "2024-01-31"),
        ("status", "paid"),
        ("status", "partial"),
        ("page", "3"),
        ("per_page", "25"),
    ]


def test_custom_page_size_param():
    params = build_query_params(QueryState(page_size=50), page_size_param="limit")
    assert ("limit", "50") in params


def test_date_range_accepts_from_to_aliases():
    date_range = DateRange.model_validate({"from": "2024-02-01", "to": "2024-02-10"})
    assert date_range.from_date == date(2024, 2, 1)
    assert date_range.is_set


# -----------------------------------------------------
# normalize_page
# -----------------------------------------------------
def test_datatables_envelope():
    result = normalize_page(
        {"data": [{"id": 1}], "recordsTotal": 25, "summary": {"total_amount": 100}},
        page_size=10,
    )
    assert result.rows == [{"id": 1}]
    assert result.total_records == 25
    assert result.total_pages == 3
    assert result.summary == {"total_amount": 100}


def test_laravel_envelope_uses_last_page():
    result = normalize_page(
        {"data": [], "total": 40, "current_page": 2, "last_page": 4},
        page_size=10,
    )
    assert result.total_records == 40
    assert result.total_pages == 4
    assert result.current_page == 2


def test_nested_pagination_and_meta_blocks():
    result = normalize_page({"data": [1, 2], "pagination": {"total": 12, "total_pages": 2}}, page_size=10)
    assert (result.total_records, result.total_pages) == (12, 2)

    result = normalize_page({"data": [1], "meta": {"total": 31}}, page_size=10)
    assert (result.total_records, result.total_pages) == (31, 4)


def test_drf_page_wrapper():
    result = normalize_page(
        {"status": "success", "data": {"count": 21, "results": [{"id": 1}, {"id": 2}]}},
        page_size=10,
    )
    assert result.rows == [{"id": 1}, {"id": 2}]
    assert result.total_records == 21
    assert result.total_pages == 3


def test_info_is_used_as_summary():
    result = normalize_page({"data": [], "info": {"opening_balance": 5}}, page_size=10)
    assert result.summary == {"opening_balance": 5}


def test_missing_totals_fall_back_to_row_count():
    result = normalize_page({"data": [1, 2, 3]}, page_size=10)
    assert result.total_records == 3
    assert result.total_pages == 1
    assert result.summary is None


def test_empty_result_still_has_one_page():
    result = normalize_page({"data": [], "recordsTotal": 0}, page_size=10)
    assert result.total_pages == 1


def test_garbage_totals_are_ignored():
    result = normalize_page({"data": [1], "total": "lots", "last_page": -2}, page_size=10)
    assert result.total_records == 1
    assert result.total_pages == 1


@pytest.mark.parametrize("payload", [None, [], "data", {"rows": []}, {"data": "nope"}])
def test_malformed_bodies_raise_fetch_error(payload):
    with pytest.raises(FetchError):
        normalize_page(payload, page_size=10)
