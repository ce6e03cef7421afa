# tests/test_cache.py

"""
Tests for caching functionality.
"""

from time import monotonic
from unittest.mock import patch

from core.cache import (
    SessionCache,
    cache_clear,
    cache_delete,
    cache_delete_prefix,
    cache_get,
    cache_set,
)


def test_cache_set_and_get():
    """Test setting and getting values from cache."""
    cache_set("test_key", "test_value", ttl_seconds=60)
    assert cache_get("test_key") == "test_value"


def test_cache_without_ttl_never_expires():
    cache_set("session_key", "kept")

    with patch("core.cache.monotonic", return_value=monotonic() + 365 * 86400):
        assert cache_get("session_key") == "kept"


def test_cache_expiration():
    """Entries past their TTL read as missing (clock mocked)."""
    cache_set("expiring_key", "expired_value", ttl_seconds=1)
    assert cache_get("expiring_key") == "expired_value"

    with patch("core.cache.monotonic", return_value=monotonic() + 2):
        assert cache_get("expiring_key") is None


def test_cache_delete():
    cache_set("delete_key", "delete_value")
    cache_delete("delete_key")
    assert cache_get("delete_key") is None


def test_cache_delete_prefix():
    cache_set("permissions:admin", 1)
    cache_set("permissions:user", 2)
    cache_set("role_draft:1", 3)

    assert cache_delete_prefix("permissions:") == 2
    assert cache_get("permissions:admin") is None
    assert cache_get("role_draft:1") == 3


def test_cache_clear():
    """Test clearing all cache entries."""
    cache_set("key1", "value1")
    cache_set("key2", "value2")

    cache_clear()

    assert cache_get("key1") is None
    assert cache_get("key2") is None


def test_session_cache_size_and_keys():
    cache = SessionCache()
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.size() == 2
    cache.delete("a")
    assert cache.keys() == ["b"]
