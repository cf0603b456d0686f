"""Tests for the TTL cache."""

import pytest

from services.cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    """Expiry, eviction and invalidation."""

    def test_get_and_set(self) -> None:
        cache = TTLCache(max_entries=2, ttl_seconds=10)
        cache.set("a", 1)

        assert cache.get("a") == 1
        assert cache.get("missing") is None
        assert cache.get("missing", "fallback") == "fallback"

    def test_entries_expire(self) -> None:
        clock = FakeClock()
        cache = TTLCache(max_entries=2, ttl_seconds=10, clock=clock)
        cache.set("a", 1)

        clock.now = 9.9
        assert cache.get("a") == 1
        clock.now = 10.0
        assert cache.get("a") is None
        assert len(cache) == 0

    def test_oldest_entry_is_evicted(self) -> None:
        cache = TTLCache(max_entries=2, ttl_seconds=10)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)

        assert "a" not in cache
        assert "b" in cache
        assert "c" in cache

    def test_overwrite_does_not_evict(self) -> None:
        cache = TTLCache(max_entries=2, ttl_seconds=10)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 3)

        assert len(cache) == 2
        assert cache.get("a") == 3

    def test_invalidate_and_clear(self) -> None:
        cache = TTLCache()
        cache.set("a", 1)
        cache.set("b", 2)

        cache.invalidate("a")
        cache.invalidate("never-set")
        assert "a" not in cache
        cache.clear()
        assert len(cache) == 0

    def test_instances_are_independent(self) -> None:
        first, second = TTLCache(), TTLCache()
        first.set("a", 1)

        assert "a" not in second

    @pytest.mark.parametrize("kwargs", [{"max_entries": 0}, {"ttl_seconds": 0}, {"ttl_seconds": -1}])
    def test_invalid_arguments(self, kwargs) -> None:
        with pytest.raises(ValueError):
            TTLCache(**kwargs)
