"""Unit tests for the LFU frequency-bucket cache."""

import pytest

from app.services.in_memory_cache import (
    CacheCapacityExceededError,
    InvalidMaxKeyCountError,
    LFUCache,
    RemovalCause,
    create_cache,
)


class TestCreateCache:
    """Test cases for the cache factory."""

    def test_creates_lfu_cache(self):
        cache = create_cache(3)

        assert isinstance(cache, LFUCache)
        assert cache.max_key_count == 3
        assert cache.size() == 0

    @pytest.mark.parametrize("max_key_count", [0, -1, True, "5", 2.5])
    def test_rejects_invalid_max_key_count(self, max_key_count):
        with pytest.raises(InvalidMaxKeyCountError):
            create_cache(max_key_count)


class TestLFUCache:
    """Test cases for LFUCache."""

    @pytest.fixture
    def cache(self):
        return LFUCache(3)

    def test_new_key_starts_at_frequency_one(self, cache):
        assert cache.set_key(1, "a") == 1
        assert cache.frequency(1) == 1
        assert cache.contains(1)

    def test_get_key_increments_frequency(self, cache):
        cache.set_key(1, "a")

        assert cache.get_key(1) == "a"
        assert cache.get_key(1) == "a"
        assert cache.frequency(1) == 3

    def test_get_missing_key_returns_none(self, cache):
        assert cache.get_key(42) is None
        assert cache.frequency(42) is None

    def test_overwrite_updates_value_and_bumps_frequency(self, cache):
        cache.set_key(1, "a")

        assert cache.set_key(1, "b") == 2
        assert cache.get_key(1) == "b"
        assert cache.size() == 1

    def test_contains_does_not_touch_frequency(self, cache):
        cache.set_key(1, "a")
        cache.contains(1)

        assert cache.frequency(1) == 1

    def test_set_new_key_when_full_raises(self, cache):
        for key in (1, 2, 3):
            cache.set_key(key, str(key))

        assert cache.is_full()
        with pytest.raises(CacheCapacityExceededError):
            cache.set_key(4, "4")
        assert cache.size() == 3
        assert not cache.contains(4)

    def test_overwrite_when_full_is_allowed(self, cache):
        for key in (1, 2, 3):
            cache.set_key(key, str(key))

        assert cache.set_key(2, "two") == 2
        assert cache.size() == 3

    def test_select_victim_on_empty_cache(self, cache):
        assert cache.select_victim() is None

    def test_select_victim_picks_lowest_frequency(self, cache):
        for key in (1, 2, 3):
            cache.set_key(key, str(key))
        cache.get_key(1)
        cache.get_key(3)

        assert cache.select_victim() == (2, "2", 1)

    def test_select_victim_does_not_remove(self, cache):
        cache.set_key(1, "a")

        cache.select_victim()

        assert cache.contains(1)
        assert cache.size() == 1

    def test_ties_resolve_oldest_first(self, cache):
        for key in (1, 2, 3):
            cache.set_key(key, str(key))

        key, _, _ = cache.select_victim()
        assert key == 1

    def test_min_frequency_moves_up_when_bucket_empties(self, cache):
        cache.set_key(1, "a")
        cache.set_key(2, "b")
        cache.get_key(1)
        cache.get_key(2)
        cache.get_key(2)

        assert cache.select_victim() == (1, "a", 2)

    def test_invalidate_key(self, cache):
        cache.set_key(1, "a")
        cache.set_key(2, "b")
        cache.get_key(2)

        assert cache.invalidate_key(1) is True
        assert cache.invalidate_key(1) is False
        assert not cache.contains(1)
        assert cache.select_victim() == (2, "b", 2)

    def test_reinserted_key_restarts_at_one(self, cache):
        cache.set_key(1, "a")
        cache.get_key(1)
        cache.invalidate_key(1)

        assert cache.set_key(1, "a") == 1

    def test_stale_bucket_entry_is_discarded(self, cache):
        cache.set_key(1, "a")
        cache.set_key(2, "b")
        # Unmap key 1 without unlinking its node from the bucket
        cache._cache.pop(1)

        assert cache.select_victim() == (2, "b", 1)
        # The stale node is gone for good
        cache.invalidate_key(2)
        assert cache.select_victim() is None

    def test_clear(self, cache):
        cache.set_key(1, "a")
        cache.set_key(2, "b")

        cache.clear()

        assert cache.size() == 0
        assert cache.select_victim() is None
        assert cache.set_key(3, "c") == 1


class TestRemovalCause:
    """Test cases for RemovalCause."""

    def test_only_deletion_destroys_durable_copy(self):
        assert RemovalCause.EVICTED.keeps_durable_copy
        assert RemovalCause.CLEARED.keeps_durable_copy
        assert not RemovalCause.DELETED.keeps_durable_copy
