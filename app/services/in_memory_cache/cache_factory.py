"""Factory for creating in-memory cache instances."""

from app.services.in_memory_cache.eviction_policy.lfu_cache import LFUCache
from app.services.in_memory_cache.base import BaseCache
from app.services.in_memory_cache.exceptions import InvalidMaxKeyCountError


def create_cache(max_key_count: int) -> BaseCache:
    """
    Create an LFU cache instance.

    Args:
        max_key_count: Maximum number of keys the cache can hold

    Returns:
        A cache instance implementing the BaseCache interface

    Raises:
        InvalidMaxKeyCountError: If max_key_count is invalid
    """
    # bool is an int subclass
    if isinstance(max_key_count, bool) or not isinstance(max_key_count, int) or max_key_count <= 0:
        raise InvalidMaxKeyCountError(max_key_count)

    return LFUCache(max_key_count)
