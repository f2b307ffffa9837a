"""In-memory cache with least-frequently-used eviction."""

from app.services.in_memory_cache.cache_factory import create_cache
from app.services.in_memory_cache.base import BaseCache
from app.services.in_memory_cache.eviction_policy.lfu_cache import LFUCache
from app.services.in_memory_cache.eviction_policy.removal_cause import RemovalCause
from app.services.in_memory_cache.exceptions import (
    CacheCapacityExceededError,
    InvalidMaxKeyCountError
)

__all__ = [
    "create_cache",
    "BaseCache",
    "LFUCache",
    "RemovalCause",
    "CacheCapacityExceededError",
    "InvalidMaxKeyCountError",
]
