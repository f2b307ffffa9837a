"""Custom exceptions for in-memory cache operations."""


class CacheCapacityExceededError(Exception):
    """Raised when a new key is written to a cache that has no free slot."""

    def __init__(self, key: int, max_key_count: int):
        self.key = key
        self.max_key_count = max_key_count
        super().__init__(f"Cannot insert key {key}: cache is full ({max_key_count} keys). Evict first")


class InvalidMaxKeyCountError(Exception):
    """Raised when an invalid max_key_count is provided."""

    def __init__(self, max_key_count: int):
        self.max_key_count = max_key_count
        super().__init__(f"Invalid max_key_count: {max_key_count}. Must be a positive integer greater than 0")
