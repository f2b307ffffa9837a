"""Base cache interface for in-memory cache implementations."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple
import threading


class BaseCache(ABC):
    """
    Abstract base class for cache implementations.

    Implementations never evict on their own: callers ask for the next
    victim with select_victim(), persist it, then invalidate it.
    """

    def __init__(self, max_key_count: int):
        """
        Initialize the cache.

        Args:
            max_key_count: Maximum number of keys the cache can hold
        """
        if max_key_count <= 0:
            raise ValueError(f"max_key_count must be positive, got {max_key_count}")

        self._max_key_count = max_key_count
        self._lock = threading.RLock()

    @abstractmethod
    def get_key(self, key: int) -> Optional[Any]:
        """
        Get a value from the cache by key, recording the access.

        Args:
            key: The key to look up

        Returns:
            The value associated with the key, or None if not found
        """
        pass

    @abstractmethod
    def set_key(self, key: int, val: Any) -> int:
        """
        Set a key-value pair in the cache.

        Args:
            key: The key to store
            val: The value to store

        Returns:
            The access count of the key after the write
        """
        pass

    @abstractmethod
    def invalidate_key(self, key: int) -> bool:
        """
        Remove a key from the cache.

        Args:
            key: The key to remove

        Returns:
            True if the key was present
        """
        pass

    @abstractmethod
    def select_victim(self) -> Optional[Tuple[int, Any, int]]:
        """
        Pick the next key to evict without removing it.

        Returns:
            Tuple of (key, value, access count), or None if the cache is empty
        """
        pass

    @abstractmethod
    def frequency(self, key: int) -> Optional[int]:
        """Get the access count of a resident key, or None if absent."""
        pass

    @abstractmethod
    def contains(self, key: int) -> bool:
        """Check residency without recording an access."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all entries from the cache."""
        pass

    @abstractmethod
    def size(self) -> int:
        """
        Get the current number of keys in the cache.

        Returns:
            The number of keys currently in the cache
        """
        pass

    @property
    def max_key_count(self) -> int:
        """Get the maximum number of keys the cache can hold."""
        return self._max_key_count

    @property
    def lock(self) -> threading.RLock:
        """Re-entrant lock guarding every structure of this cache."""
        return self._lock

    def is_full(self) -> bool:
        """Check whether inserting a new key requires an eviction first."""
        with self._lock:
            return self.size() >= self._max_key_count
