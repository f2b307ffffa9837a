"""LFU (Least Frequently Used) cache implementation."""

from typing import Any, Optional, Tuple
import structlog

from app.services.in_memory_cache.base import BaseCache
from app.services.in_memory_cache.exceptions import CacheCapacityExceededError

logger = structlog.get_logger()


class Node:
    """Node for doubly linked list in LFU cache with frequency tracking."""

    def __init__(self, key: int, value: Any):
        self.key = key
        self.value = value
        self.frequency = 1
        self.prev: Optional['Node'] = None
        self.next: Optional['Node'] = None


class DoublyLinkedList:
    """Doubly linked list for frequency buckets in LFU cache."""

    def __init__(self):
        # Dummy head and tail nodes
        self._head = Node(-1, None)
        self._tail = Node(-1, None)
        self._head.next = self._tail
        self._tail.prev = self._head
        self._size = 0

    def add_to_head(self, node: Node) -> None:
        """
        Add a node to the head of the list.

        Args:
            node: The node to add
        """
        node.next = self._head.next
        node.prev = self._head
        self._head.next.prev = node
        self._head.next = node
        self._size += 1

    def remove_node(self, node: Node) -> None:
        """
        Remove a node from the list.

        Args:
            node: The node to remove
        """
        if node.prev:
            node.prev.next = node.next
        if node.next:
            node.next.prev = node.prev
        node.prev = None
        node.next = None
        self._size -= 1

    def peek_tail(self) -> Optional[Node]:
        """
        Return the tail node (oldest entry in this frequency bucket) without removing it.

        Returns:
            The tail node, or None if list is empty
        """
        if self._size == 0:
            return None

        tail_node = self._tail.prev
        if tail_node and tail_node != self._head:
            return tail_node
        return None

    def is_empty(self) -> bool:
        """Check if the list is empty."""
        return self._size == 0


class LFUCache(BaseCache):
    """
    Thread-safe LFU (Least Frequently Used) cache implementation.

    Uses a hash map for O(1) key lookup and frequency buckets with
    doubly linked lists to maintain frequency order. A node carries both
    the value and its access count, so a frequency change is a single move
    between buckets.

    Ties within the lowest frequency are resolved oldest-first, which is an
    implementation detail rather than a guarantee.
    """

    def __init__(self, max_key_count: int):
        """
        Initialize LFU cache.

        Args:
            max_key_count: Maximum number of keys the cache can hold
        """
        super().__init__(max_key_count)
        self._cache: dict[int, Node] = {}
        # Frequency buckets: frequency -> DoublyLinkedList
        self._frequency_buckets: dict[int, DoublyLinkedList] = {}
        self._min_frequency = 1

    def get_key(self, key: int) -> Optional[Any]:
        """
        Get a value from the cache by key.

        Increments the frequency of the accessed key.

        Args:
            key: The key to look up

        Returns:
            The value associated with the key, or None if not found
        """
        with self._lock:
            if key not in self._cache:
                return None

            node = self._cache[key]
            self._increment_frequency(node)
            return node.value

    def set_key(self, key: int, val: Any) -> int:
        """
        Set a key-value pair in the cache.

        If key exists, updates value and increments frequency.
        If key doesn't exist, creates new node with frequency=1.

        Args:
            key: The key to store
            val: The value to store

        Returns:
            The frequency of the key after the write

        Raises:
            CacheCapacityExceededError: If key is new and the cache is full
        """
        with self._lock:
            if key in self._cache:
                # Update existing node
                node = self._cache[key]
                node.value = val
                self._increment_frequency(node)
                return node.frequency

            if len(self._cache) >= self._max_key_count:
                raise CacheCapacityExceededError(key, self._max_key_count)

            # Create new node with frequency=1
            node = Node(key, val)
            self._cache[key] = node
            self._add_to_frequency_bucket(node, 1)
            self._min_frequency = 1
            return node.frequency

    def invalidate_key(self, key: int) -> bool:
        """
        Remove a key from the cache.

        Args:
            key: The key to remove

        Returns:
            True if the key was resident
        """
        with self._lock:
            if key not in self._cache:
                return False

            node = self._cache.pop(key)
            frequency = node.frequency
            self._remove_from_frequency_bucket(node)

            # Update min_frequency if we removed the last node from min_frequency bucket
            if frequency == self._min_frequency:
                if self._frequency_buckets:
                    self._min_frequency = min(self._frequency_buckets.keys())
                else:
                    self._min_frequency = 1
            return True

    def select_victim(self) -> Optional[Tuple[int, Any, int]]:
        """
        Pick the least frequently used key without removing it.

        Bucket nodes whose key is no longer mapped to them are discarded
        until a live node is found.

        Returns:
            Tuple of (key, value, frequency), or None if the cache is empty
        """
        with self._lock:
            while self._frequency_buckets:
                if self._min_frequency not in self._frequency_buckets:
                    self._min_frequency = min(self._frequency_buckets.keys())

                bucket = self._frequency_buckets[self._min_frequency]
                node = bucket.peek_tail()
                if node is None:
                    del self._frequency_buckets[self._min_frequency]
                    continue

                if self._cache.get(node.key) is not node:
                    logger.debug(
                        "Discarding stale eviction candidate",
                        key=node.key,
                        frequency=self._min_frequency
                    )
                    bucket.remove_node(node)
                    if bucket.is_empty():
                        del self._frequency_buckets[self._min_frequency]
                    continue

                return node.key, node.value, node.frequency

            self._min_frequency = 1
            return None

    def frequency(self, key: int) -> Optional[int]:
        """Get the access count of a resident key, or None if absent."""
        with self._lock:
            node = self._cache.get(key)
            return node.frequency if node else None

    def contains(self, key: int) -> bool:
        """Check residency without touching the frequency."""
        with self._lock:
            return key in self._cache

    def clear(self) -> None:
        """Clear all entries from the cache."""
        with self._lock:
            self._cache.clear()
            self._frequency_buckets.clear()
            self._min_frequency = 1

    def size(self) -> int:
        """
        Get the current number of keys in the cache.

        Returns:
            The number of keys currently in the cache
        """
        with self._lock:
            return len(self._cache)

    def _increment_frequency(self, node: Node) -> None:
        """
        Increment the frequency of a node and move it to the appropriate bucket.

        Args:
            node: The node whose frequency should be incremented
        """
        old_frequency = node.frequency
        new_frequency = old_frequency + 1

        # Remove from old frequency bucket
        self._remove_from_frequency_bucket(node)

        # Update frequency and add to new bucket
        node.frequency = new_frequency
        self._add_to_frequency_bucket(node, new_frequency)

        # Move min_frequency up if the old bucket emptied
        if old_frequency == self._min_frequency and old_frequency not in self._frequency_buckets:
            self._min_frequency = min(self._frequency_buckets.keys())

    def _add_to_frequency_bucket(self, node: Node, frequency: int) -> None:
        """
        Add a node to the appropriate frequency bucket.

        Args:
            node: The node to add
            frequency: The frequency bucket to add to
        """
        if frequency not in self._frequency_buckets:
            self._frequency_buckets[frequency] = DoublyLinkedList()

        self._frequency_buckets[frequency].add_to_head(node)

    def _remove_from_frequency_bucket(self, node: Node) -> None:
        """
        Remove a node from its current frequency bucket.

        Args:
            node: The node to remove
        """
        frequency = node.frequency
        if frequency in self._frequency_buckets:
            self._frequency_buckets[frequency].remove_node(node)
            # Clean up empty buckets
            if self._frequency_buckets[frequency].is_empty():
                del self._frequency_buckets[frequency]
