"""Reasons an entry leaves the in-memory cache."""

from enum import Enum


class RemovalCause(str, Enum):
    """Enumeration of removal causes.

    Only DELETED destroys the durable copy.
    """
    
    EVICTED = "EVICTED"  # Moved to the durable store to free a slot
    DELETED = "DELETED"  # Removed from memory and the durable store
    CLEARED = "CLEARED"  # Dropped from memory by a bulk clear

    @property
    def keeps_durable_copy(self) -> bool:
        """Whether the entry is still retrievable from the durable store."""
        return self is not RemovalCause.DELETED
