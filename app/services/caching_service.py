"""Caching service with LFU eviction backed by a durable store.

Concurrency contract: every public operation runs under the re-entrant lock
of the underlying cache, including the durable store calls it makes. Store
calls are always issued before the in-memory mutation that depends on them,
so a StoreError leaves the resident entries, their frequencies and the
eviction order exactly as they were.
"""

from dataclasses import replace
from typing import Any, Optional
import threading
import structlog
from prometheus_client import Counter

from app.config import settings
from app.database.connection import SessionLocal
from app.exceptions import InvalidInputError
from app.models import CachedEntity, CacheStats
from app.services.cached_entity_repository import CachedEntityRepository
from app.services.in_memory_cache import BaseCache, RemovalCause, create_cache

logger = structlog.get_logger()

CACHE_HITS = Counter('cache_hits_total', 'Lookups served from memory')
CACHE_MISSES = Counter('cache_misses_total', 'Lookups that fell through to the durable store')
CACHE_EVICTIONS = Counter('cache_evictions_total', 'Entities moved from memory to the durable store')

# Singleton service instance
_service_instance: Optional['CachingService'] = None
_service_lock = threading.Lock()


def _is_valid_id(entity_id: Any) -> bool:
    return isinstance(entity_id, int) and not isinstance(entity_id, bool)


class CachingService:
    """
    LFU cache manager in front of a durable store.

    Every put is written through to the store. Entities leave memory either
    by eviction (the durable copy is kept and refreshed) or by deletion (the
    durable copy is destroyed). Access counts live in memory only and restart
    at 1 whenever an entity is loaded back from the store.
    """

    def __init__(self, repository: CachedEntityRepository, cache: BaseCache):
        """
        Initialize the caching service.

        Args:
            repository: Durable store for entities not resident in memory
            cache: In-memory cache holding resident entities
        """
        self._repository = repository
        self._cache = cache
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def max_cache_size(self) -> int:
        """Maximum number of resident entities."""
        return self._cache.max_key_count

    def put(self, entity: CachedEntity) -> CachedEntity:
        """
        Add or overwrite an entity, writing it through to the durable store.

        Args:
            entity: Entity to cache; id is None for new entities

        Returns:
            The persisted entity with its assigned id

        Raises:
            InvalidInputError: If the entity is missing or has no data
            StoreError: If the durable store fails
        """
        if entity is None:
            raise InvalidInputError("Entity cannot be null.", field="entity")
        if not isinstance(entity.data, str) or not entity.data.strip():
            raise InvalidInputError("Entity data cannot be empty.", field="data")
        if entity.id is not None and not _is_valid_id(entity.id):
            raise InvalidInputError(f"Entity ID must be an integer, got {entity.id!r}.", field="id")

        with self._cache.lock:
            saved = self._repository.save(entity)

            evicted_id = None
            if not self._cache.contains(saved.id) and self._cache.is_full():
                evicted_id = self._evict_one()

            frequency = self._cache.set_key(saved.id, saved)

            logger.info(
                "Added entity to cache",
                function="put",
                entity_id=saved.id,
                frequency=frequency,
                evicted_id=evicted_id,
                cache_size=self._cache.size()
            )
            return replace(saved)

    def get(self, entity_id: int) -> Optional[CachedEntity]:
        """
        Get an entity from memory, falling back to the durable store.

        A store hit is loaded into memory with frequency 1, evicting another
        entity first if the cache is full.

        Args:
            entity_id: ID of the entity

        Returns:
            The entity, or None if it exists neither in memory nor in the store

        Raises:
            InvalidInputError: If the id is not an integer
            StoreError: If the durable store fails
        """
        if not _is_valid_id(entity_id):
            raise InvalidInputError(f"Entity ID must be an integer, got {entity_id!r}.", field="id")

        with self._cache.lock:
            entity = self._cache.get_key(entity_id)
            if entity is not None:
                self._hits += 1
                CACHE_HITS.inc()
                logger.info(
                    "Entity found in cache",
                    function="get",
                    entity_id=entity_id,
                    frequency=self._cache.frequency(entity_id)
                )
                return replace(entity)

            self._misses += 1
            CACHE_MISSES.inc()
            logger.info(
                "Entity not found in cache. Loading from database",
                function="get",
                entity_id=entity_id
            )

            entity = self._repository.find_by_id(entity_id)
            if entity is None:
                logger.info("Entity not found in database", function="get", entity_id=entity_id)
                return None

            evicted_id = None
            if self._cache.is_full():
                evicted_id = self._evict_one()
            self._cache.set_key(entity_id, entity)

            logger.info(
                "Loaded entity into cache",
                function="get",
                entity_id=entity_id,
                evicted_id=evicted_id,
                cache_size=self._cache.size()
            )
            return replace(entity)

    def delete(self, entity_id: int) -> bool:
        """
        Remove an entity from memory and the durable store.

        Deleting an id that exists nowhere is a no-op.

        Args:
            entity_id: ID of the entity to remove

        Returns:
            True if the entity existed in memory or in the store

        Raises:
            InvalidInputError: If the id is not an integer
            StoreError: If the durable store fails
        """
        if not _is_valid_id(entity_id):
            raise InvalidInputError(f"Entity ID must be an integer, got {entity_id!r}.", field="id")

        with self._cache.lock:
            exists = self._cache.contains(entity_id) or self._repository.exists_by_id(entity_id)
            if not exists:
                logger.info(
                    "Entity does not exist, nothing to remove",
                    function="delete",
                    entity_id=entity_id
                )
                return False

            self._repository.delete_by_id(entity_id)
            self._remove(entity_id, RemovalCause.DELETED)
            return True

    def clear_all(self) -> None:
        """Remove every entity from memory and the durable store."""
        with self._cache.lock:
            self._repository.delete_all()
            removed = self._cache.size()
            self._cache.clear()
            logger.info(
                "Removed all entities from cache and database",
                function="clear_all",
                removed_from_memory=removed
            )

    def clear_cache(self) -> None:
        """Remove every entity from memory only; the durable store is untouched."""
        with self._cache.lock:
            removed = self._cache.size()
            self._cache.clear()
            logger.info(
                "Cleared the cache",
                function="clear_cache",
                removed_from_memory=removed,
                cause=RemovalCause.CLEARED.value
            )

    def size(self) -> int:
        """Number of resident entities. Never touches the durable store."""
        return self._cache.size()

    def contains(self, entity_id: int) -> bool:
        """Check whether an entity is resident in memory."""
        return self._cache.contains(entity_id)

    def frequency(self, entity_id: int) -> Optional[int]:
        """Access count of a resident entity, or None if it is not resident."""
        return self._cache.frequency(entity_id)

    def stats(self) -> CacheStats:
        """Snapshot of size and hit/miss/eviction counters."""
        with self._cache.lock:
            return CacheStats(
                size=self._cache.size(),
                max_size=self._cache.max_key_count,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions
            )

    def _evict_one(self) -> Optional[int]:
        """
        Evict the least frequently used entity to the durable store.

        The entity is written back before it leaves memory.

        Returns:
            The evicted id, or None if there was nothing to evict
        """
        victim = self._cache.select_victim()
        if victim is None:
            return None

        entity_id, entity, frequency = victim
        logger.info(
            "Evicting entity from cache to database",
            function="_evict_one",
            entity_id=entity_id,
            frequency=frequency
        )
        self._repository.save(entity)
        self._remove(entity_id, RemovalCause.EVICTED)

        self._evictions += 1
        CACHE_EVICTIONS.inc()
        return entity_id

    def _remove(self, entity_id: int, cause: RemovalCause) -> bool:
        """Drop an entity from memory, recording why it left."""
        removed = self._cache.invalidate_key(entity_id)
        if removed:
            logger.info(
                "Removed entity from cache",
                function="_remove",
                entity_id=entity_id,
                cause=cause.value,
                durable_copy_kept=cause.keeps_durable_copy
            )
        return removed


def get_caching_service() -> CachingService:
    """
    Get the singleton caching service instance.

    On first call, builds the service from settings (cache_max_size and
    the configured database). Subsequent calls return the same instance.

    Raises:
        InvalidMaxKeyCountError: If cache_max_size is invalid (only on first call)
    """
    global _service_instance

    # Double-checked locking pattern for thread-safe singleton
    if _service_instance is None:
        with _service_lock:
            if _service_instance is None:
                _service_instance = CachingService(
                    repository=CachedEntityRepository(SessionLocal),
                    cache=create_cache(settings.cache_max_size)
                )
                logger.info(
                    "Initialized caching service",
                    max_cache_size=settings.cache_max_size
                )

    return _service_instance
