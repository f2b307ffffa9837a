"""Shared fixtures for caching service tests."""

from typing import Dict, Optional, Set

import pytest

from app.database.connection import create_db_engine, create_session_factory, init_db
from app.exceptions import StoreError
from app.models import CachedEntity
from app.services.cached_entity_repository import CachedEntityRepository
from app.services.caching_service import CachingService
from app.services.in_memory_cache import create_cache


class InMemoryStore:
    """Durable store double keeping rows in a dict and recording calls."""

    def __init__(self):
        self.rows: Dict[int, str] = {}
        self.calls = []
        self.failing_operations: Set[str] = set()
        self.failing_save_ids: Set[int] = set()
        self._next_id = 1

    def _check(self, operation: str, entity_id: Optional[int] = None) -> None:
        self.calls.append((operation, entity_id))
        if operation in self.failing_operations:
            raise StoreError(operation, entity_id, RuntimeError("store unavailable"))

    def save(self, entity: CachedEntity) -> CachedEntity:
        self._check("save", entity.id)
        if entity.id is not None and entity.id in self.failing_save_ids:
            raise StoreError("save", entity.id, RuntimeError("write rejected"))
        entity_id = entity.id
        if entity_id is None:
            entity_id = self._next_id
            self._next_id += 1
        self.rows[entity_id] = entity.data
        return CachedEntity(id=entity_id, data=entity.data)

    def find_by_id(self, entity_id: int) -> Optional[CachedEntity]:
        self._check("find_by_id", entity_id)
        if entity_id not in self.rows:
            return None
        return CachedEntity(id=entity_id, data=self.rows[entity_id])

    def exists_by_id(self, entity_id: int) -> bool:
        self._check("exists_by_id", entity_id)
        return entity_id in self.rows

    def delete_by_id(self, entity_id: int) -> None:
        self._check("delete_by_id", entity_id)
        self.rows.pop(entity_id, None)

    def delete_all(self) -> None:
        self._check("delete_all")
        self.rows.clear()


@pytest.fixture
def store():
    """In-memory durable store double."""
    return InMemoryStore()


@pytest.fixture
def make_service(store):
    """Build a caching service over the store double with the given capacity."""
    def _make(max_cache_size: int = 5) -> CachingService:
        return CachingService(repository=store, cache=create_cache(max_cache_size))
    return _make


@pytest.fixture
def session_factory(tmp_path):
    """Session factory for a fresh SQLite database with tables created."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'store.db'}")
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def repository(session_factory):
    """Durable store backed by a temporary SQLite database."""
    return CachedEntityRepository(session_factory)


@pytest.fixture
def broken_repository(tmp_path):
    """Durable store whose database has no tables, so every call fails."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    yield CachedEntityRepository(create_session_factory(engine))
    engine.dispose()
