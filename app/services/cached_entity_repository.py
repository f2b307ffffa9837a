"""Durable store for cached entities backed by a SQL database."""

from typing import Optional

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.exceptions import StoreError
from app.models import CachedEntity

logger = structlog.get_logger()


class CachedEntityRepository:
    """
    System of record for cached entities.

    Each call opens a short-lived session and commits before returning,
    so the repository can be shared by a long-lived cache instance.
    Any SQLAlchemy failure is re-raised as StoreError.
    """

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize the repository.

        Args:
            session_factory: Factory producing database sessions
        """
        self._session_factory = session_factory

    def save(self, entity: CachedEntity) -> CachedEntity:
        """
        Insert the entity when it has no id, upsert it otherwise.

        Args:
            entity: Entity to persist

        Returns:
            The persisted entity with its assigned id
        """
        try:
            with self._session_factory() as db:
                if entity.id is None:
                    result = db.execute(
                        text("INSERT INTO cached_entity (data) VALUES (:data)"),
                        {"data": entity.data}
                    )
                    entity_id = result.lastrowid
                else:
                    entity_id = entity.id
                    result = db.execute(
                        text("UPDATE cached_entity SET data = :data WHERE id = :id"),
                        {"id": entity_id, "data": entity.data}
                    )
                    if result.rowcount == 0:
                        db.execute(
                            text("INSERT INTO cached_entity (id, data) VALUES (:id, :data)"),
                            {"id": entity_id, "data": entity.data}
                        )
                db.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to save entity",
                function="save",
                entity_id=entity.id,
                error=str(e)
            )
            raise StoreError("save", entity.id, e) from e

        logger.debug("Saved entity", function="save", entity_id=entity_id)
        return CachedEntity(id=entity_id, data=entity.data)

    def find_by_id(self, entity_id: int) -> Optional[CachedEntity]:
        """
        Look up an entity by id.

        Returns:
            The entity, or None if it does not exist
        """
        try:
            with self._session_factory() as db:
                row = db.execute(
                    text("SELECT id, data FROM cached_entity WHERE id = :id"),
                    {"id": entity_id}
                ).fetchone()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to find entity",
                function="find_by_id",
                entity_id=entity_id,
                error=str(e)
            )
            raise StoreError("find_by_id", entity_id, e) from e

        if not row:
            return None
        return CachedEntity(id=row[0], data=row[1])

    def exists_by_id(self, entity_id: int) -> bool:
        """Check whether an entity with this id is stored."""
        try:
            with self._session_factory() as db:
                row = db.execute(
                    text("SELECT 1 FROM cached_entity WHERE id = :id"),
                    {"id": entity_id}
                ).fetchone()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to check entity existence",
                function="exists_by_id",
                entity_id=entity_id,
                error=str(e)
            )
            raise StoreError("exists_by_id", entity_id, e) from e

        return row is not None

    def delete_by_id(self, entity_id: int) -> None:
        """Delete an entity by id. Deleting a missing id is not an error."""
        try:
            with self._session_factory() as db:
                result = db.execute(
                    text("DELETE FROM cached_entity WHERE id = :id"),
                    {"id": entity_id}
                )
                db.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to delete entity",
                function="delete_by_id",
                entity_id=entity_id,
                error=str(e)
            )
            raise StoreError("delete_by_id", entity_id, e) from e

        logger.debug(
            "Deleted entity",
            function="delete_by_id",
            entity_id=entity_id,
            rows_deleted=result.rowcount
        )

    def delete_all(self) -> None:
        """Delete every stored entity."""
        try:
            with self._session_factory() as db:
                result = db.execute(text("DELETE FROM cached_entity"))
                db.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to delete all entities", function="delete_all", error=str(e))
            raise StoreError("delete_all", None, e) from e

        logger.info("Deleted all entities", function="delete_all", rows_deleted=result.rowcount)
