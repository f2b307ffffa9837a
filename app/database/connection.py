"""Database engine and session management for the durable store."""

from typing import Generator

import structlog
from sqlalchemy import Column, Integer, MetaData, Table, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.config import settings

logger = structlog.get_logger()

metadata = MetaData()

cached_entity_table = Table(
    "cached_entity",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("data", Text, nullable=False),
    # Never hand out the id of a deleted row again
    sqlite_autoincrement=True,
)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given database URL.

    Args:
        database_url: SQLAlchemy database URL
        echo: Whether to log emitted SQL

    Returns:
        Configured engine
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are opened from request worker threads
        connect_args["check_same_thread"] = False

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the engine."""
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db(engine: Engine) -> None:
    """Create the durable store tables if they do not exist."""
    metadata.create_all(engine)
    logger.info("Database tables initialized", tables=list(metadata.tables.keys()))


engine = create_db_engine(settings.database_url, echo=settings.db_echo)
SessionLocal = create_session_factory(engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
