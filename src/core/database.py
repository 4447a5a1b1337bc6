"""Entity store: database connection and session management.

This module handles the SQLAlchemy engine backing every LMS record. The
default URL is a private in-memory SQLite database, so each store starts
empty (or seeded) and lives as long as the process.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import DATABASE_URL, SEED_DATA, UPLOAD_DIR
from models.base import Base
# Import models to ensure they are registered with Base.metadata
import models  # noqa: F401
from utils.seed import load_seed_data

logger = logging.getLogger(__name__)

_IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")

# Singleton store shared by the app and the in-process router
_store_instance: Optional["EntityStore"] = None


class EntityStore:
    """Owns the engine, the session factory and the upload directory."""

    def __init__(self, url: str = DATABASE_URL, upload_dir: Path = UPLOAD_DIR):
        """Initialize the store and create its tables.

        Args:
            url: SQLAlchemy database URL.
            upload_dir: Directory uploaded files are written to.
        """
        self.url = url
        self.upload_dir = Path(upload_dir)

        engine_kwargs = {}
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        if url in _IN_MEMORY_URLS:
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)
        self.init_db()

    def init_db(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def seed(self) -> None:
        """Load the demo records into the store."""
        with self.session() as db:
            load_seed_data(db)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Open a session that is closed when the block ends."""
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def create_store(
    url: Optional[str] = None,
    seed: bool = SEED_DATA,
    upload_dir: Optional[Path] = None,
) -> EntityStore:
    """Build a new, independent store.

    Args:
        url: Database URL, defaults to DATABASE_URL.
        seed: Whether to load the demo records.
        upload_dir: Upload directory, defaults to UPLOAD_DIR.

    Returns:
        The initialized store.
    """
    store = EntityStore(url or DATABASE_URL, upload_dir or UPLOAD_DIR)
    if seed:
        store.seed()
    logger.info("Entity store ready (%s, seeded=%s)", store.url, seed)
    return store


def get_store() -> EntityStore:
    """Get the process-wide store, creating it on first use."""
    global _store_instance
    if _store_instance is None:
        _store_instance = create_store()
    return _store_instance
