"""SQLite catalog store.

Handles database connection, session management, and the catalog
repository backed by SQLAlchemy.
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..errors import NotFoundError, RepositoryError
from .models import Base, CatalogItemRow
from .schemas import CatalogItem

logger = logging.getLogger(__name__)


class Database:
    """Database connection and session manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     CIRCULATION_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "CIRCULATION_DB_PATH",
                str(Path.home() / ".circulation" / "catalog.db"),
            )

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # For in-memory databases, use StaticPool to reuse the same connection
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


class SqlCatalogRepository:
    """Catalog repository stored in SQLite."""

    def __init__(self, db: Optional[Database] = None):
        self.db = db or get_db()

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        try:
            with self.db.get_session() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("Catalog store failure: %s", e)
            raise RepositoryError(f"Catalog store failure: {e}") from e

    def find_all(self) -> list[CatalogItem]:
        with self._session() as s:
            rows = s.execute(select(CatalogItemRow).order_by(CatalogItemRow.id)).scalars().all()
            return [row.to_item() for row in rows]

    def find_by_id(self, item_id: int) -> Optional[CatalogItem]:
        with self._session() as s:
            row = s.get(CatalogItemRow, item_id)
            return row.to_item() if row else None

    def save(self, item: CatalogItem) -> CatalogItem:
        with self._session() as s:
            row = CatalogItemRow()
            row.apply(item)
            s.add(row)
            s.flush()
            logger.debug("Saved catalog item %s", row.id)
            return row.to_item()

    def update(self, item: CatalogItem) -> CatalogItem:
        with self._session() as s:
            row = s.get(CatalogItemRow, item.id)
            if row is None:
                raise NotFoundError(item.id)
            row.apply(item)
            s.flush()
            return row.to_item()

    def delete_by_id(self, item_id: int) -> None:
        with self._session() as s:
            row = s.get(CatalogItemRow, item_id)
            if row is not None:
                s.delete(row)


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
