"""Pytest configuration and shared fixtures.

This module provides fixtures for testing circulation, including
temporary databases, in-memory repositories, a controllable clock and a
recording subscriber.
"""

import os
import tempfile
from datetime import date, timedelta
from pathlib import Path
from typing import Generator

import pytest

from circulation.catalog.repository import InMemoryCatalogRepository
from circulation.catalog.schemas import Availability, CatalogItem, Category, Medium
from circulation.catalog.sqlite import Database, SqlCatalogRepository, reset_db
from circulation.config import reset_config
from circulation.lending.manager import LendingManager
from circulation.notify.notifier import ChangeNotifier


START_DATE = date(2025, 3, 1)


class FrozenClock:
    """Clock returning a fixed date that tests can move forward."""

    def __init__(self, today: date = START_DATE):
        self.current = today

    def __call__(self) -> date:
        return self.current

    def advance(self, days: int) -> date:
        self.current += timedelta(days=days)
        return self.current


class RecordingSubscriber:
    """Subscriber that remembers every notification."""

    def __init__(self, name: str = "recorder", log: list = None):
        self.name = name
        self.calls = []
        self.log = log

    def notify(self, item, old_availability, new_availability):
        self.calls.append((item, old_availability, new_availability))
        if self.log is not None:
            self.log.append(self.name)


class FailingSubscriber:
    """Subscriber that always raises."""

    def __init__(self, log: list = None):
        self.log = log

    def notify(self, item, old_availability, new_availability):
        if self.log is not None:
            self.log.append("failing")
        raise RuntimeError("subscriber exploded")


class FailingUpdateRepository(InMemoryCatalogRepository):
    """In-memory repository whose updates can be made to fail."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_updates = False

    def update(self, item):
        if self.fail_updates:
            raise OSError("disk on fire")
        return super().update(item)


def make_item(
    title: str = "Clean Code",
    author: str = "Robert Martin",
    category: Category = Category.NON_FICTION,
    medium: Medium = Medium.PHYSICAL,
    availability: Availability = Availability.AVAILABLE,
) -> CatalogItem:
    return CatalogItem(
        title=title,
        author=author,
        category=category,
        medium=medium,
        availability=availability,
    )


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture(scope="function")
def db(temp_db_path: Path) -> Generator[Database, None, None]:
    """Create a test database instance."""
    reset_db()
    reset_config()

    os.environ["CIRCULATION_DB_PATH"] = str(temp_db_path)

    database = Database(str(temp_db_path))
    database.create_tables()
    yield database

    reset_db()
    database.engine.dispose()
    if "CIRCULATION_DB_PATH" in os.environ:
        del os.environ["CIRCULATION_DB_PATH"]


@pytest.fixture
def sql_repository(db: Database) -> SqlCatalogRepository:
    return SqlCatalogRepository(db)


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture
def recorder(notifier: ChangeNotifier) -> RecordingSubscriber:
    """A recording subscriber already subscribed to ``notifier``."""
    subscriber = RecordingSubscriber()
    notifier.subscribe(subscriber)
    return subscriber


@pytest.fixture
def manager(repository, notifier, clock) -> LendingManager:
    return LendingManager(repository=repository, notifier=notifier, clock=clock)


@pytest.fixture
def available_item(repository) -> CatalogItem:
    return repository.save(make_item())


@pytest.fixture
def loaned_item(repository) -> CatalogItem:
    return repository.save(
        make_item(title="Dune", author="Frank Herbert", category=Category.FICTION,
                  availability=Availability.LOANED)
    )
