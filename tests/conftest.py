"""Pytest configuration for all tests."""

from collections.abc import Generator

import pytest

from coinnavigator.core.config import Settings
from coinnavigator.domain.services import CollectionService, MoveService, SearchService
from coinnavigator.infrastructure.persistence.database import DatabaseManager, init_database


@pytest.fixture
def settings() -> Settings:
    """Settings for an in-memory database."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        environment="testing",
    )


@pytest.fixture
def db(settings: Settings) -> Generator[DatabaseManager, None, None]:
    """Create an initialized in-memory database.

    StaticPool keeps the single connection alive for the whole test.
    """
    manager = init_database(DatabaseManager(settings))
    yield manager
    manager.disconnect()


@pytest.fixture
def store(db: DatabaseManager) -> CollectionService:
    """Collection service with the default lists already created."""
    service = CollectionService(db)
    service.initialize()
    return service


@pytest.fixture
def search_service(store: CollectionService) -> SearchService:
    return SearchService(store)


@pytest.fixture
def move_service(store: CollectionService) -> MoveService:
    return MoveService(store)


@pytest.fixture
def morgan_fields() -> dict[str, str]:
    """Raw form input for a 1921 Morgan Dollar."""
    return {
        "name": "Morgan Dollar",
        "date": "1921",
        "grade": "AU",
        "diameter": "38.1",
        "thickness": "2.4",
        "edge": "Reeded",
        "weight": "26.73",
        "composition": "90% silver, 10% copper",
        "denomination": "$1",
    }
