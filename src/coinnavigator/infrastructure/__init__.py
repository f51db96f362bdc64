"""Infrastructure layer - External dependencies and implementations.

This layer contains the SQLite persistence adapters (SQLAlchemy): engine and
connection management, the collection table builder and the repositories.
"""

from coinnavigator.infrastructure.persistence.database import (
    Base,
    DatabaseManager,
    close_database,
    get_db_manager,
    init_database,
)

__all__ = [
    "Base",
    "DatabaseManager",
    "get_db_manager",
    "init_database",
    "close_database",
]
