"""Repository for key/value preferences."""

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.engine import Connection
from sqlalchemy.sql import func

from coinnavigator.infrastructure.persistence.models import PreferenceModel


class PreferenceRepository:
    """Repository for preference database operations."""

    def __init__(self, connection: Connection) -> None:
        """Initialize the repository with a database connection.

        Args:
            connection: Active SQLAlchemy connection.
        """
        self.connection = connection

    def get(self, key: str) -> str | None:
        """Get a preference value, or None if unset."""
        result = self.connection.execute(
            select(PreferenceModel.value).where(PreferenceModel.key == key)
        )
        return result.scalar_one_or_none()

    def set(self, key: str, value: str | None) -> None:
        """Create or replace a preference value."""
        stmt = insert(PreferenceModel).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[PreferenceModel.key],
            set_={"value": stmt.excluded.value, "updated_at": func.now()},
        )
        self.connection.execute(stmt)
