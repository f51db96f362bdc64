"""SQLAlchemy model for the collections table.

The collections table is the registry of known collection names. The coins
themselves live in one dynamically created table per collection.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from coinnavigator.infrastructure.persistence.database import Base


class CollectionModel(Base):
    """SQLAlchemy model for the collections table.

    Attributes:
        id: Primary key (UUID string).
        name: User-chosen collection name (case-sensitive, unique).
        table_name: Physical table holding the collection's coins.
        created_at: Timestamp when the collection was created.
    """

    __tablename__ = "collections"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Collection ID (UUID)",
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Collection name",
    )
    table_name: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        comment="Physical table name (col_<id hex>)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, name={self.name})>"
