"""Collection entity for named coin lists.

A collection is a named group of coins stored in its own physical table. The
registry row links the user-chosen name to that table.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Collection:
    """Collection entity representing one named coin list.

    Attributes:
        id: Unique identifier (UUID string).
        name: User-chosen collection name (case-sensitive).
        table_name: Physical table holding the collection's coins.
        created_at: Timestamp when the collection was created.
    """

    id: str
    name: str
    table_name: str
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Validate collection data after initialization."""
        if not self.id:
            raise ValueError("Collection ID is required")
        if not self.name:
            raise ValueError("Collection name is required")
        if not self.table_name:
            raise ValueError("Collection table name is required")
