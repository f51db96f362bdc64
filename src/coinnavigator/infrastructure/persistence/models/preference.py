"""SQLAlchemy model for the preferences table.

Preferences are small key/value entries owned by the presentation layer,
such as the last opened collection.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from coinnavigator.infrastructure.persistence.database import Base


class PreferenceModel(Base):
    """SQLAlchemy model for the preferences table.

    Attributes:
        key: Preference key.
        value: Preference value as text.
        updated_at: Timestamp when the preference was last written.
    """

    __tablename__ = "preferences"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Preference(key={self.key})>"
