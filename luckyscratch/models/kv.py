"""Key-value rows backing the durable game state."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Text, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base


class KeyValueEntry(Base):
    """A single string value stored under a stable, versioned key."""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    """Storage key, e.g. ``lucky_scratch_history_v2``."""

    value: Mapped[str] = mapped_column(Text, nullable=False)
    """Raw string payload; callers own the encoding."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    """Timestamp automatically bumped when the value is rewritten."""

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<KeyValueEntry(key='{self.key}', length={len(self.value or '')})>"

    @classmethod
    def get_by_key(cls, session: Session, key: str) -> Optional["KeyValueEntry"]:
        """Fetch the entry stored under ``key`` if it exists."""

        return session.scalar(select(cls).where(cls.key == key))
