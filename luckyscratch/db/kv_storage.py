"""String-valued key-value storage on top of a SQLAlchemy session factory."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from ..models.kv import KeyValueEntry


class KeyValueStorage:
    """Durable ``get``/``set``/``remove`` over the ``kv_entries`` table.

    Every call runs in its own short transaction so that a write is durable
    as soon as the method returns.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self._session_factory() as session:
            entry = KeyValueEntry.get_by_key(session, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with self._session_factory.begin() as session:
            entry = KeyValueEntry.get_by_key(session, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value

    def remove(self, key: str) -> None:
        with self._session_factory.begin() as session:
            entry = KeyValueEntry.get_by_key(session, key)
            if entry is not None:
                session.delete(entry)

    def set_many(self, values: dict[str, Optional[str]]) -> None:
        """Write several keys in one transaction; ``None`` removes a key."""

        with self._session_factory.begin() as session:
            for key, value in values.items():
                entry = KeyValueEntry.get_by_key(session, key)
                if value is None:
                    if entry is not None:
                        session.delete(entry)
                elif entry is None:
                    session.add(KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value


__all__ = ["KeyValueStorage"]
