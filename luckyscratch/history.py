"""Win history and the last-played scalar, mirrored to durable storage."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Optional

from .db.kv_storage import KeyValueStorage
from .db.utils import from_epoch_ms, to_epoch_ms
from .models.win_record import WinRecord

logger = logging.getLogger(__name__)

# Key names carry a version so that a future format change does not parse
# old payloads as the new shape.
HISTORY_KEY = "lucky_scratch_history_v2"
LAST_PLAYED_KEY = "lucky_scratch_last_played_timestamp"


class WinRecordStore:
    """Most-recent-first win history owned by a single event-loop thread.

    The in-memory list is authoritative while the process runs; each mutation
    is written through to :class:`KeyValueStorage` before the method returns.
    Voucher ids are not deduplicated.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._records: list[WinRecord] = []
        self._last_played_ms: Optional[int] = None

    # -------- reads --------
    @property
    def records(self) -> tuple[WinRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, record_id: str) -> Optional[WinRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    @property
    def last_played_at(self) -> Optional[datetime]:
        if self._last_played_ms is None:
            return None
        return from_epoch_ms(self._last_played_ms)

    # -------- loading --------
    def load_all(self) -> list[WinRecord]:
        """Reload history and ``lastPlayedAt`` from storage.

        Unparsable payloads are treated as absent: history becomes empty and
        the scalar becomes ``None``. Nothing is raised to the caller.
        """

        self._records = self._decode_history(self._storage.get(HISTORY_KEY))
        self._last_played_ms = self._decode_last_played(
            self._storage.get(LAST_PLAYED_KEY)
        )
        logger.debug(f"Loaded {len(self._records)} win records from storage")
        return list(self._records)

    @staticmethod
    def _decode_history(raw: Optional[str]) -> list[WinRecord]:
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise TypeError("stored history is not a JSON array")
            return [WinRecord.from_dict(item) for item in payload]
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Discarding unreadable win history: {e}")
            return []

    @staticmethod
    def _decode_last_played(raw: Optional[str]) -> Optional[int]:
        if raw is None:
            return None
        try:
            played_ms = int(raw.strip())
            # Out-of-range values parse as ints but cannot become datetimes.
            from_epoch_ms(played_ms)
        except (ValueError, OverflowError, OSError):
            logger.warning("Discarding unreadable last-played timestamp")
            return None
        return played_ms

    # -------- mutations --------
    def append(self, record: WinRecord) -> None:
        """Insert ``record`` at the front of the history and persist it."""

        self._records.insert(0, record)
        self._persist_history()

    def record_win(self, record: WinRecord, played_at: datetime) -> None:
        """Append ``record`` and move ``lastPlayedAt`` in one storage write."""

        played_ms = to_epoch_ms(played_at)
        self._storage.set_many(
            {
                HISTORY_KEY: self._encode([record, *self._records]),
                LAST_PLAYED_KEY: str(played_ms),
            }
        )
        self._records.insert(0, record)
        self._last_played_ms = played_ms

    def record_play(self, played_at: datetime) -> None:
        played_ms = to_epoch_ms(played_at)
        self._storage.set(LAST_PLAYED_KEY, str(played_ms))
        self._last_played_ms = played_ms

    def mark_synced(self, record_id: str) -> bool:
        """Flag the record with ``record_id`` as acknowledged by the ledger.

        Returns ``False`` without raising when no such record exists, which
        happens when a reset lands while a sync is still in flight.
        """

        for index, record in enumerate(self._records):
            if record.id == record_id:
                if not record.synced:
                    self._records[index] = record.as_synced()
                    self._persist_history()
                return True
        logger.debug(f"Sync acknowledgement for unknown record {record_id} ignored")
        return False

    def clear(self) -> None:
        """Drop all history and the ``lastPlayedAt`` scalar together."""

        self._storage.set_many(
            {HISTORY_KEY: self._encode([]), LAST_PLAYED_KEY: None}
        )
        self._records = []
        self._last_played_ms = None
        logger.info("Win history and eligibility were reset")

    # -------- persistence --------
    @staticmethod
    def _encode(records: list[WinRecord]) -> str:
        return json.dumps([r.to_dict() for r in records], ensure_ascii=False)

    def _persist_history(self) -> None:
        self._storage.set(HISTORY_KEY, self._encode(self._records))


__all__ = ["HISTORY_KEY", "LAST_PLAYED_KEY", "WinRecordStore"]
