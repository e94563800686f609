"""Snapshot of a revealed prize, stored in the local win history."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Union

Number = Union[int, float]


@dataclass(frozen=True)
class WinRecord:
    """Immutable win history entry.

    Attributes
    ----------
    id : str
        Voucher code; doubles as the redemption proof.
    prize_id : str
        Identifier of the :class:`PrizeDefinition` that was won.
    label : str
        Prize label captured at reveal time.
    value : int | float
        Prize value captured at reveal time.
    timestamp : int
        Reveal instant in epoch milliseconds.
    message : str
        Greeting shown to the user.
    synced : bool
        ``True`` once the remote ledger acknowledged the win.
    """

    id: str
    prize_id: str
    label: str
    value: Number
    timestamp: int
    message: str
    synced: bool = False

    def as_synced(self) -> "WinRecord":
        """Return a copy flagged as acknowledged by the ledger."""

        if self.synced:
            return self
        return replace(self, synced=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape kept in durable storage."""

        return {
            "id": self.id,
            "prizeId": self.prize_id,
            "label": self.label,
            "value": self.value,
            "timestamp": self.timestamp,
            "message": self.message,
            "synced": self.synced,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WinRecord":
        """Rebuild a record from its stored JSON shape.

        Histories written before the ``message`` field was renamed carry the
        greeting under ``aiMessage``; both spellings are accepted.

        Raises
        ------
        KeyError
            If a required field is missing.
        TypeError
            If ``data`` is not a mapping or a field has the wrong type.
        """

        if not isinstance(data, Mapping):
            raise TypeError("win record must be a JSON object")
        message = data["message"] if "message" in data else data.get("aiMessage", "")
        value = data["value"]
        timestamp = data["timestamp"]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError("win record value must be numeric")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise TypeError("win record timestamp must be an integer")
        synced = data.get("synced", False)
        if not isinstance(synced, bool):
            raise TypeError("win record synced flag must be a boolean")
        return cls(
            id=str(data["id"]),
            prize_id=str(data["prizeId"]),
            label=str(data["label"]),
            value=value,
            timestamp=timestamp,
            message=str(message),
            synced=synced,
        )


__all__ = ["WinRecord"]
