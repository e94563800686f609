"""Prize definitions and the greetings shown when a prize is revealed."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

Number = Union[int, float]


@dataclass(frozen=True)
class PrizeDefinition:
    """One entry of the weighted prize table.

    Attributes
    ----------
    id : str
        Stable identifier referenced by :attr:`WinRecord.prize_id`.
    label : str
        Display name of the prize.
    value : int | float
        Face value of the prize; also embedded in the voucher code.
    probability : float
        Share of the draw weight in ``[0, 1]``. The table as a whole does not
        need to sum to 1; the residual mass falls to the last entry.
    """

    id: str
    label: str
    value: Number
    probability: float

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("prize id must not be empty")
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError("prize value must be numeric")
        if not 0.0 <= self.probability <= 1.0:
            raise ValueError(
                f"probability for prize '{self.id}' must be within [0, 1], "
                f"got {self.probability}"
            )


# Order is part of the draw contract: the last entry absorbs residual mass.
DEFAULT_PRIZES: tuple[PrizeDefinition, ...] = (
    PrizeDefinition(id="grand", label="888 Lucky Credit", value=888, probability=0.01),
    PrizeDefinition(id="major", label="168 Lucky Credit", value=168, probability=0.04),
    PrizeDefinition(id="minor", label="88 Lucky Credit", value=88, probability=0.15),
    PrizeDefinition(id="bonus", label="66 Lucky Credit", value=66, probability=0.30),
    PrizeDefinition(id="basic", label="8 Lucky Credit", value=8, probability=0.50),
)

PRIZE_GREETINGS: dict[Number, str] = {
    888: "The horse gallops to fortune! A grand prize for a grand year!",
    168: "All the way to prosperity! Good fortune follows every step.",
    88: "Double luck is yours! May the year run smoothly.",
    66: "Everything goes your way! Smooth sailing all year long.",
    8: "A lucky start! Wishing you a prosperous year.",
}

DEFAULT_GREETING = "Success at the gallop! Wishing you endless good luck!"


def greeting_for(prize: PrizeDefinition) -> str:
    """Return the greeting configured for ``prize``'s value."""

    return PRIZE_GREETINGS.get(prize.value, DEFAULT_GREETING)


def load_prize_table(
    source: Union[str, Path, Iterable[Mapping[str, Any]]],
) -> tuple[PrizeDefinition, ...]:
    """Build a prize table from a JSON file path or an iterable of mappings.

    Each mapping needs ``id``, ``label``, ``value`` and ``probability`` keys.
    The input order is preserved.

    Raises
    ------
    ValueError
        If the table is empty or an entry is missing a field.
    """

    entries: Iterable[Mapping[str, Any]]
    if isinstance(source, (str, Path)):
        with open(source, "r", encoding="utf-8") as f:
            entries = json.load(f)
    else:
        entries = source

    table: list[PrizeDefinition] = []
    for entry in entries:
        missing = [k for k in ("id", "label", "value", "probability") if k not in entry]
        if missing:
            raise ValueError(f"prize entry is missing fields: {', '.join(missing)}")
        table.append(
            PrizeDefinition(
                id=str(entry["id"]),
                label=str(entry["label"]),
                value=entry["value"],
                probability=float(entry["probability"]),
            )
        )
    if not table:
        raise ValueError("prize table must contain at least one prize")
    return tuple(table)


__all__ = [
    "PrizeDefinition",
    "DEFAULT_PRIZES",
    "PRIZE_GREETINGS",
    "DEFAULT_GREETING",
    "greeting_for",
    "load_prize_table",
]
