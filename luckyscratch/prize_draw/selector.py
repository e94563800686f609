"""Weighted random selection over an ordered prize table."""

from __future__ import annotations

import random
from typing import Callable, Sequence

from ..models.prize import PrizeDefinition

RandomSource = Callable[[], float]


def select_prize(
    table: Sequence[PrizeDefinition],
    rng: RandomSource = random.random,
) -> PrizeDefinition:
    """Draw one prize from ``table`` using cumulative probabilities.

    A single sample ``r`` in ``[0, 1)`` is taken from ``rng``. The table is
    walked in order and the first entry whose cumulative probability reaches
    ``r`` wins. When the table's probabilities sum to less than ``r`` (or
    rounding leaves a gap at the tail) the last entry is returned.

    Parameters
    ----------
    table : Sequence[PrizeDefinition]
        Ordered prize table. Reordering it changes the effective odds.
    rng : Callable[[], float], default: random.random
        Uniform sample source; inject a deterministic one in tests.

    Raises
    ------
    ValueError
        If ``table`` is empty.
    """

    if not table:
        raise ValueError("prize table must contain at least one prize")

    r = rng()
    cumulative = 0.0
    for prize in table:
        cumulative += prize.probability
        if r <= cumulative:
            return prize
    return table[-1]


__all__ = ["RandomSource", "select_prize"]
