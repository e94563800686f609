"""Daily eligibility window anchored to a fixed local wall-clock hour."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

DEFAULT_RESET_HOUR = 10
WINDOW_LENGTH = timedelta(hours=24)


def _localize(dt: datetime) -> datetime:
    # Naive values are local wall-clock time.
    return dt.astimezone() if dt.tzinfo is None else dt


def current_window_start(now: datetime, reset_hour: int = DEFAULT_RESET_HOUR) -> datetime:
    """Return the start of the eligibility window containing ``now``.

    The boundary is computed in ``now``'s own timezone. ``now`` equal to the
    boundary already belongs to the new window.
    """

    if not 0 <= reset_hour <= 23:
        raise ValueError("reset_hour must be within [0, 23]")
    now = _localize(now)
    boundary_today = now.replace(hour=reset_hour, minute=0, second=0, microsecond=0)
    if now >= boundary_today:
        return boundary_today
    return boundary_today - WINDOW_LENGTH


def next_window_start(now: datetime, reset_hour: int = DEFAULT_RESET_HOUR) -> datetime:
    """Return the instant at which the next eligibility window opens."""

    return current_window_start(now, reset_hour) + WINDOW_LENGTH


def is_within_current_window(
    last_played_at: Optional[datetime],
    now: datetime,
    reset_hour: int = DEFAULT_RESET_HOUR,
) -> bool:
    """Whether a play at ``last_played_at`` consumed the window containing ``now``.

    Parameters
    ----------
    last_played_at : Optional[datetime]
        Instant of the last reveal, or ``None`` if the user never played
        (or the history was reset).
    now : datetime
        Current instant.
    reset_hour : int, default: 10
        Local hour at which a new window opens.

    Returns
    -------
    bool
        ``True`` when the user already played in the current window.
    """

    if last_played_at is None:
        return False
    return _localize(last_played_at) >= current_window_start(now, reset_hour)


__all__ = [
    "DEFAULT_RESET_HOUR",
    "current_window_start",
    "next_window_start",
    "is_within_current_window",
]
