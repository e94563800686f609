"""Process-wide eligibility state with an explicit start/stop lifecycle."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from .history import WinRecordStore
from .prize_draw.window import (
    DEFAULT_RESET_HOUR,
    is_within_current_window,
    next_window_start,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now().astimezone()


class EligibilityContext:
    """Owns the "already played in this window" flag and its refresh timer.

    The flag is never persisted; it is recomputed from the store's
    ``last_played_at`` on :meth:`refresh`, which the periodic task calls every
    ``recheck_interval`` seconds so that crossing the daily boundary is
    noticed without user action.
    """

    def __init__(
        self,
        store: WinRecordStore,
        *,
        clock: Clock = local_now,
        reset_hour: int = DEFAULT_RESET_HOUR,
        recheck_interval: float = 60.0,
    ) -> None:
        if recheck_interval <= 0:
            raise ValueError("recheck_interval must be positive")
        self._store = store
        self._clock = clock
        self._reset_hour = reset_hour
        self._recheck_interval = recheck_interval
        self._has_played = False
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def has_played(self) -> bool:
        return self._has_played

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def now(self) -> datetime:
        return self._clock()

    def refresh(self) -> bool:
        """Recompute the flag from the persisted scalar and return it."""

        self._has_played = is_within_current_window(
            self._store.last_played_at, self._clock(), self._reset_hour
        )
        return self._has_played

    def mark_played(self) -> None:
        self._has_played = True

    def next_reset_at(self) -> datetime:
        return next_window_start(self._clock(), self._reset_hour)

    # -------- lifecycle --------
    def start(self) -> None:
        """Refresh once and schedule the recurring re-check on the running loop."""

        if self.is_running:
            return
        self.refresh()
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug(
            f"Eligibility re-check started (every {self._recheck_interval}s)"
        )

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.debug("Eligibility re-check stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._recheck_interval)
            previous = self._has_played
            if self.refresh() != previous:
                logger.info(
                    "Eligibility changed: "
                    + ("window consumed" if self._has_played else "new window open")
                )


__all__ = ["Clock", "EligibilityContext", "local_now"]
