"""Fire-and-forget reconciliation of new wins with the remote ledger."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Union

from ..history import WinRecordStore
from ..models.win_record import WinRecord

logger = logging.getLogger(__name__)

LedgerCall = Callable[[WinRecord], Union[bool, Awaitable[bool]]]


class SyncReconciler:
    """Send each new win to the ledger once and record the acknowledgement.

    There is no retry: a failed or rejected call leaves the record with
    ``synced = False`` for good. A durable outbox would be the place to add
    redelivery.
    """

    def __init__(self, store: WinRecordStore, log_win: LedgerCall) -> None:
        self._store = store
        self._log_win = log_win
        self._tasks: set[asyncio.Task[bool]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def _call_ledger(self, record: WinRecord) -> bool:
        if inspect.iscoroutinefunction(self._log_win):
            return bool(await self._log_win(record))
        # Blocking clients (requests) run off the loop thread.
        result = await asyncio.to_thread(self._log_win, record)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    async def reconcile(self, record: WinRecord) -> bool:
        """Report ``record`` to the ledger; flag it synced on acceptance.

        Returns ``True`` only when the ledger accepted the win and the local
        record was flagged. Never raises for ledger failures. The store update
        runs after the await, i.e. back on the event-loop thread that owns the
        store.
        """

        try:
            accepted = await self._call_ledger(record)
        except Exception as e:
            logger.warning(f"Ledger sync for {record.id} failed: {e}")
            return False

        if not accepted:
            logger.info(f"Ledger did not accept {record.id}; leaving it unsynced")
            return False

        synced = self._store.mark_synced(record.id)
        if synced:
            logger.debug(f"Win {record.id} synced with ledger")
        else:
            logger.debug(f"Win {record.id} accepted by ledger but no longer in history")
        return synced

    def dispatch(self, record: WinRecord) -> asyncio.Task[bool]:
        """Schedule :meth:`reconcile` without waiting for it."""

        task = asyncio.get_running_loop().create_task(self.reconcile(record))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every dispatched reconciliation to finish."""

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


__all__ = ["LedgerCall", "SyncReconciler"]
