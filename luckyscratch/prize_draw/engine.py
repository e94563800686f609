"""State machine sequencing eligibility, selection, reveal and sync."""

from __future__ import annotations

import asyncio
import enum
import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ..db.utils import to_epoch_ms
from ..history import WinRecordStore
from ..ledger.sync import SyncReconciler
from ..models.prize import DEFAULT_PRIZES, PrizeDefinition, greeting_for
from ..models.win_record import WinRecord
from .selector import RandomSource, select_prize
from .voucher import generate_voucher_code

if TYPE_CHECKING:
    from ..eligibility import EligibilityContext

logger = logging.getLogger(__name__)


class DrawState(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    REVEALING = "revealing"


@dataclass(frozen=True)
class PendingDraw:
    """Value object holding a selected but not yet revealed prize.

    Attributes
    ----------
    prize : PrizeDefinition
        Prize picked by the selector.
    message : str
        Greeting shown alongside the prize once revealed.
    """

    prize: PrizeDefinition
    message: str


class DrawOrchestrator:
    """Runs the one-play-per-window draw cycle.

    ``IDLE --start_draw--> PENDING --confirm_reveal--> REVEALING --settle--> IDLE``.
    Calls that do not match the current state are ignored, so duplicate
    triggers from the presentation layer can never draw or credit twice.
    """

    def __init__(
        self,
        store: WinRecordStore,
        context: EligibilityContext,
        reconciler: SyncReconciler,
        *,
        prizes: Sequence[PrizeDefinition] = DEFAULT_PRIZES,
        rng: RandomSource = random.random,
        voucher_factory: Callable[[PrizeDefinition], str] = (
            lambda prize: generate_voucher_code(prize.value)
        ),
        settle_delay: float = 0.5,
    ) -> None:
        """Create an orchestrator over already-loaded collaborators.

        Parameters
        ----------
        store : WinRecordStore
            History store; expected to have run :meth:`WinRecordStore.load_all`.
        context : EligibilityContext
            Owner of the eligibility flag. Its lifecycle stays with the caller.
        reconciler : SyncReconciler
            Receives every new record without being awaited.
        prizes : Sequence[PrizeDefinition], default: DEFAULT_PRIZES
            Ordered prize table.
        rng : Callable[[], float], default: random.random
            Sample source for the selector.
        voucher_factory : Callable[[PrizeDefinition], str]
            Produces the record id for a revealed prize.
        settle_delay : float, default: 0.5
            Seconds spent in ``REVEALING`` before returning to ``IDLE``.
        """

        if not prizes:
            raise ValueError("prize table must contain at least one prize")
        self._store = store
        self._context = context
        self._reconciler = reconciler
        self._prizes = tuple(prizes)
        self._rng = rng
        self._voucher_factory = voucher_factory
        self._settle_delay = settle_delay

        self._state = DrawState.IDLE
        self._pending: Optional[PendingDraw] = None
        self._settle_handle: Optional[asyncio.TimerHandle] = None
        self.current_win: Optional[WinRecord] = None

    # -------- state --------
    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def pending(self) -> Optional[PendingDraw]:
        return self._pending

    @property
    def context(self) -> EligibilityContext:
        return self._context

    @property
    def reconciler(self) -> SyncReconciler:
        return self._reconciler

    @property
    def history(self) -> tuple[WinRecord, ...]:
        return self._store.records

    def can_draw(self) -> bool:
        return self._state is DrawState.IDLE and not self._context.refresh()

    # -------- actions --------
    def start_draw(self) -> Optional[PendingDraw]:
        """Select a prize and hold it until the user reveals it.

        Returns ``None`` (and changes nothing) when the window is already
        consumed or a draw is pending/revealing.
        """

        if not self.can_draw():
            logger.debug(f"Draw request ignored (state={self._state.value})")
            return None

        prize = select_prize(self._prizes, self._rng)
        self._pending = PendingDraw(prize=prize, message=greeting_for(prize))
        self._state = DrawState.PENDING
        logger.info(f"Prize '{prize.id}' drawn and pending reveal")
        return self._pending

    def confirm_reveal(self) -> Optional[WinRecord]:
        """Turn the pending draw into a persisted :class:`WinRecord`.

        Local state (history, ``lastPlayedAt``, eligibility) is updated before
        the ledger sync is dispatched; the sync is not awaited. Must be
        called from a running event loop.

        Returns
        -------
        Optional[WinRecord]
            The new record, or ``None`` for an out-of-state call.

        Raises
        ------
        Exception
            Whatever the store raises when the win cannot be persisted. The
            orchestrator stays in ``PENDING`` with the same draw.
        """

        if self._pending is None or self._state is not DrawState.PENDING:
            logger.debug(f"Reveal request ignored (state={self._state.value})")
            return None

        loop = asyncio.get_running_loop()
        self._state = DrawState.REVEALING
        pending = self._pending
        now = self._context.now()
        record = WinRecord(
            id=self._voucher_factory(pending.prize),
            prize_id=pending.prize.id,
            label=pending.prize.label,
            value=pending.prize.value,
            timestamp=to_epoch_ms(now),
            message=pending.message,
            synced=False,
        )

        try:
            self._store.record_win(record, now)
        except Exception:
            # Nothing was persisted; keep the draw pending so it can be retried.
            self._state = DrawState.PENDING
            raise
        self._context.mark_played()
        self.current_win = record
        logger.info(f"Win {record.id} recorded for prize '{record.prize_id}'")

        self._reconciler.dispatch(record)
        self._settle_handle = loop.call_later(self._settle_delay, self._settle)
        return record

    def _settle(self) -> None:
        self._settle_handle = None
        self._pending = None
        self._state = DrawState.IDLE
        self._context.refresh()

    def reset_all(self, confirm: Callable[[], bool]) -> bool:
        """Wipe history and eligibility after ``confirm()`` approves.

        Returns ``True`` when the reset was carried out.
        """

        if not confirm():
            logger.debug("Reset cancelled by user")
            return False
        self._store.clear()
        self._context.refresh()
        return True

    def view_history_item(self, record_id: str) -> Optional[WinRecord]:
        return self._store.get(record_id)

    def close(self) -> None:
        """Cancel a scheduled settle step; pending ledger syncs keep running."""

        if self._settle_handle is not None:
            self._settle_handle.cancel()
            self._settle_handle = None


__all__ = ["DrawState", "PendingDraw", "DrawOrchestrator"]
