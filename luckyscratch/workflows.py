from __future__ import annotations

import os
import random
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from .db.engine import get_sessionmaker, make_engine
from .db.kv_storage import KeyValueStorage
from .eligibility import Clock, EligibilityContext, local_now
from .history import WinRecordStore
from .ledger.sync import LedgerCall, SyncReconciler
from .models import Base
from .models.prize import DEFAULT_PRIZES, PrizeDefinition, load_prize_table
from .prize_draw.engine import DrawOrchestrator
from .prize_draw.selector import RandomSource
from .prize_draw.window import DEFAULT_RESET_HOUR

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from .ledger.api import LedgerClient


def configured_prize_table() -> tuple[PrizeDefinition, ...]:
    """Return the prize table named by ``PRIZE_TABLE_PATH`` or the default one."""
    path = os.getenv("PRIZE_TABLE_PATH")
    if path:
        return load_prize_table(path)
    return DEFAULT_PRIZES


def open_store(
    database_url: Optional[str] = None,
    *,
    engine: Optional["Engine"] = None,
    create_schema: bool = True,
) -> WinRecordStore:
    """Build a :class:`WinRecordStore` over the configured database and load it.

    Parameters
    ----------
    database_url : Optional[str]
        SQLAlchemy URL; defaults to ``DB_URL`` / the project SQLite file.
    engine : Optional[Engine]
        Pre-built engine, used instead of ``database_url`` when given.
    create_schema : bool, default: True
        Create missing tables. Deployments managed by Alembic can pass
        ``False``.
    """
    engine = engine or make_engine(database_url)
    if create_schema:
        Base.metadata.create_all(engine)
    store = WinRecordStore(KeyValueStorage(get_sessionmaker(engine)))
    store.load_all()
    return store


def create_game(
    database_url: Optional[str] = None,
    *,
    engine: Optional["Engine"] = None,
    store: Optional[WinRecordStore] = None,
    log_win: Optional[LedgerCall] = None,
    client: Optional["LedgerClient"] = None,
    prizes: Optional[Sequence[PrizeDefinition]] = None,
    rng: RandomSource = random.random,
    clock: Clock = local_now,
    reset_hour: int = DEFAULT_RESET_HOUR,
    recheck_interval: float = 60.0,
    settle_delay: float = 0.5,
    voucher_factory: Optional[Callable[[PrizeDefinition], str]] = None,
) -> DrawOrchestrator:
    """Wire storage, eligibility, ledger sync and the draw state machine.

    The workflow performs the following steps:

    1. Open (or reuse) the win history store and load persisted state.
    2. Build the eligibility context; the caller starts and stops it.
    3. Resolve the ledger call: ``log_win`` when given, otherwise
       ``client.log_win``, otherwise a default :class:`LedgerClient`.
    4. Return a :class:`DrawOrchestrator` in the ``IDLE`` state.

    Raises
    ------
    ValueError
        If no ledger call is supplied and ``LEDGER_BASE_URL`` is not set.
    """
    if store is None:
        store = open_store(database_url, engine=engine)

    context = EligibilityContext(
        store,
        clock=clock,
        reset_hour=reset_hour,
        recheck_interval=recheck_interval,
    )
    context.refresh()

    if log_win is None:
        if client is None:
            from .ledger.api import LedgerClient

            client = LedgerClient()
        log_win = client.log_win

    kwargs = {}
    if voucher_factory is not None:
        kwargs["voucher_factory"] = voucher_factory

    return DrawOrchestrator(
        store,
        context,
        SyncReconciler(store, log_win),
        prizes=prizes if prizes is not None else configured_prize_table(),
        rng=rng,
        settle_delay=settle_delay,
        **kwargs,
    )
