from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .kv import KeyValueEntry  # noqa: F401
from .prize import (  # noqa: F401
    DEFAULT_GREETING,
    DEFAULT_PRIZES,
    PRIZE_GREETINGS,
    PrizeDefinition,
    greeting_for,
    load_prize_table,
)
from .win_record import WinRecord  # noqa: F401

__all__ = [
    "Base",
    "KeyValueEntry",
    "PrizeDefinition",
    "DEFAULT_PRIZES",
    "PRIZE_GREETINGS",
    "DEFAULT_GREETING",
    "greeting_for",
    "load_prize_table",
    "WinRecord",
]
