"""Daily prize draw: eligibility window, weighted selection and reveal cycle."""

from .engine import DrawOrchestrator, DrawState, PendingDraw
from .selector import select_prize
from .voucher import generate_voucher_code
from .window import (
    current_window_start,
    is_within_current_window,
    next_window_start,
)

__all__ = [
    "DrawOrchestrator",
    "DrawState",
    "PendingDraw",
    "select_prize",
    "generate_voucher_code",
    "current_window_start",
    "is_within_current_window",
    "next_window_start",
]
