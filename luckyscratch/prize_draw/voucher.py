"""Human-readable voucher codes for won prizes."""

from __future__ import annotations

import secrets
import string
from typing import Callable, Sequence, Union

VOUCHER_PREFIX = "ET"
SUFFIX_LENGTH = 5
SUFFIX_ALPHABET = string.digits + string.ascii_uppercase


def _format_value(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def generate_voucher_code(
    value: Union[int, float],
    *,
    prefix: str = VOUCHER_PREFIX,
    choice: Callable[[Sequence[str]], str] = secrets.choice,
) -> str:
    """Return a voucher code of the form ``<prefix>-<value>-<SUFFIX>``.

    The suffix is :data:`SUFFIX_LENGTH` characters drawn from digits and
    uppercase letters. Uniqueness is probabilistic only; callers do not
    check for collisions.
    """

    suffix = "".join(choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{prefix}-{_format_value(value)}-{suffix}"


__all__ = ["VOUCHER_PREFIX", "SUFFIX_LENGTH", "generate_voucher_code"]
