"""
Domain: currency amounts.

All currency values are `Decimal`. Sums are exact; rounding to cents happens
only when a ratio (an average) is produced.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from .errors import InvalidRecordError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any, *, name: str = "amount") -> Decimal:
    """
    Convert a user or storage value to a finite Decimal.

    Floats are converted through their string form so 19.99 stays 19.99.
    Booleans are rejected even though they are ints.
    """

    if isinstance(value, bool) or value is None:
        raise InvalidRecordError(f"{name} must be numeric, got {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise InvalidRecordError(f"{name} must be numeric, got {value!r}") from exc
    else:
        raise InvalidRecordError(f"{name} must be numeric, got {type(value).__name__}")

    if not result.is_finite():
        raise InvalidRecordError(f"{name} must be a finite number, got {value!r}")
    return result


def require_non_negative(name: str, value: Decimal) -> None:
    if value < 0:
        raise InvalidRecordError(f"{name} must be >= 0")


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half up."""

    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def safe_average(total: Decimal, count: int) -> Decimal:
    """total / count rounded to cents, or 0.00 when count is 0."""

    if count <= 0:
        return ZERO
    return quantize_money(total / Decimal(count))
