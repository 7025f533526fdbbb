"""Decimal helpers shared by the price process, order book and ledger."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

Number = Union[int, float, str, Decimal]

CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal without binary float artefacts.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Not a number: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def quantize(value: Number, places: int) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    return to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def money(value: Number) -> Decimal:
    """Round to cents."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
