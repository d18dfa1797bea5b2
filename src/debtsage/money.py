"""Helpers for converting, rounding and displaying monetary amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from .exceptions import InvalidInputError

CENT = Decimal("0.01")
WHOLE = Decimal("1")
ZERO = Decimal("0")

# Amounts and rates beyond these are treated as typing mistakes.
MAX_AMOUNT = Decimal("1000000000000")
MAX_APR = Decimal("1000")

AmountLike = Union[Decimal, int, float, str]


def parse_decimal(
    value: AmountLike, *, field: str | None = None, limit: Decimal = MAX_AMOUNT
) -> Decimal:
    """Convert ``value`` to a finite :class:`~decimal.Decimal` without rounding it.

    Raises :class:`InvalidInputError` for non-numbers and magnitudes above ``limit``.
    """

    if isinstance(value, bool):
        raise InvalidInputError(f"Expected an amount, got {value!r}.", field=field)
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, (int, float)):
            result = Decimal(str(value))
        elif isinstance(value, str):
            result = Decimal(value.strip().replace(",", "").lstrip("$"))
        else:
            raise InvalidInputError(f"Unsupported amount type: {type(value)!r}", field=field)
    except InvalidOperation as exc:
        raise InvalidInputError(f"Enter a valid number (got {value!r}).", field=field) from exc

    if not result.is_finite():
        raise InvalidInputError(f"Enter a valid number (got {value!r}).", field=field)
    if abs(result) > limit:
        raise InvalidInputError(f"Enter a number no larger than {limit:,}.", field=field)
    return result


def to_decimal(value: AmountLike, *, field: str | None = None) -> Decimal:
    """Convert ``value`` to a :class:`~decimal.Decimal` with two decimal places."""

    try:
        return parse_decimal(value, field=field).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidInputError(f"Enter a valid number (got {value!r}).", field=field) from exc


def to_cents(amount: Decimal) -> Decimal:
    """Round ``amount`` half-up to whole cents."""

    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def round_whole(amount: Decimal) -> Decimal:
    """Round ``amount`` half-up to whole currency units."""

    return amount.quantize(WHOLE, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal | float | None, *, cents: bool = False) -> str:
    """Return ``amount`` formatted for display (``$1,235`` or ``$1,234.56``)."""

    value = Decimal(str(amount or 0))
    if cents:
        return f"${to_cents(value):,.2f}"
    return f"${round_whole(value):,.0f}"


def format_percentage(value: Decimal | float | None) -> str:
    return f"{Decimal(str(value or 0)):.2f}%"


def format_years(months: int) -> str:
    """Express a month count in years with one decimal place."""

    years = (Decimal(months) / Decimal(12)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{years:.1f}"
