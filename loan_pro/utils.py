"""Utility functions for the loan calculator.

This module provides the fixed-point helpers used by the engine (banker's
rounding to a number of currency decimals and integer powers of a
``Decimal``) together with the parsers that turn user input into ``Decimal``
values without passing through binary floating point.
"""

from __future__ import annotations

from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_EVEN

# All currency math runs in this context, whatever the caller's context is.
CURRENCY_CONTEXT = Context(prec=28, rounding=ROUND_HALF_EVEN)

ONE = Decimal("1")


def round_currency(value: Decimal, decimals: int) -> Decimal:
    """Round ``value`` to ``decimals`` places using ROUND_HALF_EVEN (banker's rounding)."""
    return value.quantize(ONE.scaleb(-decimals), rounding=ROUND_HALF_EVEN)


def decimal_pow(base: Decimal, exponent: int) -> Decimal:
    """Return ``base ** exponent`` for an integer exponent.

    Uses exponentiation by squaring on the absolute exponent and takes the
    reciprocal for negative exponents, so the whole computation stays in
    ``Decimal`` arithmetic.
    """
    if exponent == 0:
        return ONE

    n = abs(exponent)
    result = ONE
    factor = base
    while n > 0:
        if n & 1:
            result *= factor
        factor *= factor
        n >>= 1

    return ONE / result if exponent < 0 else result


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and surrounding whitespace. It raises
    ``ValueError`` if conversion fails or the value is not finite.
    """
    try:
        cleaned = value.replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse a currency amount with optional ``k``/``m`` suffixes.

    Accepts plain numbers ("500000", "123,456.78") and shorthand such as
    "500k" (500 000) or "1.2m" (1 200 000).
    """
    cleaned = value.strip().lower()
    factor = ONE
    if cleaned.endswith("k"):
        factor = Decimal("1000")
        cleaned = cleaned[:-1]
    elif cleaned.endswith("m"):
        factor = Decimal("1000000")
        cleaned = cleaned[:-1]
    return CURRENCY_CONTEXT.multiply(decimal_from_str(cleaned), factor)


def parse_rate(value: str) -> Decimal:
    """Parse an annual rate given as a fraction ("0.45") or percentage ("45%")."""
    cleaned = value.strip()
    if cleaned.endswith("%"):
        return CURRENCY_CONTEXT.divide(decimal_from_str(cleaned[:-1]), Decimal(100))
    return decimal_from_str(cleaned)


def fits_precision(value: Decimal, decimals: int) -> bool:
    """Return whether ``value`` rounded to ``decimals`` places fits the currency context."""
    if not value.is_finite():
        return False
    if value.is_zero():
        return True
    return value.adjusted() + 1 + decimals <= CURRENCY_CONTEXT.prec
