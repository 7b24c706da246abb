"""
Decimal Arithmetic Adapter

Wraps the standard library Decimal so the engine gets the arithmetic it
needs and nothing more:
- Addition, subtraction and multiplication are exact (no context rounding)
- Division is the ONLY rounding step: the quotient is rounded half away
  from zero to a fixed number of fractional digits (default 16)
- Inputs arrive as Decimal, int, float or str and are coerced in one place
- Output strings never use scientific notation

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import decimal
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

from saleline.core.config import get_settings
from saleline.core.errors import InvalidDecimalError

NumberLike = Union[str, int, float, Decimal]

# Maximum precision context: +, -, * never round inside it.
# Division must never run here (non-terminating quotients exhaust memory).
EXACT_CONTEXT = decimal.Context(
    prec=decimal.MAX_PREC,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
    rounding=ROUND_HALF_UP,
    traps=[InvalidOperation, decimal.Overflow],
)

ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)


def exact_arithmetic():
    """
    Context manager under which +, -, * on Decimals are exact.

    Usage:
        with exact_arithmetic():
            total = unit_value * qty + amount
    """
    return decimal.localcontext(EXACT_CONTEXT)


def to_decimal(value: NumberLike) -> Decimal:
    """
    Coerce a numeric argument to Decimal.

    Floats go through their shortest repr so 0.1 becomes Decimal('0.1')
    rather than the binary expansion.

    Raises:
        InvalidDecimalError: unparsable strings, NaN/Infinity, unsupported types
    """
    if isinstance(value, bool):
        raise InvalidDecimalError(value, "booleans are not numbers")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidDecimalError(value) from None
    else:
        raise InvalidDecimalError(value, f"unsupported type {type(value).__name__}")

    if not result.is_finite():
        raise InvalidDecimalError(value, "value is not finite")

    return result


def div(dividend: Decimal, divisor: Decimal, precision: Optional[int] = None) -> Decimal:
    """
    Divide rounding the quotient to `precision` fractional digits.

    The exact rational quotient is computed with integers, truncated to
    `precision` digits and bumped one unit away from zero when the
    remainder is at least half the divisor. The result always carries
    exactly `precision` fractional digits.

    Args:
        dividend: Numerator
        divisor: Denominator
        precision: Fractional digits kept. Defaults to the configured
            division precision

    Returns:
        Rounded quotient

    Raises:
        ZeroDivisionError: If divisor is zero
    """
    if precision is None:
        precision = get_settings().division_precision

    if divisor == 0:
        raise ZeroDivisionError("decimal division by 0")

    num_a, den_a = dividend.as_integer_ratio()
    num_b, den_b = divisor.as_integer_ratio()

    numerator = num_a * den_b * 10 ** precision
    denominator = den_a * num_b

    negative = (numerator < 0) != (denominator < 0)
    quotient, remainder = divmod(abs(numerator), abs(denominator))

    if 2 * remainder >= abs(denominator):
        quotient += 1

    if negative:
        quotient = -quotient

    return Decimal(quotient).scaleb(-precision, context=EXACT_CONTEXT)


def percent_of(value: Decimal, percent: Decimal, precision: Optional[int] = None) -> Decimal:
    """Return value * percent / 100, multiplying before the division."""
    with exact_arithmetic():
        return div(value * percent, HUNDRED, precision)


def format_decimal(value: Decimal) -> str:
    """
    Render a Decimal as a plain base-10 string.

    No exponent, trailing fractional zeros trimmed, no negative zero.
    Example: Decimal('1000.00') -> '1000', Decimal('1E+3') -> '1000'
    """
    if value == 0:
        return "0"

    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def round_decimal(value: Decimal, places: int) -> Decimal:
    """
    Round half away from zero to `places` fractional digits.

    Negative places round the integer part (places=-2 -> nearest hundred).
    """
    quantum = ONE.scaleb(-places, context=EXACT_CONTEXT)
    return value.quantize(quantum, rounding=ROUND_HALF_UP, context=EXACT_CONTEXT)


__all__ = [
    "NumberLike",
    "EXACT_CONTEXT",
    "ZERO",
    "ONE",
    "HUNDRED",
    "exact_arithmetic",
    "to_decimal",
    "div",
    "percent_of",
    "format_decimal",
    "round_decimal",
]
