"""Decimal helpers and constants for unitmeasure.

Addition, subtraction and multiplication run in an unbounded-precision
context so they are always exact. Division goes through Fraction: without a
scale the quotient must terminate, with a scale it is rounded by the
requested mode.

Time unit constants represent durations in seconds.
"""

import decimal
from decimal import Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction

from unitmeasure.errors import (
    InvalidNumericFormat,
    NonTerminatingDivision,
    RoundingNecessary,
)

# Time unit constants (all values in seconds)
SECOND = 1
MINUTE = 60
HOUR = 3600
DAY = 86400
WEEK = 604800
YEAR = 31536000
MONTH = YEAR // 12

ZERO = Decimal(0)
ONE = Decimal(1)

EXACT = decimal.Context(
    prec=decimal.MAX_PREC,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
    traps=[InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
)


class RoundingMode(str, Enum):
    UP = decimal.ROUND_UP
    DOWN = decimal.ROUND_DOWN
    CEILING = decimal.ROUND_CEILING
    FLOOR = decimal.ROUND_FLOOR
    HALF_UP = decimal.ROUND_HALF_UP
    HALF_DOWN = decimal.ROUND_HALF_DOWN
    HALF_EVEN = decimal.ROUND_HALF_EVEN
    UNNECESSARY = "ROUND_UNNECESSARY"


def to_decimal(value: object) -> Decimal:
    """Coerce an int, float, Decimal or numeric string to a finite Decimal.

    Floats go through their shortest repr so 0.1 becomes Decimal('0.1').

    Raises:
        InvalidNumericFormat: If the value is not a finite number
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise InvalidNumericFormat(value)
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidNumericFormat(value) from None
    else:
        raise InvalidNumericFormat(value)

    if not result.is_finite():
        raise InvalidNumericFormat(value)
    return result


def is_numeric(value: object) -> bool:
    try:
        to_decimal(value)
    except InvalidNumericFormat:
        return False
    return True


def strip_trailing_zeros(value: Decimal) -> Decimal:
    """Drop fractional trailing zeros without switching to exponent notation."""
    if value == value.to_integral_value():
        return value.quantize(ONE, context=EXACT)
    return EXACT.normalize(value)


def plain(value: Decimal) -> str:
    """Render a decimal without exponent notation."""
    return format(value, "f")


def add(left: Decimal, right: Decimal) -> Decimal:
    return EXACT.add(left, right)


def subtract(left: Decimal, right: Decimal) -> Decimal:
    return EXACT.subtract(left, right)


def multiply(left: Decimal, right: Decimal) -> Decimal:
    return EXACT.multiply(left, right)


def divide(
    numerator: Decimal,
    denominator: Decimal,
    scale: int | None = None,
    rounding: RoundingMode = RoundingMode.DOWN,
) -> Decimal:
    """Divide exactly, or round to ``scale`` fractional digits.

    Raises:
        ZeroDivisionError: If denominator is zero
        NonTerminatingDivision: If no scale is given and the quotient repeats
        RoundingNecessary: If rounding is UNNECESSARY and the result is inexact
    """
    quotient = Fraction(numerator) / Fraction(denominator)

    if scale is None:
        return strip_trailing_zeros(_terminating(quotient, numerator, denominator))

    if scale < 0:
        raise ValueError(f"scale must be a non-negative integer, got {scale}")

    scaled = quotient * 10**scale
    return Decimal(f"{_round_fraction(scaled, rounding, quotient, scale)}E-{scale}")


def rescale(value: Decimal, scale: int, rounding: RoundingMode) -> Decimal:
    """Return ``value`` with exactly ``scale`` fractional digits."""
    return divide(value, ONE, scale, rounding)


def _terminating(
    quotient: Fraction, numerator: Decimal, denominator: Decimal
) -> Decimal:
    # A fraction terminates in base 10 iff its reduced denominator is 2^a * 5^b
    rest = quotient.denominator
    twos = fives = 0
    while rest % 2 == 0:
        rest //= 2
        twos += 1
    while rest % 5 == 0:
        rest //= 5
        fives += 1
    if rest != 1:
        raise NonTerminatingDivision(numerator, denominator)

    digits = max(twos, fives)
    return Decimal(f"{quotient.numerator * 10**digits // quotient.denominator}E-{digits}")


def _round_fraction(
    scaled: Fraction, rounding: RoundingMode, original: Fraction, scale: int
) -> int:
    """Round a fraction to an integer using a decimal-module rounding mode."""
    floor, remainder = divmod(scaled.numerator, scaled.denominator)
    if remainder == 0:
        return floor

    positive = scaled > 0
    match rounding:
        case RoundingMode.UNNECESSARY:
            raise RoundingNecessary(original, scale)
        case RoundingMode.FLOOR:
            return floor
        case RoundingMode.CEILING:
            return floor + 1
        case RoundingMode.DOWN:
            return floor if positive else floor + 1
        case RoundingMode.UP:
            return floor + 1 if positive else floor

    # Half-* modes compare the discarded part against one half
    twice = 2 * remainder
    if twice < scaled.denominator:
        return floor
    if twice > scaled.denominator:
        return floor + 1

    match rounding:
        case RoundingMode.HALF_UP:
            return floor + 1 if positive else floor
        case RoundingMode.HALF_DOWN:
            return floor if positive else floor + 1
        case RoundingMode.HALF_EVEN:
            return floor if floor % 2 == 0 else floor + 1
    raise ValueError(f"Unsupported rounding mode: {rounding!r}")
