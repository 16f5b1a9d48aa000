"""Tests for exact decimal helpers."""

from decimal import Decimal

import pytest

from unitmeasure.errors import (
    InvalidNumericFormat,
    NonTerminatingDivision,
    RoundingNecessary,
)
from unitmeasure.util import (
    RoundingMode,
    divide,
    multiply,
    plain,
    rescale,
    strip_trailing_zeros,
    to_decimal,
)


def test_to_decimal_accepts_numbers_and_strings():
    assert to_decimal(5) == Decimal("5")
    assert to_decimal("1234.50") == Decimal("1234.5")
    assert to_decimal(" 2 ") == Decimal("2")
    assert to_decimal(Decimal("0.1")) == Decimal("0.1")


def test_to_decimal_uses_float_repr():
    """0.1 must not turn into 0.1000000000000000055511151231257827..."""
    assert to_decimal(0.1) == Decimal("0.1")


@pytest.mark.parametrize("value", ["abc", "1,234", "", "NaN", "Infinity", True, None])
def test_to_decimal_rejects_non_numeric(value):
    with pytest.raises(InvalidNumericFormat, match="Cannot interpret"):
        to_decimal(value)


def test_divide_exact_strips_trailing_zeros():
    result = divide(Decimal("5400"), Decimal("60"))
    assert result == 90
    assert str(result) == "90"

    assert str(divide(Decimal("1"), Decimal("8"))) == "0.125"


def test_divide_non_terminating_requires_scale():
    with pytest.raises(NonTerminatingDivision, match="explicit scale"):
        divide(Decimal(1), Decimal(3))

    assert divide(Decimal(1), Decimal(3), 4) == Decimal("0.3333")


def test_divide_by_zero():
    with pytest.raises(ZeroDivisionError):
        divide(Decimal(1), Decimal(0))


def test_divide_exceeds_default_context_precision():
    """Exact results are not cut at the 28 digits of the default context."""
    big = Decimal("1" * 40)
    assert divide(big, Decimal("0.5")) == Decimal("2" * 40)
    assert multiply(big, Decimal(10)) == Decimal("1" * 40 + "0")


@pytest.mark.parametrize(
    "rounding, positive, negative",
    [
        (RoundingMode.DOWN, "2.5", "-2.5"),
        (RoundingMode.UP, "2.6", "-2.6"),
        (RoundingMode.FLOOR, "2.5", "-2.6"),
        (RoundingMode.CEILING, "2.6", "-2.5"),
        (RoundingMode.HALF_UP, "2.6", "-2.6"),
        (RoundingMode.HALF_DOWN, "2.5", "-2.5"),
        (RoundingMode.HALF_EVEN, "2.6", "-2.6"),
    ],
)
def test_rounding_modes_on_ties(rounding, positive, negative):
    assert rescale(Decimal("2.55"), 1, rounding) == Decimal(positive)
    assert rescale(Decimal("-2.55"), 1, rounding) == Decimal(negative)


def test_half_modes_outside_ties():
    assert rescale(Decimal("2.56"), 1, RoundingMode.HALF_DOWN) == Decimal("2.6")
    assert rescale(Decimal("2.54"), 1, RoundingMode.HALF_UP) == Decimal("2.5")
    assert rescale(Decimal("2.45"), 1, RoundingMode.HALF_EVEN) == Decimal("2.4")


def test_unnecessary_rounding():
    assert rescale(Decimal("2.50"), 1, RoundingMode.UNNECESSARY) == Decimal("2.5")
    with pytest.raises(RoundingNecessary):
        rescale(Decimal("2.55"), 1, RoundingMode.UNNECESSARY)


def test_rescale_keeps_requested_digits():
    assert plain(rescale(Decimal("1.2"), 4, RoundingMode.DOWN)) == "1.2000"


def test_negative_scale_is_rejected():
    with pytest.raises(ValueError, match="non-negative"):
        divide(Decimal(1), Decimal(2), -1)


def test_strip_trailing_zeros_avoids_exponent_notation():
    assert plain(strip_trailing_zeros(Decimal("100.000"))) == "100"
    assert plain(strip_trailing_zeros(Decimal("1E+3"))) == "1000"
    assert plain(strip_trailing_zeros(Decimal("0.50"))) == "0.5"
    assert plain(strip_trailing_zeros(Decimal("0.0000001"))) == "0.0000001"
