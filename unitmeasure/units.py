"""Built-in quantity kinds: durations, weights and lengths.

Each kind is a Measurement subclass with an explicit table of units. Rates
are expressed in the kind's base unit (the one with rate 1).
"""

from datetime import timedelta
from decimal import Decimal
from typing import Self

from dateutil.relativedelta import relativedelta

from unitmeasure.core import Measurement
from unitmeasure.util import DAY, HOUR, MINUTE, MONTH, WEEK, YEAR, add, to_decimal

# Fields of relativedelta that have a fixed length in seconds
_RELATIVEDELTA_FIELDS = {
    "days": "d",
    "hours": "h",
    "minutes": "min",
    "seconds": "s",
    "microseconds": "us",
}


class Duration(Measurement):
    """Time spans from nanoseconds to years.

    Months and years have a fixed length (365-day year, month = year / 12),
    so they are only approximations of calendar periods.

    Example:
        >>> Duration(3661).serialize()
        '1h 1min 1s'
    """

    UNITS = {
        "y": YEAR,
        "mo": MONTH,
        "w": WEEK,
        "d": DAY,
        "h": HOUR,
        "min": MINUTE,
        "s": 1,
        "ms": "0.001",
        "us": "0.000001",
        "ns": "0.000000001",
    }
    ALIASES = {
        "year": "y",
        "years": "y",
        "yr": "y",
        "month": "mo",
        "months": "mo",
        "week": "w",
        "weeks": "w",
        "day": "d",
        "days": "d",
        "hour": "h",
        "hours": "h",
        "hr": "h",
        "hrs": "h",
        "minute": "min",
        "minutes": "min",
        "mins": "min",
        "m": "min",
        "second": "s",
        "seconds": "s",
        "sec": "s",
        "secs": "s",
        "millisecond": "ms",
        "milliseconds": "ms",
        "microsecond": "us",
        "microseconds": "us",
        "μs": "us",
        "µs": "us",
        "nanosecond": "ns",
        "nanoseconds": "ns",
    }
    ATOM_UNIT = "ns"
    DEFAULT_UNIT = "s"

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> Self:
        seconds = add(
            Decimal(delta.days * DAY + delta.seconds),
            Decimal(delta.microseconds).scaleb(-6),
        )
        return cls(seconds, "s")

    def to_timedelta(self) -> timedelta:
        """Convert to a timedelta; anything below a microsecond is dropped."""
        return timedelta(microseconds=int(self.convert_to("us", 0).value))

    @classmethod
    def from_relativedelta(cls, delta: relativedelta) -> Self:
        """Sum the fixed-length fields of ``delta`` into a duration.

        Raises:
            ValueError: If ``delta`` has years/months or absolute fields, whose
                length depends on the date they are applied to
        """
        if delta.years or delta.months:
            raise ValueError(
                f"Cannot convert a relativedelta with years/months to a Duration.\n"
                f"Got: {delta!r}\n"
                f"Hint: calendar months vary in length; use days instead"
            )
        if any(
            getattr(delta, name) is not None
            for name in ("year", "month", "day", "weekday", "hour", "minute", "second")
        ):
            raise ValueError(
                f"Cannot convert a relativedelta with absolute fields to a Duration.\n"
                f"Got: {delta!r}"
            )

        total = cls(0, cls.ATOM_UNIT)
        for name, unit in _RELATIVEDELTA_FIELDS.items():
            amount = getattr(delta, name)
            if amount:
                total = total.plus(total.with_raw(to_decimal(amount), unit))
        return total.convert_to(cls.DEFAULT_UNIT)

    def to_relativedelta(self) -> relativedelta:
        """Break the duration into days, hours, minutes, seconds, microseconds."""
        breakdown = self.decompose(_RELATIVEDELTA_FIELDS.values())
        fields = {name: 0 for name in _RELATIVEDELTA_FIELDS}
        by_unit = {unit: name for name, unit in _RELATIVEDELTA_FIELDS.items()}
        for part in breakdown.parts:
            fields[by_unit[part.unit]] = int(part.value)
        return relativedelta(**fields)


class Weight(Measurement):
    """Mass in metric, avoirdupois and carat units.

    Breakdowns start from whole milligrams, so avoirdupois values lose their
    sub-milligram part: ``Weight(1, "lb").serialize()`` is
    ``"15oz 28g 1ct 149mg"`` since a pound is 453592.37mg.
    """

    UNITS = {
        "t": 1000,
        "kg": 1,
        "lb": "0.45359237",
        "oz": "0.028349523125",
        "g": "0.001",
        "ct": "0.0002",
        "mg": "0.000001",
    }
    ALIASES = {
        "ton": "t",
        "tons": "t",
        "tonne": "t",
        "tonnes": "t",
        "kilogram": "kg",
        "kilograms": "kg",
        "kgs": "kg",
        "pound": "lb",
        "pounds": "lb",
        "lbs": "lb",
        "ounce": "oz",
        "ounces": "oz",
        "gram": "g",
        "grams": "g",
        "carat": "ct",
        "carats": "ct",
        "milligram": "mg",
        "milligrams": "mg",
    }
    ATOM_UNIT = "mg"
    DEFAULT_UNIT = "kg"


class Length(Measurement):
    """Distances in metric and imperial units."""

    UNITS = {
        "km": 1000,
        "mi": "1609.344",
        "m": 1,
        "yd": "0.9144",
        "ft": "0.3048",
        "dm": "0.1",
        "in": "0.0254",
        "cm": "0.01",
        "mm": "0.001",
        "um": "0.000001",
        "nm": "0.000000001",
    }
    ALIASES = {
        "kilometer": "km",
        "kilometers": "km",
        "kilometre": "km",
        "kilometres": "km",
        "mile": "mi",
        "miles": "mi",
        "meter": "m",
        "meters": "m",
        "metre": "m",
        "metres": "m",
        "yard": "yd",
        "yards": "yd",
        "foot": "ft",
        "feet": "ft",
        "decimeter": "dm",
        "decimeters": "dm",
        "inch": "in",
        "inches": "in",
        "centimeter": "cm",
        "centimeters": "cm",
        "millimeter": "mm",
        "millimeters": "mm",
        "micrometer": "um",
        "micrometers": "um",
        "μm": "um",
        "µm": "um",
        "nanometer": "nm",
        "nanometers": "nm",
    }
    ATOM_UNIT = "nm"
    DEFAULT_UNIT = "m"
