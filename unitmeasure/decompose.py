"""Greedy breakdown of a measurement across several units.

``decompose`` converts the value to the atom unit, then walks the available
units from the largest rate to the smallest, pulling out as many whole units
as fit each time. Every step is a pure ``extract`` returning the part and the
remainder, so the caller's measurement is never modified.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from unitmeasure.util import RoundingMode, divide, multiply, subtract

if TYPE_CHECKING:
    from unitmeasure.core import Measurement

M = TypeVar("M", bound="Measurement")


@dataclass(frozen=True)
class Breakdown(Generic[M]):
    """Non-zero whole parts in descending unit order, plus what was left."""

    parts: tuple[M, ...]
    remainder: M

    def __str__(self) -> str:
        return " ".join(part.format() for part in self.parts)


def extract(measurement: M, unit: str) -> tuple[M, M]:
    """Split off as many whole ``unit`` as fit into ``measurement``.

    Returns a (part, remainder) tuple: ``part`` is expressed in ``unit`` and
    ``remainder`` in the measurement's own unit. The whole part is truncated
    toward zero, so for negative values the remainder keeps the sign.

    Example:
        >>> part, rest = extract(Duration(3661), "h")
        >>> str(part), str(rest)
        ('1', '61')
    """
    unit = measurement.normalize_unit(unit)
    rate = measurement.with_raw(1, unit).convert_to(measurement.unit).value
    whole = divide(measurement.value, rate, 0, RoundingMode.DOWN)
    remainder = measurement.with_raw(
        subtract(measurement.value, multiply(whole, rate))
    )
    return measurement.with_raw(whole, unit), remainder


def decompose(measurement: M, units: Iterable[str] | None = None) -> Breakdown[M]:
    """Break ``measurement`` into whole parts across its units.

    ``units`` filters which units may appear; the order is always by
    descending rate regardless of the order given. The remainder is expressed
    in the atom unit.
    """
    remainder = measurement.convert_to_atom_unit()
    ordered = [name for name, _ in measurement.sorted_rates()]

    if units is not None:
        allowed = {measurement.normalize_unit(unit) for unit in units}
        ordered = [name for name in ordered if name in allowed]

    parts: list[M] = []
    for name in ordered:
        part, remainder = extract(remainder, name)
        if not part.is_zero():
            parts.append(part)

    return Breakdown(parts=tuple(parts), remainder=remainder)


def serialize(measurement: "Measurement", units: Iterable[str] | None = None) -> str:
    """Render a breakdown such as ``"1h 1min 1s"``.

    Falls back to a formatted zero in the measurement's unit when no whole
    part fits.
    """
    formatted = str(decompose(measurement, units)).strip()
    return formatted or measurement.with_raw(0).format()
