"""Immutable exchange-rate tables.

A rate says how many base units one of the named unit is worth; the base unit
is the one whose rate is exactly 1. Tables are ordered and never mutated:
every edit returns a new table, so measurements derived from one another can
share a table safely until one of them changes its rates.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal

from unitmeasure.errors import NoBaseUnitFound, UnknownUnit
from unitmeasure.util import ONE, to_decimal

RateIn = Decimal | int | float | str


@dataclass(frozen=True)
class ExchangeRateTable(Mapping[str, Decimal]):
    entries: tuple[tuple[str, Decimal], ...] = ()

    @classmethod
    def of(
        cls, rates: "Mapping[str, RateIn] | Iterable[tuple[str, RateIn]]"
    ) -> "ExchangeRateTable":
        """Build a table from a mapping or (unit, rate) pairs, keeping order."""
        pairs = rates.items() if isinstance(rates, Mapping) else rates
        table = cls()
        for unit, rate in pairs:
            table = table.with_rate(unit, rate)
        return table

    def __getitem__(self, unit: str) -> Decimal:
        for name, rate in self.entries:
            if name == unit:
                return rate
        raise KeyError(unit)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __str__(self) -> str:
        body = ", ".join(f"{name}={rate}" for name, rate in self.entries)
        return f"ExchangeRateTable({body})"

    def rate(self, unit: str) -> Decimal:
        """Return the rate for ``unit``.

        Raises:
            UnknownUnit: If the table has no such unit
        """
        try:
            return self[unit]
        except KeyError:
            raise UnknownUnit(unit, list(self)) from None

    def with_rate(
        self, unit: str, rate: RateIn, prepend: bool = False
    ) -> "ExchangeRateTable":
        """Return a table with ``unit`` set to ``rate``.

        An existing unit keeps its position unless ``prepend`` moves it first.
        """
        entry = (unit, to_decimal(rate))
        if prepend:
            rest = tuple(e for e in self.entries if e[0] != unit)
            return ExchangeRateTable((entry, *rest))
        if unit in self:
            return ExchangeRateTable(
                tuple(entry if e[0] == unit else e for e in self.entries)
            )
        return ExchangeRateTable((*self.entries, entry))

    def without(self, unit: str) -> "ExchangeRateTable":
        return ExchangeRateTable(tuple(e for e in self.entries if e[0] != unit))

    def restrict(self, units: Iterable[str] | None) -> "ExchangeRateTable":
        """Keep only ``units``, in table order. ``None`` keeps everything."""
        if units is None:
            return self
        keep = set(units)
        return ExchangeRateTable(tuple(e for e in self.entries if e[0] in keep))

    def sorted_desc(self) -> list[tuple[str, Decimal]]:
        """Entries by descending rate; ties keep table order."""
        return sorted(self.entries, key=lambda e: e[1], reverse=True)

    def base_unit(self) -> str:
        """Return the unit whose rate is exactly 1.

        Raises:
            NoBaseUnitFound: If no unit has rate 1
        """
        for name, rate in self.entries:
            if rate == ONE:
                return name
        raise NoBaseUnitFound(list(self))
