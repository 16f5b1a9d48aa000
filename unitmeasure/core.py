import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import KW_ONLY, dataclass, field, replace
from decimal import Decimal
from functools import partial
from typing import Any, ClassVar, Self

from unitmeasure.decompose import Breakdown, decompose, extract, serialize
from unitmeasure.errors import UnknownOperation, UnknownUnit
from unitmeasure.hooks import (
    Aliases,
    SuffixFormatter,
    UnitNormalizer,
    normalizer,
    suffix_formatter,
)
from unitmeasure.parser import parse_value
from unitmeasure.rates import ExchangeRateTable, RateIn
from unitmeasure.util import (
    ZERO,
    RoundingMode,
    add,
    divide,
    is_numeric,
    multiply,
    plain,
    rescale,
    strip_trailing_zeros,
    subtract,
    to_decimal,
)

ValueIn = Decimal | int | float | str
Formatter = Callable[[Decimal, str, "Measurement"], str]

# "%s" and "%r" conversions get the plain string; numeric ones the decimal
_STRING_CONVERSION = re.compile(r"%[-#0 +]*\d*(?:\.\d+)?[sr]")


@dataclass(frozen=True)
class Measurement:
    """A decimal magnitude tagged with a unit and the rates to convert it.

    Subclasses describe a quantity kind by declaring class attributes:

    - ``UNITS``: ordered mapping of unit name to rate (base unit has rate 1)
    - ``ALIASES``: alternative spellings mapped to canonical unit names
    - ``ATOM_UNIT``: finest unit, used as the basis for sums and breakdowns
    - ``DEFAULT_UNIT``: unit assumed when none is given

    Instances are immutable; every ``with_*`` and ``convert_*`` method returns
    a new measurement sharing the same rate table.

    Example:
        >>> Duration.parse("1h 30min").format(unit="min")
        '90min'
    """

    UNITS: ClassVar[Mapping[str, RateIn]] = {}
    ALIASES: ClassVar[Mapping[str, str]] = {}
    ATOM_UNIT: ClassVar[str] = ""
    DEFAULT_UNIT: ClassVar[str] = ""
    _table: ClassVar[ExchangeRateTable] = ExchangeRateTable()

    value: Decimal = ZERO
    unit: str = ""
    _: KW_ONLY
    rates: ExchangeRateTable | None = None
    atom_unit: str = ""
    default_unit: str = ""
    available_units: frozenset[str] | None = None
    normalizer: UnitNormalizer | None = field(
        default=None, compare=False, repr=False
    )
    suffix_formatter: SuffixFormatter | None = field(
        default=None, compare=False, repr=False
    )

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "UNITS" in cls.__dict__:
            cls._table = ExchangeRateTable.of(cls.UNITS)
            names = [*cls.UNITS, *cls.ALIASES]
            for name in names:
                method = f"to_{name}"
                if name.isidentifier() and not hasattr(cls, method):
                    setattr(cls, method, _shortcut(name))

    def __post_init__(self) -> None:
        cls = type(self)
        hook = self.normalizer
        if hook is None:
            if cls.UNITS or cls.ALIASES:
                hook = Aliases(cls.ALIASES, cls.UNITS)
            else:
                hook = normalizer(None)
        set_ = partial(object.__setattr__, self)
        set_("normalizer", normalizer(hook))
        set_("suffix_formatter", suffix_formatter(self.suffix_formatter))
        set_("rates", self.rates if self.rates is not None else cls._table)
        set_("atom_unit", self.atom_unit or cls.ATOM_UNIT)
        set_("default_unit", self.default_unit or cls.DEFAULT_UNIT)
        if self.available_units is not None:
            set_("available_units", frozenset(self.available_units))
        set_("value", to_decimal(self.value))
        set_("unit", self.normalize_unit(self.unit) if self.unit else self.default_unit)

    def __str__(self) -> str:
        return plain(strip_trailing_zeros(self.value))

    # -- construction -------------------------------------------------------

    @classmethod
    def of(cls, value: ValueIn, as_unit: str | None = None) -> Self:
        """Create from a number, or from a composite string like "1h 30min"."""
        return cls().with_from(value, as_unit)

    def with_from(
        self,
        value: ValueIn,
        as_unit: str | None = None,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> Self:
        if isinstance(value, str) and not is_numeric(value):
            return self.with_parse(value, as_unit, scale, rounding)
        return self.with_raw(value, as_unit)

    def with_raw(
        self,
        value: ValueIn | Callable[[Decimal, str, Self], ValueIn],
        unit: str | None = None,
    ) -> Self:
        """Return a copy holding ``value`` in ``unit`` without converting.

        ``value`` may be a callable receiving (current value, unit, copy).
        """
        new = replace(self, unit=self.normalize_unit(unit) if unit else self.unit)
        if callable(value):
            value = value(self.value, new.unit, new)
        return replace(new, value=to_decimal(value))

    def with_value(
        self,
        value: ValueIn | Callable[[Decimal, str, Self], ValueIn],
        from_unit: str | None = None,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> Self:
        """Set ``value`` given in ``from_unit``, converted to this unit."""
        new = self.with_raw(value, from_unit)
        if new.unit != self.unit:
            new = new.convert_to(self.unit, scale, rounding)
        return new

    def with_unit(self, unit: str) -> Self:
        """Relabel the value with ``unit`` without scaling it."""
        return replace(self, unit=self.normalize_unit(unit))

    def is_zero(self) -> bool:
        return self.value.is_zero()

    def is_negative(self) -> bool:
        return self.value < 0

    # -- conversion ---------------------------------------------------------

    @classmethod
    def convert(
        cls,
        value: ValueIn,
        from_unit: str,
        to_unit: str,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> Decimal:
        """Convert a bare number between two units without keeping an instance."""
        return cls(value, from_unit).convert_to(to_unit, scale, rounding).value

    def convert_to(
        self,
        unit: str,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> Self:
        """Return this measurement expressed in ``unit``.

        Without ``scale`` the result is exact, with trailing zeros stripped.

        Raises:
            UnknownUnit: If either unit is missing from the available rates
            NonTerminatingDivision: If no scale is given and the quotient repeats
        """
        unit = self.normalize_unit(unit)
        if unit == self.unit:
            return self

        if self.value.is_zero():
            self._rate(self.unit)
            self._rate(unit)
            return replace(self, unit=unit)

        value = self._convert_value(self.value, self.unit, unit, scale, rounding)
        return replace(self, value=value, unit=unit)

    def _convert_value(
        self,
        value: Decimal,
        from_unit: str,
        to_unit: str,
        scale: int | None,
        rounding: RoundingMode,
    ) -> Decimal:
        from_rate = self._rate(from_unit)
        to_rate = self._rate(to_unit)
        return divide(multiply(value, from_rate), to_rate, scale, rounding)

    def convert_to_atom_unit(self) -> Self:
        return self.convert_to(self.atom_unit, 0, RoundingMode.DOWN)

    def convert_to_base_unit(
        self, scale: int | None = None, rounding: RoundingMode = RoundingMode.DOWN
    ) -> Self:
        return self.convert_to(self.base_unit, scale, rounding)

    def convert_to_default_unit(
        self, scale: int | None = None, rounding: RoundingMode = RoundingMode.DOWN
    ) -> Self:
        return self.convert_to(self.default_unit, scale, rounding)

    def to(
        self,
        unit: str,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> Decimal:
        """Convert to ``unit`` and return the bare decimal value."""
        return strip_trailing_zeros(self.convert_to(unit, scale, rounding).value)

    def shortcut(self, name: str) -> Callable[..., Decimal]:
        """Resolve a conversion shortcut by name.

        Accepts names like "toKg" or "to_kg"; the result behaves like
        ``to(unit, ...)``.

        Raises:
            UnknownOperation: If ``name`` is not "to" followed by an available unit
        """
        if name.startswith("to"):
            unit = name[2:].lower().replace("_", "")
            if unit and self.get_unit_exchange_rate(unit) is not None:
                return partial(self.to, unit)
        raise UnknownOperation(name)

    # -- parsing ------------------------------------------------------------

    @classmethod
    def parse(
        cls,
        text: str,
        as_unit: str | None = None,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> Self:
        return cls().with_parse(text, as_unit, scale, rounding)

    @classmethod
    def parse_to_value(
        cls,
        text: str,
        as_unit: str | None = None,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> Decimal:
        return cls.parse(text, as_unit, scale, rounding).value

    def with_parse(
        self,
        text: str,
        as_unit: str | None = None,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> Self:
        """Sum every "<number> <unit>" pair of ``text`` into one measurement.

        Each pair is converted to the atom unit and added up; the total is
        then expressed in ``as_unit`` (default: this measurement's unit).
        """
        new = self.with_raw(0, self.atom_unit)

        total = ZERO
        for literal, unit in parse_value(text):
            converted = new.with_value(literal, unit, scale, rounding)
            total = add(total, converted.value)

        new = new.with_raw(total)

        target = self.normalize_unit(as_unit or self.unit)
        if target != new.unit:
            new = new.convert_to(target, scale, rounding)
        return new

    # -- formatting ---------------------------------------------------------

    def format(
        self,
        suffix: str | Formatter | None = None,
        unit: str | None = None,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> str:
        """Render the value with a unit suffix, e.g. ``"1.5kg"``.

        Args:
            suffix: Literal suffix (default: the unit name), a "%" template
                applied to the value, or a callable (value, unit, measurement)
                whose result is returned as-is
            unit: Convert to this unit first
            scale: Fixed number of fractional digits; otherwise trailing
                zeros are stripped
            rounding: Rounding mode for conversion and scaling
        """
        new = self
        if unit is not None:
            unit = self.normalize_unit(unit)
            new = self.convert_to(unit, scale, rounding)

        if scale is not None:
            value = rescale(new.value, scale, rounding)
        else:
            value = strip_trailing_zeros(new.value)

        unit = new.unit
        if suffix is None:
            suffix = unit

        if callable(suffix):
            return suffix(value, unit, self)
        if "%" in suffix:
            if _STRING_CONVERSION.search(suffix):
                return suffix % plain(value)
            return suffix % value

        return plain(value) + self.suffix_formatter.format_suffix(
            suffix, value, unit, self
        )

    # -- decomposition ------------------------------------------------------

    def with_extract(self, unit: str) -> tuple[Self, Self]:
        """Return (whole ``unit`` part, remainder in this unit)."""
        return extract(self, unit)

    def decompose(self, units: Iterable[str] | None = None) -> Breakdown[Self]:
        return decompose(self, units)

    def serialize(self, units: Iterable[str] | None = None) -> str:
        """Render a breakdown across units, e.g. ``"1h 1min 1s"``.

        ``units`` filters the units used; their order comes from the rates.
        """
        return serialize(self, units)

    def serialize_with(
        self, callback: Callable[[Self, list[tuple[str, Decimal]]], object]
    ) -> str:
        """Call ``callback(atom_remainder, sorted_rates)`` and stringify it."""
        remainder = self.convert_to(self.atom_unit)
        return str(callback(remainder, self.sorted_rates()))

    # -- rates --------------------------------------------------------------

    @property
    def available_rates(self) -> ExchangeRateTable:
        return self.rates.restrict(self.available_units)

    @property
    def base_unit(self) -> str:
        """Unit with rate 1 among the available rates.

        Raises:
            NoBaseUnitFound: If the available rates have no such unit
        """
        return self.available_rates.base_unit()

    @classmethod
    def units(cls) -> dict[str, Decimal]:
        """Declared units of this quantity kind and their rates."""
        return dict(cls._table)

    def sorted_rates(self) -> list[tuple[str, Decimal]]:
        return self.available_rates.sorted_desc()

    def get_unit_exchange_rate(self, unit: str) -> Decimal | None:
        return self.available_rates.get(self.normalize_unit(unit))

    def _rate(self, unit: str) -> Decimal:
        rate = self.get_unit_exchange_rate(unit)
        if rate is None:
            raise UnknownUnit(unit, list(self.available_rates))
        return rate

    def normalize_unit(self, unit: str) -> str:
        return self.normalizer.normalize(unit)

    def with_available_units(self, units: Iterable[str] | None) -> Self:
        return replace(
            self, available_units=None if units is None else frozenset(units)
        )

    def with_added_unit_exchange_rate(
        self, unit: str, rate: RateIn, prepend: bool = False
    ) -> Self:
        return replace(self, rates=self.rates.with_rate(unit, rate, prepend))

    def without_unit_exchange_rate(self, unit: str) -> Self:
        return replace(self, rates=self.rates.without(unit))

    def with_unit_exchanges(
        self,
        units: Mapping[str, RateIn],
        atom_unit: str,
        default_unit: str,
    ) -> Self:
        return replace(
            self,
            rates=ExchangeRateTable.of(units),
            atom_unit=atom_unit,
            default_unit=default_unit,
        )

    def with_default_unit(self, unit: str) -> Self:
        return replace(self, default_unit=unit)

    def with_atom_unit(self, unit: str) -> Self:
        return replace(self, atom_unit=unit)

    def with_unit_normalizer(
        self, hook: UnitNormalizer | Callable[[str], str] | None
    ) -> Self:
        return replace(self, normalizer=normalizer(hook))

    def with_suffix_formatter(
        self, hook: SuffixFormatter | Callable[..., str] | None
    ) -> Self:
        return replace(self, suffix_formatter=suffix_formatter(hook))

    # -- arithmetic ---------------------------------------------------------

    def _check_kind(self, other: "Measurement") -> None:
        if not isinstance(other, type(self)) and not isinstance(self, type(other)):
            raise TypeError(
                f"Cannot combine {type(self).__name__} with "
                f"{type(other).__name__}.\n"
                f"Hint: combine bare values instead, e.g. a.plus(b.value)"
            )

    def _align(self, other: "Measurement | ValueIn") -> tuple[Self, Decimal]:
        """Pair a receiver and operand value expressed in the same unit.

        Measurements meet in the finer of the two units so the conversion
        stays exact; bare numbers are taken in the receiver's unit.
        """
        if not isinstance(other, Measurement):
            return self, to_decimal(other)
        self._check_kind(other)
        if other._rate(other.unit) < self._rate(self.unit):
            return self.convert_to(other.unit), other.value
        return self, other.convert_to(self.unit).value

    def plus(self, other: "Measurement | ValueIn") -> Self:
        """Add a measurement or a bare number.

        The result is in the finer of the two units, e.g. 1h + 30min gives
        90min. Use ``convert_to`` on the result to pick another unit.
        """
        base, operand = self._align(other)
        return base.with_raw(add(base.value, operand))

    def minus(self, other: "Measurement | ValueIn") -> Self:
        base, operand = self._align(other)
        return base.with_raw(subtract(base.value, operand))

    def multiplied_by(self, factor: ValueIn) -> Self:
        return self.with_raw(multiply(self.value, to_decimal(factor)))

    def divided_by(
        self,
        divisor: ValueIn,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> Self:
        return self.with_raw(divide(self.value, to_decimal(divisor), scale, rounding))

    def negated(self) -> Self:
        return self.with_raw(-self.value)

    def abs(self) -> Self:
        return self.with_raw(abs(self.value))

    def compare_to(self, other: "Measurement | ValueIn") -> int:
        """Return -1, 0 or 1, comparing exactly in base units.

        Ordering is by magnitude, while ``==`` compares fields, so
        ``Duration(60, "min") <= Duration(1, "h")`` holds but ``==`` does not.
        Use ``is_equal_to`` for magnitude equality.
        """
        if isinstance(other, Measurement):
            self._check_kind(other)
            mine = multiply(self.value, self._rate(self.unit))
            theirs = multiply(other.value, other._rate(other.unit))
        else:
            mine, theirs = self.value, to_decimal(other)
        return (mine > theirs) - (mine < theirs)

    def is_equal_to(self, other: "Measurement | ValueIn") -> bool:
        return self.compare_to(other) == 0

    def __add__(self, other: "Measurement | ValueIn") -> Self:
        return self.plus(other)

    def __sub__(self, other: "Measurement | ValueIn") -> Self:
        return self.minus(other)

    def __neg__(self) -> Self:
        return self.negated()

    def __lt__(self, other: "Measurement | ValueIn") -> bool:
        return self.compare_to(other) < 0

    def __le__(self, other: "Measurement | ValueIn") -> bool:
        return self.compare_to(other) <= 0

    def __gt__(self, other: "Measurement | ValueIn") -> bool:
        return self.compare_to(other) > 0

    def __ge__(self, other: "Measurement | ValueIn") -> bool:
        return self.compare_to(other) >= 0


def _shortcut(unit: str) -> Callable[..., Decimal]:
    def convert(
        self: Measurement,
        scale: int | None = None,
        rounding: RoundingMode = RoundingMode.DOWN,
    ) -> Decimal:
        return self.to(unit, scale, rounding)

    convert.__name__ = f"to_{unit}"
    convert.__doc__ = f"Convert to ``{unit}`` and return the bare decimal."
    return convert
