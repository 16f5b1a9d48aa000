"""Pluggable unit normalization and suffix formatting.

Each hook is a small class with a single method. Plain callables are accepted
wherever a hook is expected and wrapped by ``normalizer()`` or
``suffix_formatter()``.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable

from typing_extensions import override

if TYPE_CHECKING:
    from unitmeasure.core import Measurement


class UnitNormalizer:
    def normalize(self, unit: str) -> str:
        raise NotImplementedError


class SuffixFormatter:
    def format_suffix(
        self, suffix: str, value: Decimal, unit: str, measurement: "Measurement"
    ) -> str:
        raise NotImplementedError


class Identity(UnitNormalizer):
    @override
    def normalize(self, unit: str) -> str:
        return unit


class Aliases(UnitNormalizer):
    """Map alternative spellings onto canonical unit names.

    Lookup tries the stripped name first, then its lower-case form, so
    case-sensitive symbols like "Mm" and "mm" stay distinct when both are
    listed. A name in ``units`` is canonical: "KG" resolves to "kg" when only
    the lower-case form is declared. Unknown names pass through unchanged.
    """

    def __init__(self, aliases: Mapping[str, str], units: Iterable[str] = ()):
        self.aliases: dict[str, str] = dict(aliases)
        self.units: frozenset[str] = frozenset(units)

    @override
    def normalize(self, unit: str) -> str:
        unit = unit.strip()
        if unit in self.aliases:
            return self.aliases[unit]
        if unit in self.units:
            return unit
        lower = unit.lower()
        if lower in self.aliases:
            return self.aliases[lower]
        if lower in self.units:
            return lower
        return unit


class FunctionNormalizer(UnitNormalizer):
    def __init__(self, func: Callable[[str], str]):
        self.func: Callable[[str], str] = func

    @override
    def normalize(self, unit: str) -> str:
        return self.func(unit)


class Verbatim(SuffixFormatter):
    @override
    def format_suffix(
        self, suffix: str, value: Decimal, unit: str, measurement: "Measurement"
    ) -> str:
        return suffix


class Labels(SuffixFormatter):
    """Replace unit suffixes with display labels, e.g. {"h": " hours"}."""

    def __init__(self, labels: Mapping[str, str], separator: str = ""):
        self.labels: dict[str, str] = dict(labels)
        self.separator: str = separator

    @override
    def format_suffix(
        self, suffix: str, value: Decimal, unit: str, measurement: "Measurement"
    ) -> str:
        return self.separator + self.labels.get(suffix, suffix)


class FunctionSuffix(SuffixFormatter):
    def __init__(self, func: Callable[[str, Decimal, str, Any], str]):
        self.func: Callable[[str, Decimal, str, Any], str] = func

    @override
    def format_suffix(
        self, suffix: str, value: Decimal, unit: str, measurement: "Measurement"
    ) -> str:
        return self.func(suffix, value, unit, measurement)


identity: Identity = Identity()
verbatim: Verbatim = Verbatim()


def normalizer(hook: UnitNormalizer | Callable[[str], str] | None) -> UnitNormalizer:
    """Coerce ``hook`` to a UnitNormalizer; ``None`` means identity."""
    if hook is None:
        return identity
    if isinstance(hook, UnitNormalizer):
        return hook
    if callable(hook):
        return FunctionNormalizer(hook)
    raise TypeError(
        f"Unit normalizer must be a UnitNormalizer or a callable.\n"
        f"Got {type(hook).__name__!r}: {hook!r}"
    )


def suffix_formatter(
    hook: SuffixFormatter | Callable[[str, Decimal, str, Any], str] | None,
) -> SuffixFormatter:
    """Coerce ``hook`` to a SuffixFormatter; ``None`` leaves suffixes as-is."""
    if hook is None:
        return verbatim
    if isinstance(hook, SuffixFormatter):
        return hook
    if callable(hook):
        return FunctionSuffix(hook)
    raise TypeError(
        f"Suffix formatter must be a SuffixFormatter or a callable.\n"
        f"Got {type(hook).__name__!r}: {hook!r}"
    )
