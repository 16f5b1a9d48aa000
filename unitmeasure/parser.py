"""Tokenizer for composite quantity strings such as ``"1h 30 min 500ms"``.

The tokenizer is greedy and left-to-right. It never backtracks, so ambiguous
spacing like ``"1 2kg"`` is reported as an error rather than guessed at.
"""

import re

from unitmeasure.errors import (
    AdjacentNumericTokens,
    InvalidFormat,
    InvalidToken,
    UnitWithoutValue,
)

# "1243minutes", "2.5kg", "1,000m/s"
_FUSED = re.compile(r"^([\d,.]+)([a-zA-Z].*)$")
# "1,234.5", "-3", "2e3"
_NUMERIC = re.compile(r"^[+-]?[\d,.]+(?:[eE][+-]?\d+)?$")
# "min", "m/s", "kg²"
_UNIT = re.compile(r"^[a-zA-Z].*$")


def parse_value(text: str) -> list[tuple[str, str]]:
    """Split ``text`` into ordered (numeric literal, unit name) pairs.

    Commas are treated as thousands separators and removed from literals.
    Multi-word units are joined with single spaces ("1 fl oz" -> "fl oz").

    Raises:
        AdjacentNumericTokens: If a number follows a number that has no unit
        UnitWithoutValue: If a unit word appears before any number
        InvalidToken: If a token is neither a number nor a unit word
        InvalidFormat: If nothing was parsed or the last number has no unit

    Example:
        >>> parse_value("1h 30 min")
        [('1', 'h'), ('30', 'min')]
    """
    pairs: list[tuple[str, str]] = []
    current_value: str | None = None
    current_unit: list[str] = []

    def close(token: str) -> None:
        if current_value is None:
            return
        if not current_unit:
            raise AdjacentNumericTokens(token)
        pairs.append((current_value, " ".join(current_unit)))

    for token in text.split():
        if match := _FUSED.match(token):
            close(token)
            current_value = match.group(1)
            current_unit = [match.group(2)]
        elif _NUMERIC.match(token):
            close(token)
            current_value = token
            current_unit = []
        elif _UNIT.match(token):
            if current_value is None:
                raise UnitWithoutValue(token)
            current_unit.append(token)
        else:
            raise InvalidToken(token)

    if current_value is not None:
        if not current_unit:
            raise InvalidFormat(text, f"number {current_value!r} has no unit")
        pairs.append((current_value, " ".join(current_unit)))

    if not pairs:
        raise InvalidFormat(text)

    return [(value.replace(",", ""), unit) for value, unit in pairs]
