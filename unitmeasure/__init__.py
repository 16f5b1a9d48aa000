from importlib.resources import files

from .core import Measurement
from .decompose import Breakdown, extract, serialize
from .errors import (
    AdjacentNumericTokens,
    InvalidFormat,
    InvalidNumericFormat,
    InvalidToken,
    MeasurementError,
    NoBaseUnitFound,
    NonTerminatingDivision,
    ParseError,
    RoundingNecessary,
    UnitWithoutValue,
    UnknownOperation,
    UnknownUnit,
)
from .hooks import Aliases, Labels, SuffixFormatter, UnitNormalizer
from .parser import parse_value
from .rates import ExchangeRateTable
from .units import Duration, Length, Weight
from .util import RoundingMode

# Load documentation files for programmatic access by agents and code-aware tools
_docs_path = files(__package__) / "docs"
docs = {
    "readme": (_docs_path / "README.md").read_text(),
    "api": (_docs_path / "API.md").read_text(),
}

__all__ = [
    "Measurement",
    "Duration",
    "Weight",
    "Length",
    "ExchangeRateTable",
    "RoundingMode",
    "Breakdown",
    "extract",
    "serialize",
    "parse_value",
    "UnitNormalizer",
    "SuffixFormatter",
    "Aliases",
    "Labels",
    "MeasurementError",
    "InvalidNumericFormat",
    "UnknownUnit",
    "NoBaseUnitFound",
    "ParseError",
    "AdjacentNumericTokens",
    "UnitWithoutValue",
    "InvalidToken",
    "InvalidFormat",
    "NonTerminatingDivision",
    "RoundingNecessary",
    "UnknownOperation",
    "docs",
]
