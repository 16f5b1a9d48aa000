"""Exceptions raised by unitmeasure.

Every error derives from MeasurementError (a ValueError), so callers can catch
the whole family at once. Messages span several lines and end with a hint.
"""


class MeasurementError(ValueError):
    pass


class InvalidNumericFormat(MeasurementError):
    def __init__(self, value: object):
        self.value: object = value
        super().__init__(
            f"Cannot interpret {value!r} as a decimal number.\n"
            f"Accepted: int, float, Decimal or a numeric string such as '1234.5'\n"
            f"Hint: thousands separators are only understood by parse(): "
            f"Duration.parse('1,500 ms')"
        )


class UnknownUnit(MeasurementError):
    def __init__(self, unit: str, known: "list[str] | None" = None):
        self.unit: str = unit
        message = f"Unknown unit: {unit!r}"
        if known:
            message += f"\nKnown units: {', '.join(known)}"
        super().__init__(message)


class NoBaseUnitFound(MeasurementError):
    def __init__(self, units: "list[str]"):
        super().__init__(
            f"No base unit (rate == 1) among available units: {', '.join(units)}\n"
            f"Hint: exactly one unit must have an exchange rate of 1, "
            f"check with_available_units() did not filter it out"
        )


class ParseError(MeasurementError):
    pass


class AdjacentNumericTokens(ParseError):
    def __init__(self, token: str):
        self.token: str = token
        super().__init__(
            f"Unexpected numeric token: {token!r}\n"
            f"The previous number has no unit.\n"
            f"Example: '1h 30min' or '1 h 30 min', not '1 30 min'"
        )


class UnitWithoutValue(ParseError):
    def __init__(self, token: str):
        self.token: str = token
        super().__init__(
            f"Unexpected unit token: {token!r}\n"
            f"A unit must follow a number.\n"
            f"Example: '5 kg' or '5kg'"
        )


class InvalidToken(ParseError):
    def __init__(self, token: str):
        self.token: str = token
        super().__init__(
            f"Invalid token: {token!r}\n"
            f"Tokens are numbers ('1,234.5'), unit words ('min') "
            f"or both fused ('30min')"
        )


class InvalidFormat(ParseError):
    def __init__(self, text: str, reason: str = "no value/unit pairs found"):
        self.text: str = text
        super().__init__(f"Invalid format: {text!r} ({reason})")


class NonTerminatingDivision(MeasurementError, ArithmeticError):
    def __init__(self, numerator: object, denominator: object):
        super().__init__(
            f"{numerator} / {denominator} has no exact decimal representation.\n"
            f"Hint: pass an explicit scale, e.g. convert_to('lb', scale=6)"
        )


class RoundingNecessary(MeasurementError, ArithmeticError):
    def __init__(self, value: object, scale: int):
        super().__init__(
            f"{value} cannot be represented with scale {scale} without rounding.\n"
            f"Hint: choose a rounding mode other than RoundingMode.UNNECESSARY"
        )


class UnknownOperation(MeasurementError, AttributeError):
    def __init__(self, name: str):
        self.name: str = name
        super().__init__(
            f"Method {name!r} does not exist.\n"
            f"Shortcuts look like 'to_<unit>', e.g. shortcut('to_kg')"
        )
