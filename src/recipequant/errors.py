"""Exceptions raised by the quantity engine."""


class QuantityError(Exception):
    """Base exception for quantity and unit errors."""


class DivisionByZeroError(QuantityError, ZeroDivisionError):
    """Raised when a fraction is built with a zero denominator."""

    def __init__(self, message: str = "Denominator cannot be zero."):
        super().__init__(message)


class CannotAddTextValueError(QuantityError):
    """Raised when arithmetic touches a text amount such as "a pinch"."""

    def __init__(self, message: str = "Cannot add a quantity with a text value."):
        super().__init__(message)


class IncompatibleUnitsError(QuantityError):
    """Raised when two quantities cannot be converted into one another."""

    def __init__(self, unit1: str | None, unit2: str | None):
        super().__init__(
            f"Cannot add quantities with incompatible or unknown units: {unit1} and {unit2}"
        )
        self.unit1 = unit1
        self.unit2 = unit2
