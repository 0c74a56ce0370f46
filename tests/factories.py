"""Shorthand builders for quantities used across the test suite."""

from recipequant.models import (
    DecimalValue,
    FixedValue,
    FractionValue,
    OrGroup,
    Quantity,
    RangeValue,
    TextValue,
    Unit,
)
from recipequant.units.definitions import resolve_extended_unit


def num(amount):
    """2 -> DecimalValue(2), (1, 2) -> FractionValue(1, 2), "a pinch" -> TextValue."""
    if isinstance(amount, tuple):
        return FractionValue(*amount)
    if isinstance(amount, str):
        return TextValue(amount)
    return DecimalValue(amount)


def fixed(amount) -> FixedValue:
    return FixedValue(num(amount))


def span(low, high) -> RangeValue:
    return RangeValue(min=num(low), max=num(high))


def q(amount, unit: str | None = None, protected: bool = False) -> Quantity:
    """A quantity with a plain unit name, or an extended Unit when protected."""
    value = amount if isinstance(amount, (FixedValue, RangeValue)) else fixed(amount)
    if protected:
        return Quantity(value, Unit(unit, integer_protected=True))
    return Quantity(value, unit)


def either(*quantities: Quantity) -> OrGroup:
    return OrGroup(tuple(quantities))


def resolved(amount, unit: str | None = None, protected: bool = False) -> Quantity:
    """A quantity whose unit is resolved against the default catalog."""
    quantity = q(amount, unit, protected)
    return Quantity(quantity.value, resolve_extended_unit(quantity.unit))
