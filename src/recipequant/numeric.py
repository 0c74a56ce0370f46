"""Exact arithmetic on decimal/fraction values and fixed/range quantity values."""

import math
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

from recipequant.errors import CannotAddTextValueError, DivisionByZeroError
from recipequant.models import (
    AnyNumericValue,
    DecimalValue,
    FixedValue,
    FractionValue,
    NumericValue,
    QuantityValue,
    RangeValue,
    TextValue,
    UnitDefinition,
)

Factor = int | float | Decimal | Fraction

# Default allowed denominators for fraction approximation
DEFAULT_DENOMINATORS: tuple[int, ...] = (2, 3, 4, 8)
# Maximum relative error accepted when approximating a fraction (5%)
DEFAULT_FRACTION_ACCURACY = 0.05
# Maximum whole part of a mixed fraction before falling back to a decimal
DEFAULT_MAX_WHOLE = 4
# Decimal places kept when a scaled value cannot stay a fraction
SCALED_DECIMAL_PLACES = 3


# =============================================================================
# Exact Conversion Helpers
# =============================================================================


def to_exact(number: Factor) -> Fraction:
    """
    Convert a number to an exact rational.

    Floats go through their shortest decimal representation, so 0.1 becomes
    exactly 1/10 rather than its binary approximation.
    """
    if isinstance(number, Fraction):
        return number
    if isinstance(number, float):
        return Fraction(Decimal(repr(number)))
    return Fraction(number)


def to_number(exact: Fraction) -> int | float:
    """Turn an exact rational back into a plain Python number."""
    if exact.denominator == 1:
        return exact.numerator
    return float(exact)


def _exact_value(v: NumericValue) -> Fraction:
    if isinstance(v, DecimalValue):
        return to_exact(v.value)
    return Fraction(v.num, v.den)


# =============================================================================
# Numeric Values
# =============================================================================


def simplify_fraction(num: Factor, den: Factor) -> NumericValue:
    """
    Reduce a fraction to lowest terms with a positive denominator.

    Returns a DecimalValue when the reduced denominator is 1.

    Raises:
        DivisionByZeroError: If the denominator is zero.
    """
    if den == 0:
        raise DivisionByZeroError()

    # Fraction reduces by the gcd and moves the sign to the numerator
    ratio = to_exact(num) / to_exact(den)
    if ratio.denominator == 1:
        return DecimalValue(ratio.numerator)
    return FractionValue(ratio.numerator, ratio.denominator)


def get_numeric_value(v: NumericValue) -> float:
    """Get the float value of a decimal or fraction."""
    if isinstance(v, DecimalValue):
        return v.value
    return v.num / v.den


def add_numeric_values(val1: NumericValue, val2: NumericValue) -> NumericValue:
    """
    Add two numeric values.

    The result stays an exact fraction only when both operands are fractions,
    or when one is a fraction and the other a zero decimal.
    """
    exact1 = _exact_value(val1)
    exact2 = _exact_value(val2)

    if exact1 == 0 and exact2 == 0:
        return DecimalValue(0)

    keeps_fraction = (
        (isinstance(val1, FractionValue) and isinstance(val2, FractionValue))
        or (isinstance(val1, FractionValue) and exact2 == 0)
        or (isinstance(val2, FractionValue) and exact1 == 0)
    )
    total = exact1 + exact2
    if keeps_fraction:
        return simplify_fraction(total.numerator, total.denominator)
    return DecimalValue(to_number(total))


def multiply_numeric_value(v: NumericValue, factor: Factor) -> NumericValue:
    """Multiply a numeric value by a factor using exact arithmetic."""
    exact_factor = to_exact(factor)
    if isinstance(v, DecimalValue):
        return DecimalValue(to_number(to_exact(v.value) * exact_factor))
    return simplify_fraction(v.num * exact_factor, v.den)


def _round_decimal(v: NumericValue, places: int = SCALED_DECIMAL_PLACES) -> DecimalValue:
    ratio = _exact_value(v)
    exact = Decimal(ratio.numerator) / Decimal(ratio.denominator)
    rounded = exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    return DecimalValue(to_number(Fraction(rounded)))


def _factor_preserves_fractions(exact_factor: Fraction) -> bool:
    # Integer factors (2) and integer reciprocals (1/4) keep fractions readable
    if exact_factor == 0:
        return False
    return exact_factor.denominator == 1 or abs(exact_factor.numerator) == 1


# =============================================================================
# Quantity Values
# =============================================================================


def multiply_quantity_value(value: QuantityValue, factor: Factor) -> QuantityValue:
    """
    Scale a fixed or range value.

    Fixed fractions survive only when the factor or its reciprocal is an
    integer; every other fixed result is rounded to 3 decimal places. Range
    bounds are scaled independently without rounding. Text values are
    returned unchanged.
    """
    if isinstance(value, RangeValue):
        return RangeValue(
            min=multiply_numeric_value(value.min, factor),
            max=multiply_numeric_value(value.max, factor),
        )

    if isinstance(value.value, TextValue):
        return value

    new_value = multiply_numeric_value(value.value, factor)
    if isinstance(new_value, FractionValue) and _factor_preserves_fractions(to_exact(factor)):
        return FixedValue(new_value)
    return FixedValue(_round_decimal(new_value))


def is_value_integer_like(value: QuantityValue) -> bool:
    """Check whether a fixed value, or both bounds of a range, are whole numbers."""

    def numeric_is_integer(v: AnyNumericValue) -> bool:
        if isinstance(v, TextValue):
            return False
        if isinstance(v, FractionValue):
            return v.num % v.den == 0
        return float(v.value).is_integer()

    if isinstance(value, FixedValue):
        return numeric_is_integer(value.value)
    return numeric_is_integer(value.min) and numeric_is_integer(value.max)


def get_average_value(value: QuantityValue) -> float | str:
    """Get a representative scalar: the number itself, a range midpoint, or the raw text."""
    if isinstance(value, FixedValue):
        if isinstance(value.value, TextValue):
            return value.value.text
        return get_numeric_value(value.value)
    return (get_numeric_value(value.min) + get_numeric_value(value.max)) / 2


def get_exact_average_value(value: QuantityValue) -> Fraction:
    """
    Exact counterpart of get_average_value, used for ratio math.

    Raises:
        CannotAddTextValueError: If the value is text.
    """
    if isinstance(value, FixedValue):
        if isinstance(value.value, TextValue):
            raise CannotAddTextValueError(
                "A ratio cannot be computed from a text value."
            )
        return _exact_value(value.value)
    return (_exact_value(value.min) + _exact_value(value.max)) / 2


# =============================================================================
# Output Formatting Hints
# =============================================================================


def approximate_fraction(
    value: float,
    denominators: tuple[int, ...] = DEFAULT_DENOMINATORS,
    accuracy: float = DEFAULT_FRACTION_ACCURACY,
    max_whole: int = DEFAULT_MAX_WHOLE,
) -> FractionValue | None:
    """
    Approximate a decimal as a simple fraction within a relative tolerance.

    Returns an improper fraction (1.25 -> 5/4), or None when:
    - the value is not strictly positive
    - its whole part exceeds max_whole
    - it is practically an integer already
    - no allowed denominator gets within the tolerance

    Earlier denominators win when errors are equal.
    """
    if value <= 0 or not math.isfinite(value):
        return None

    whole_part = math.floor(value)
    if whole_part > max_whole:
        return None

    if value - whole_part < 1e-4:
        return None

    best: tuple[int, int, float] | None = None
    for den in denominators:
        rounded_num = math.floor(value * den + 0.5)
        if rounded_num == 0:
            continue

        relative_error = abs(rounded_num / den - value) / value
        if relative_error <= accuracy and (best is None or relative_error < best[2]):
            best = (rounded_num, den, relative_error)

    if best is None:
        return None

    num, den, _ = best
    common_divisor = math.gcd(num, den)
    return FractionValue(num // common_divisor, den // common_divisor)


def to_rounded_decimal(v: NumericValue, precision: int = 3) -> DecimalValue:
    """
    Round a value to a number of significant digits.

    Values of 1000 and more keep their whole integer part.
    """
    value = get_numeric_value(v)
    if value == 0:
        return DecimalValue(0)

    exact = Decimal(repr(float(value)))
    if abs(value) >= 1000:
        return DecimalValue(int(exact.quantize(Decimal(1), rounding=ROUND_HALF_UP)))

    magnitude = math.floor(math.log10(abs(value)))
    quantum = Decimal(1).scaleb(magnitude - precision + 1)
    rounded = exact.quantize(quantum, rounding=ROUND_HALF_UP)
    return DecimalValue(to_number(Fraction(rounded)))


def format_output_value(
    value: float,
    unit_def: UnitDefinition,
    precision: int = 3,
    accuracy: float = DEFAULT_FRACTION_ACCURACY,
) -> NumericValue:
    """Pick the output form of a value: a simple fraction if the unit allows it, else a rounded decimal."""
    policy = unit_def.fractions
    if policy is not None and policy.enabled:
        fraction = approximate_fraction(
            value,
            policy.denominators or DEFAULT_DENOMINATORS,
            accuracy,
            policy.max_whole if policy.max_whole is not None else DEFAULT_MAX_WHOLE,
        )
        if fraction is not None:
            return fraction

    return to_rounded_decimal(DecimalValue(value), precision)
