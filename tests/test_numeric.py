"""Unit tests for exact numeric arithmetic and output formatting."""

from fractions import Fraction

import pytest

from factories import fixed, span
from recipequant.errors import CannotAddTextValueError, DivisionByZeroError
from recipequant.models import DecimalValue, FixedValue, FractionValue, RangeValue, TextValue
from recipequant.numeric import (
    add_numeric_values,
    approximate_fraction,
    format_output_value,
    get_average_value,
    get_exact_average_value,
    get_numeric_value,
    is_value_integer_like,
    multiply_numeric_value,
    multiply_quantity_value,
    simplify_fraction,
    to_exact,
    to_rounded_decimal,
)
from recipequant.units.definitions import normalize_unit

# =============================================================================
# Numeric Values
# =============================================================================


class TestSimplifyFraction:
    """Tests for simplify_fraction function."""

    def test_whole_result_becomes_decimal(self):
        """Test that 6/3 collapses to a decimal 2."""
        assert simplify_fraction(6, 3) == DecimalValue(2)

    def test_reduces_to_lowest_terms(self):
        """Test that 2/4 reduces to 1/2."""
        assert simplify_fraction(2, 4) == FractionValue(1, 2)

    def test_sign_moves_to_numerator(self):
        """Test that the denominator is always positive."""
        assert simplify_fraction(1, -2) == FractionValue(-1, 2)
        assert simplify_fraction(-3, -6) == FractionValue(1, 2)

    def test_zero_denominator_raises(self):
        """Test that a zero denominator is fatal."""
        with pytest.raises(DivisionByZeroError):
            simplify_fraction(1, 0)

    def test_zero_denominator_is_a_zero_division(self):
        """Test that callers catching ZeroDivisionError also catch it."""
        with pytest.raises(ZeroDivisionError):
            simplify_fraction(5, 0)


class TestAddNumericValues:
    """Tests for add_numeric_values function."""

    def test_fractions_stay_exact(self):
        """Test that 1/2 + 1/3 is exactly 5/6."""
        assert add_numeric_values(FractionValue(1, 2), FractionValue(1, 3)) == FractionValue(5, 6)

    def test_fractions_summing_to_whole(self):
        """Test that 1/2 + 1/2 becomes a decimal 1."""
        assert add_numeric_values(FractionValue(1, 2), FractionValue(1, 2)) == DecimalValue(1)

    def test_decimal_plus_fraction_is_decimal(self):
        """Test that mixing a decimal with a nonzero fraction gives a decimal."""
        result = add_numeric_values(DecimalValue(1), FractionValue(1, 2))
        assert result == DecimalValue(1.5)

    def test_zero_decimal_keeps_fraction(self):
        """Test that adding a zero decimal keeps the fraction."""
        assert add_numeric_values(DecimalValue(0), FractionValue(1, 3)) == FractionValue(1, 3)
        assert add_numeric_values(FractionValue(1, 3), DecimalValue(0)) == FractionValue(1, 3)

    def test_both_zero(self):
        """Test that zero plus zero is a decimal zero."""
        assert add_numeric_values(DecimalValue(0), FractionValue(0, 1)) == DecimalValue(0)

    def test_decimals_have_no_float_drift(self):
        """Test that 0.1 + 0.2 is exactly 0.3."""
        assert add_numeric_values(DecimalValue(0.1), DecimalValue(0.2)) == DecimalValue(0.3)


class TestMultiplyNumericValue:
    """Tests for multiply_numeric_value function."""

    def test_fraction_times_denominator(self):
        """Test that 1/3 * 3 is exactly 1."""
        assert multiply_numeric_value(FractionValue(1, 3), 3) == DecimalValue(1)

    def test_decimal_times_int(self):
        """Test that decimals are scaled without float error."""
        assert multiply_numeric_value(DecimalValue(0.1), 3) == DecimalValue(0.3)

    def test_fraction_times_non_integer_factor(self):
        """Test that a fraction scaled by 1.5 stays exact."""
        assert multiply_numeric_value(FractionValue(1, 3), 1.5) == FractionValue(1, 2)

    def test_accepts_fraction_factor(self):
        """Test that Fraction factors are supported."""
        assert multiply_numeric_value(DecimalValue(3), Fraction(1, 3)) == DecimalValue(1)


# =============================================================================
# Quantity Values
# =============================================================================


class TestMultiplyQuantityValue:
    """Tests for multiply_quantity_value function."""

    def test_integer_factor_keeps_fraction(self):
        """Test that doubling 1/3 gives 2/3."""
        assert multiply_quantity_value(fixed((1, 3)), 2) == FixedValue(FractionValue(2, 3))

    def test_integer_reciprocal_keeps_fraction(self):
        """Test that halving 1/3 gives 1/6."""
        assert multiply_quantity_value(fixed((1, 3)), 0.5) == FixedValue(FractionValue(1, 6))
        assert multiply_quantity_value(fixed((1, 2)), Fraction(1, 4)) == FixedValue(
            FractionValue(1, 8)
        )

    def test_other_factor_rounds_to_three_places(self):
        """Test that 1/3 * 1.25 becomes a rounded decimal."""
        result = multiply_quantity_value(fixed((1, 3)), 1.25)
        assert result == FixedValue(DecimalValue(0.417))

    def test_decimal_rounded_half_up(self):
        """Test that decimal results are rounded to 3 places, half up."""
        assert multiply_quantity_value(fixed(1), Fraction(1, 3)) == FixedValue(DecimalValue(0.333))
        assert multiply_quantity_value(fixed(0.0025), 1) == FixedValue(DecimalValue(0.003))

    def test_range_is_not_rounded(self):
        """Test that range bounds are scaled without rounding."""
        result = multiply_quantity_value(span(1, 2), Fraction(1, 3))
        assert isinstance(result, RangeValue)
        assert get_numeric_value(result.min) == pytest.approx(1 / 3)
        assert get_numeric_value(result.max) == pytest.approx(2 / 3)

    def test_text_unchanged(self):
        """Test that text amounts are left alone."""
        assert multiply_quantity_value(fixed("a pinch"), 2) == fixed("a pinch")


class TestIsValueIntegerLike:
    """Tests for is_value_integer_like function."""

    def test_fixed_values(self):
        """Test whole and fractional fixed values."""
        assert is_value_integer_like(fixed(2.0))
        assert is_value_integer_like(FixedValue(FractionValue(4, 2)))
        assert not is_value_integer_like(fixed(1.5))
        assert not is_value_integer_like(fixed((1, 2)))

    def test_range_needs_both_bounds_whole(self):
        """Test that a range is integer-like only when both bounds are."""
        assert is_value_integer_like(span(1, 2))
        assert not is_value_integer_like(span(1, 2.5))

    def test_text_is_never_integer(self):
        """Test that text is not integer-like."""
        assert not is_value_integer_like(fixed("some"))


class TestAverageValue:
    """Tests for get_average_value and get_exact_average_value."""

    def test_fixed(self):
        """Test that a fixed value is its own average."""
        assert get_average_value(fixed((1, 4))) == 0.25

    def test_range_midpoint(self):
        """Test that a range averages to its midpoint."""
        assert get_average_value(span(1, 2)) == 1.5
        assert get_exact_average_value(span((1, 3), 1)) == Fraction(2, 3)

    def test_text(self):
        """Test that text comes back raw, and cannot be used in exact math."""
        assert get_average_value(FixedValue(TextValue("a pinch"))) == "a pinch"
        with pytest.raises(CannotAddTextValueError):
            get_exact_average_value(FixedValue(TextValue("a pinch")))


class TestToExact:
    """Tests for to_exact function."""

    def test_float_uses_shortest_repr(self):
        """Test that 0.1 is exactly one tenth."""
        assert to_exact(0.1) == Fraction(1, 10)

    def test_passthrough(self):
        """Test that ints and Fractions are converted directly."""
        assert to_exact(3) == Fraction(3)
        assert to_exact(Fraction(2, 7)) == Fraction(2, 7)


# =============================================================================
# Output Formatting
# =============================================================================


class TestApproximateFraction:
    """Tests for approximate_fraction function."""

    def test_exact_half(self):
        """Test that 0.5 is 1/2."""
        assert approximate_fraction(0.5) == FractionValue(1, 2)

    def test_close_third(self):
        """Test that 0.33 is close enough to 1/3."""
        assert approximate_fraction(0.33) == FractionValue(1, 3)

    def test_improper_result(self):
        """Test that values above one give improper fractions."""
        assert approximate_fraction(1.25) == FractionValue(5, 4)

    def test_rejections(self):
        """Test the values that have no fraction form."""
        assert approximate_fraction(5.5) is None  # whole part above max_whole
        assert approximate_fraction(2.0) is None  # already an integer
        assert approximate_fraction(-0.5) is None
        assert approximate_fraction(0.1) is None  # no denominator close enough

    def test_restricted_denominators(self):
        """Test that only the allowed denominators are tried."""
        assert approximate_fraction(0.33, denominators=(2, 4)) is None
        assert approximate_fraction(0.75, denominators=(2, 4)) == FractionValue(3, 4)


class TestToRoundedDecimal:
    """Tests for to_rounded_decimal function."""

    def test_three_significant_digits(self):
        """Test rounding to 3 significant digits."""
        assert to_rounded_decimal(DecimalValue(0.123456)) == DecimalValue(0.123)
        assert to_rounded_decimal(DecimalValue(12.345)) == DecimalValue(12.3)

    def test_large_values_round_to_integer(self):
        """Test that values from 1000 keep their whole integer part."""
        assert to_rounded_decimal(DecimalValue(2839.2)) == DecimalValue(2839)
        assert to_rounded_decimal(DecimalValue(1234.5)) == DecimalValue(1235)

    def test_zero(self):
        """Test that zero stays zero."""
        assert to_rounded_decimal(DecimalValue(0)) == DecimalValue(0)


class TestFormatOutputValue:
    """Tests for format_output_value function."""

    def test_fraction_when_unit_allows(self):
        """Test that cups show simple fractions."""
        assert format_output_value(0.5, normalize_unit("cup")) == FractionValue(1, 2)

    def test_decimal_when_unit_has_no_fractions(self):
        """Test that grams always show decimals."""
        assert format_output_value(0.5, normalize_unit("g")) == DecimalValue(0.5)

    def test_decimal_when_approximation_fails(self):
        """Test that a value far from any fraction is rounded instead."""
        assert format_output_value(0.1, normalize_unit("cup")) == DecimalValue(0.1)
