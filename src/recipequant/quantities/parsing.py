"""Parsing raw amount and unit strings into engine values."""

import re

from recipequant.logging_config import get_logger
from recipequant.models import (
    AnyNumericValue,
    DecimalValue,
    FixedValue,
    Quantity,
    QuantityValue,
    RangeValue,
    TextValue,
    Unit,
)
from recipequant.numeric import simplify_fraction

logger = get_logger(__name__)

# Marker placed before a unit to keep its amounts whole ("=large")
INTEGER_PROTECTION_MARKER = "="

VULGAR_FRACTIONS: dict[str, str] = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅛": "1/8",
}

_DECIMAL_RE = re.compile(r"^\d+(?:[.,]\d+)?$")
_FRACTION_RE = re.compile(r"^(\d+)\s*/\s*(\d+)$")
_MIXED_RE = re.compile(r"^(\d+)\s+(\d+)\s*/\s*(\d+)$")
_RANGE_RE = re.compile(r"^(.+?)\s*[-–]\s*(.+)$")
_MEASURE_RE = re.compile(r"^(\d+(?:[.,]\d+)?(?:\s*/\s*\d+)?(?:\s+\d+\s*/\s*\d+)?)\s*(.*)$")


# =============================================================================
# Amounts
# =============================================================================


def _expand_vulgar_fractions(text: str) -> str:
    for symbol, fraction in VULGAR_FRACTIONS.items():
        text = text.replace(symbol, f" {fraction}")
    return " ".join(text.split())


def parse_numeric_value(text: str) -> AnyNumericValue:
    """
    Parse a single amount.

    Handles formats like:
    - "2", "1.5" and "3,5" (comma as decimal separator)
    - "1/2" (kept as an exact fraction, in lowest terms)
    - "1 1/2" and "1½" (mixed numbers, as an improper fraction)

    Anything else, including a zero denominator, is kept as text.
    """
    raw = text
    text = _expand_vulgar_fractions(text.strip())

    if _DECIMAL_RE.match(text):
        if "," in text or "." in text:
            return DecimalValue(float(text.replace(",", ".")))
        return DecimalValue(int(text))

    if mixed_match := _MIXED_RE.match(text):
        whole, num, den = (int(g) for g in mixed_match.groups())
        if den != 0:
            return simplify_fraction(whole * den + num, den)

    if frac_match := _FRACTION_RE.match(text):
        num, den = (int(g) for g in frac_match.groups())
        if den != 0:
            return simplify_fraction(num, den)

    logger.debug(f"Keeping amount as text: {raw!r}")
    return TextValue(raw.strip())


def parse_quantity_value(text: str | int | float) -> QuantityValue:
    """
    Parse an amount that may be a range.

    "1-2" becomes a range when both bounds are numeric; "a pinch" and other
    non-numeric amounts become fixed text values.
    """
    if isinstance(text, (int, float)):
        return FixedValue(DecimalValue(text))

    if range_match := _RANGE_RE.match(text.strip()):
        low = parse_numeric_value(range_match.group(1))
        high = parse_numeric_value(range_match.group(2))
        if not isinstance(low, TextValue) and not isinstance(high, TextValue):
            return RangeValue(min=low, max=high)

    return FixedValue(parse_numeric_value(text))


# =============================================================================
# Units
# =============================================================================


def parse_unit(text: str | None) -> Unit | None:
    """
    Parse a unit string, reading the integer-protection marker.

    "=large" gives Unit("large", integer_protected=True). Empty strings mean
    there is no unit.
    """
    if not text:
        return None

    name = text.strip()
    protected = name.startswith(INTEGER_PROTECTION_MARKER)
    if protected:
        name = name[len(INTEGER_PROTECTION_MARKER):].strip()

    if not name:
        return None
    return Unit(name, integer_protected=protected)


def parse_quantity(amount: str | int | float, unit: str | None = None) -> Quantity:
    """Build a quantity with an extended unit from raw amount and unit strings."""
    return Quantity(parse_quantity_value(amount), parse_unit(unit))


# =============================================================================
# Combined Measures
# =============================================================================


def split_measure(measure: str) -> tuple[str, str]:
    """
    Split a combined measure string into amount and unit.

    Examples:
        "2 cups" -> ("2", "cups")
        "500g" -> ("500", "g")
        "1 1/2 tsp" -> ("1 1/2", "tsp")
        "salt" -> ("", "salt")
    """
    measure = _expand_vulgar_fractions(measure.strip())
    if not measure:
        return "", ""

    if match := _MEASURE_RE.match(measure):
        return match.group(1).strip(), match.group(2).strip()

    return "", measure


def parse_measure(measure: str) -> Quantity:
    """
    Parse a combined measure like "2 cups" into a quantity.

    A measure with no leading number is taken as a text amount without unit.
    """
    amount, unit = split_measure(measure)
    if not amount:
        return Quantity(FixedValue(TextValue(measure.strip())))
    return parse_quantity(amount, unit)
