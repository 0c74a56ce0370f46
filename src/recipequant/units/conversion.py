"""Conversion factors, unit ratios and best-unit selection."""

from dataclasses import dataclass
from fractions import Fraction

from recipequant.errors import IncompatibleUnitsError
from recipequant.logging_config import get_logger
from recipequant.models import (
    Quantity,
    SpecificUnitSystem,
    UnitDefinition,
    UnitType,
)
from recipequant.numeric import (
    DEFAULT_DENOMINATORS,
    DEFAULT_FRACTION_ACCURACY,
    DEFAULT_MAX_WHOLE,
    approximate_fraction,
    get_exact_average_value,
    to_exact,
)
from recipequant.units.compatibility import is_unit_compatible_with_system
from recipequant.units.definitions import DEFAULT_CATALOG, UnitCatalog, resolve_unit

logger = get_logger(__name__)

# Tolerance for treating a converted value as a whole number
INTEGER_EPSILON = 0.01
# Upper bound of a unit's natural display range when it defines none
DEFAULT_MAX_VALUE = 999


# =============================================================================
# Conversion Factors
# =============================================================================


def get_to_base(
    unit: UnitDefinition, system: SpecificUnitSystem | None = None
) -> float | None:
    """
    Get the factor converting a unit to its type's base unit.

    Ambiguous units use their system-specific factor when a system is given
    and they define one; every other case uses the default factor.
    """
    if unit.system == "ambiguous" and system and unit.to_base_by_system:
        return unit.to_base_by_system.get(system, unit.to_base)
    return unit.to_base


def get_base_unit_ratio(q: Quantity, q_ref: Quantity) -> Fraction:
    """Ratio of base factors between two resolved quantities (1 if either has none)."""
    if q.unit.to_base is None or q_ref.unit.to_base is None:
        return Fraction(1)
    return to_exact(q.unit.to_base) / to_exact(q_ref.unit.to_base)


def get_unit_ratio(q1: Quantity, q2: Quantity) -> Fraction:
    """
    Ratio between the physical amounts of two resolved quantities.

    Both values are compared in base units when both units have a base
    factor, and as raw values otherwise.

    Raises:
        CannotAddTextValueError: If either value is text.
    """
    value1 = get_exact_average_value(q1.value)
    value2 = get_exact_average_value(q2.value)
    if value2 == 0:
        raise IncompatibleUnitsError(q1.unit.name, q2.unit.name)
    return value1 * get_base_unit_ratio(q1, q2) / value2


# =============================================================================
# Best Unit Selection
# =============================================================================


@dataclass(frozen=True)
class BestUnit:
    """A unit chosen for display and the value converted into it."""

    unit: UnitDefinition
    value: float


def _from_base(
    value_in_base: float, unit: UnitDefinition, system: SpecificUnitSystem
) -> float:
    to_base = get_to_base(unit, system)
    if to_base is None:
        return value_in_base
    return value_in_base / to_base


def _is_close_to_integer(value: float) -> bool:
    return abs(value - round(value)) < INTEGER_EPSILON


def _get_max_value(unit: UnitDefinition) -> float:
    return unit.max_value if unit.max_value is not None else DEFAULT_MAX_VALUE


def _is_value_in_range(value: float, unit: UnitDefinition) -> bool:
    """
    A value is in range when it lies in [1, max_value], or when it is below 1
    and the unit's fraction policy can show it as a simple fraction.
    """
    if 1 <= value <= _get_max_value(unit):
        return True

    policy = unit.fractions
    if 0 < value < 1 and policy is not None and policy.enabled:
        fraction = approximate_fraction(
            value,
            policy.denominators or DEFAULT_DENOMINATORS,
            DEFAULT_FRACTION_ACCURACY,
            policy.max_whole if policy.max_whole is not None else DEFAULT_MAX_WHOLE,
        )
        return fraction is not None

    return False


def _distance_to_range(candidate: BestUnit) -> float:
    if candidate.value < 1:
        return 1 - candidate.value
    return candidate.value - _get_max_value(candidate.unit)


def find_best_unit(
    value_in_base: float,
    unit_type: UnitType,
    system: SpecificUnitSystem,
    input_units: list[UnitDefinition],
    catalog: UnitCatalog = DEFAULT_CATALOG,
) -> BestUnit:
    """
    Find the most readable unit for displaying an amount.

    Algorithm:
    1. Candidates are catalog units of the same type usable in the system.
       Units flagged is_best_unit=False only qualify when the input used them.
    2. Keep candidates whose converted value is in range.
    3. Prefer, in order: an integer value in the input family, the smallest
       integer value in any family, then the smallest in-range value with
       the input family first.
    4. If nothing is in range, pick the candidate closest to its range.

    Never raises. An empty candidate set falls back to the first input unit,
    or to the NO_UNIT sentinel when there is none. Units without a base
    factor keep the value unconverted.
    """
    input_unit_names = {u.name for u in input_units}
    candidates = [
        unit
        for unit in catalog
        if unit.type == unit_type
        and is_unit_compatible_with_system(unit, system)
        and (unit.is_best_unit or unit.name in input_unit_names)
    ]

    if not candidates:
        fallback = input_units[0] if input_units else resolve_unit(catalog=catalog)
        logger.debug(f"No best-unit candidate for {unit_type}/{system}, keeping {fallback.name}")
        return BestUnit(unit=fallback, value=_from_base(value_in_base, fallback, system))

    with_values = [
        BestUnit(unit=unit, value=_from_base(value_in_base, unit, system)) for unit in candidates
    ]
    in_range = [c for c in with_values if _is_value_in_range(c.value, c.unit)]

    if in_range:
        integers_in_family = [
            c
            for c in in_range
            if _is_close_to_integer(c.value) and c.unit.name in input_unit_names
        ]
        if integers_in_family:
            return min(integers_in_family, key=lambda c: c.value)

        integers_any = [c for c in in_range if _is_close_to_integer(c.value)]
        if integers_any:
            return min(integers_any, key=lambda c: c.value)

        return min(
            in_range,
            key=lambda c: (0 if c.unit.name in input_unit_names else 1, c.value),
        )

    return min(with_values, key=_distance_to_range)
