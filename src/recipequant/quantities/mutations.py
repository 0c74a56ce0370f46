"""Adding quantities and moving them between unit refinement levels."""

from dataclasses import dataclass

from recipequant.errors import CannotAddTextValueError, IncompatibleUnitsError
from recipequant.logging_config import get_logger
from recipequant.models import (
    AndGroup,
    DecimalValue,
    FixedValue,
    OrGroup,
    Quantity,
    QuantityOrGroup,
    QuantityValue,
    RangeValue,
    SpecificUnitSystem,
    TextValue,
    Unit,
    UnitDefinition,
)
from recipequant.numeric import (
    DEFAULT_FRACTION_ACCURACY,
    add_numeric_values,
    format_output_value,
    get_average_value,
    get_numeric_value,
    multiply_quantity_value,
    to_exact,
)
from recipequant.units.compatibility import are_units_convertible
from recipequant.units.conversion import find_best_unit, get_to_base
from recipequant.units.definitions import (
    DEFAULT_CATALOG,
    UnitCatalog,
    is_no_unit,
    resolve_extended_unit,
)

logger = get_logger(__name__)


# =============================================================================
# Quantity Values
# =============================================================================


def get_default_quantity_value() -> FixedValue:
    """The neutral value for addition: a fixed zero."""
    return FixedValue(DecimalValue(0))


def _is_text(value: QuantityValue) -> bool:
    return isinstance(value, FixedValue) and isinstance(value.value, TextValue)


def add_quantity_values(v1: QuantityValue, v2: QuantityValue) -> QuantityValue:
    """
    Add two quantity values.

    - Two fixed values add up to a fixed value.
    - If either side is a range, the other becomes [v, v] and the result is a range.

    Raises:
        CannotAddTextValueError: If either value is text.
    """
    if _is_text(v1) or _is_text(v2):
        raise CannotAddTextValueError()

    if isinstance(v1, FixedValue) and isinstance(v2, FixedValue):
        return FixedValue(add_numeric_values(v1.value, v2.value))

    r1 = v1 if isinstance(v1, RangeValue) else RangeValue(min=v1.value, max=v1.value)
    r2 = v2 if isinstance(v2, RangeValue) else RangeValue(min=v2.value, max=v2.value)
    return RangeValue(
        min=add_numeric_values(r1.min, r2.min),
        max=add_numeric_values(r1.max, r2.max),
    )


def convert_quantity_value(
    value: QuantityValue, unit_def: UnitDefinition, target_def: UnitDefinition
) -> QuantityValue:
    """Convert a value from one unit to another of the same type."""
    if unit_def.name == target_def.name:
        return value
    factor = to_exact(unit_def.to_base) / to_exact(target_def.to_base)
    return multiply_quantity_value(value, factor)


# =============================================================================
# Adding Quantities
# =============================================================================


def _extended_unit(unit: str | Unit | None) -> Unit | None:
    """Bring any unit level down to an extended Unit, or None when there is no unit."""
    if is_no_unit(unit):
        return None
    if isinstance(unit, str):
        return Unit(unit)
    return Unit(unit.name, unit.integer_protected)


def add_quantities(
    q1: Quantity, q2: Quantity, catalog: UnitCatalog = DEFAULT_CATALOG
) -> Quantity:
    """
    Add two quantities, converting units when needed.

    Rules, in order:
    1. A text value on either side cannot be added.
    2. If one side has no unit, the result takes the other side's unit.
    3. Same unit name (case-insensitive): values are added directly.
    4. Known units of the same type:
       - different systems are converted to the largest metric unit of that type
       - the same system is converted to the larger of the two units
    5. Anything else is incompatible.

    Raises:
        CannotAddTextValueError: If either value is text.
        IncompatibleUnitsError: If the units cannot be converted into one another.
    """
    v1, v2 = q1.value, q2.value
    if _is_text(v1) or _is_text(v2):
        raise CannotAddTextValueError()

    unit1 = _extended_unit(q1.unit)
    unit2 = _extended_unit(q2.unit)

    if unit1 is None or unit2 is None:
        return Quantity(add_quantity_values(v1, v2), unit1 or unit2)

    if unit1.name.casefold() == unit2.name.casefold():
        return Quantity(add_quantity_values(v1, v2), unit1)

    unit1_def = catalog.normalize(unit1.name)
    unit2_def = catalog.normalize(unit2.name)
    if unit1_def is None or unit2_def is None:
        raise IncompatibleUnitsError(unit1.name, unit2.name)

    if not are_units_convertible(unit1_def, unit2_def):
        raise IncompatibleUnitsError(
            f"{unit1_def.type} ({unit1.name})", f"{unit2_def.type} ({unit2.name})"
        )

    if unit1_def.system != unit2_def.system:
        metric_units = [
            u for u in catalog if u.type == unit1_def.type and u.system == "metric"
        ]
        if not metric_units:
            raise IncompatibleUnitsError(unit1.name, unit2.name)
        target_def = max(metric_units, key=lambda u: u.to_base)
    else:
        target_def = unit1_def if unit1_def.to_base >= unit2_def.to_base else unit2_def

    converted1 = convert_quantity_value(v1, unit1_def, target_def)
    converted2 = convert_quantity_value(v2, unit2_def, target_def)
    target_unit = Unit(
        target_def.name,
        integer_protected=unit1.integer_protected or unit2.integer_protected,
    )
    logger.debug(f"Added {unit1.name} and {unit2.name} as {target_def.name}")
    return Quantity(add_quantity_values(converted1, converted2), target_unit)


# =============================================================================
# Unit Refinement Levels
# =============================================================================


def to_plain_unit(item: QuantityOrGroup) -> QuantityOrGroup:
    """Convert every unit in a quantity or group to its plain name."""
    if isinstance(item, OrGroup):
        return OrGroup(tuple(to_plain_unit(q) for q in item.quantities))
    if isinstance(item, AndGroup):
        return AndGroup(tuple(to_plain_unit(q) for q in item.quantities))
    if is_no_unit(item.unit):
        return Quantity(item.value)
    return Quantity(item.value, item.unit_name)


def to_extended_unit(item: QuantityOrGroup) -> QuantityOrGroup:
    """Convert every plain unit name in a quantity or group to an extended Unit."""
    if isinstance(item, OrGroup):
        return OrGroup(tuple(to_extended_unit(q) for q in item.quantities))
    if isinstance(item, AndGroup):
        return AndGroup(tuple(to_extended_unit(q) for q in item.quantities))
    return Quantity(item.value, _extended_unit(item.unit))


def normalize_all_units(
    item: QuantityOrGroup, catalog: UnitCatalog = DEFAULT_CATALOG
) -> QuantityOrGroup:
    """Resolve every unit in a quantity or group to its definition."""
    if isinstance(item, OrGroup):
        return OrGroup(tuple(normalize_all_units(q, catalog) for q in item.quantities))
    if isinstance(item, AndGroup):
        return AndGroup(tuple(normalize_all_units(q, catalog) for q in item.quantities))
    return Quantity(item.value, resolve_extended_unit(item.unit, catalog))


def de_normalize_quantity(q: Quantity) -> Quantity:
    """Drop a resolved unit back to an extended Unit (no unit for the sentinel)."""
    if is_no_unit(q.unit):
        return Quantity(q.value)
    return Quantity(q.value, Unit(q.unit_name))


# =============================================================================
# Best Unit
# =============================================================================


def _infer_system(unit_def: UnitDefinition) -> SpecificUnitSystem:
    if unit_def.system in ("metric", "JP"):
        return unit_def.system
    return "US"


def apply_best_unit(
    q: Quantity,
    system: SpecificUnitSystem | None = None,
    catalog: UnitCatalog = DEFAULT_CATALOG,
    precision: int = 3,
    accuracy: float = DEFAULT_FRACTION_ACCURACY,
) -> Quantity:
    """
    Re-express a quantity in its most readable unit.

    Quantities without a unit, with an unknown unit, or with a text value are
    returned unchanged. When no system is given it is inferred from the unit:
    metric and JP units stay in their system, everything else uses US.
    The new value is a simple fraction when the unit allows one, otherwise a
    decimal rounded to `precision` significant digits.
    """
    if is_no_unit(q.unit):
        return q

    unit_def = catalog.normalize(q.unit_name)
    if unit_def is None or unit_def.type == "other" or unit_def.to_base is None:
        return q

    average = get_average_value(q.value)
    if isinstance(average, str):
        return q

    effective_system = system or _infer_system(unit_def)
    to_base = get_to_base(unit_def, effective_system)
    best = find_best_unit(average * to_base, unit_def.type, effective_system, [unit_def], catalog)

    if best.unit.name == unit_def.name:
        return q

    best_unit: str | Unit = best.unit.name if isinstance(q.unit, str) else Unit(best.unit.name)

    if isinstance(q.value, RangeValue):
        factor = to_base / get_to_base(best.unit, effective_system)

        def convert_bound(bound):
            return format_output_value(
                get_numeric_value(bound) * factor, best.unit, precision, accuracy
            )

        return Quantity(
            RangeValue(min=convert_bound(q.value.min), max=convert_bound(q.value.max)),
            best_unit,
        )

    value = format_output_value(best.value, best.unit, precision, accuracy)
    return Quantity(FixedValue(value), best_unit)


# =============================================================================
# Flattening
# =============================================================================


@dataclass(frozen=True)
class FlatEntry:
    """
    One line of a simplified result.

    `primary` holds a single quantity, or several distinct amounts that share
    the `equivalents` (e.g. "2 large + 2 small, or 2.5 cups").
    """

    primary: tuple[Quantity, ...]
    equivalents: tuple[Quantity, ...] = ()


def flatten_plain_unit_group(summed: QuantityOrGroup) -> list[FlatEntry]:
    """Turn the output of simplify() into flat primary/equivalents entries."""
    if isinstance(summed, Quantity):
        return [FlatEntry((summed,))]

    if isinstance(summed, OrGroup):
        and_group = next((e for e in summed.quantities if isinstance(e, AndGroup)), None)
        plain = tuple(e for e in summed.quantities if isinstance(e, Quantity))

        if and_group is not None:
            primaries = tuple(e for e in and_group.quantities if isinstance(e, Quantity))
            if plain:
                return [FlatEntry(primaries, plain)]
            return [FlatEntry((p,)) for p in primaries]

        if plain:
            return [FlatEntry(plain[:1], plain[1:])]
        return []

    primaries: list[Quantity] = []
    equivalents: list[Quantity] = []
    for entry in summed.quantities:
        if isinstance(entry, OrGroup):
            alternatives = [e for e in entry.quantities if isinstance(e, Quantity)]
            primaries.extend(alternatives[:1])
            equivalents.extend(alternatives[1:])
        elif isinstance(entry, Quantity):
            primaries.append(entry)

    if not equivalents:
        return [FlatEntry((p,)) for p in primaries]
    return [FlatEntry(tuple(primaries), tuple(equivalents))]
