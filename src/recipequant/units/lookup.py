"""Find quantities with compatible units inside clusters."""

from collections.abc import Sequence

from recipequant.models import Quantity
from recipequant.units.compatibility import are_units_groupable
from recipequant.units.definitions import DEFAULT_CATALOG, UnitCatalog, resolve_extended_unit


def find_list_with_compatible_quantity(
    unit_lists: Sequence[list[Quantity]],
    quantity: Quantity,
    catalog: UnitCatalog = DEFAULT_CATALOG,
) -> list[Quantity] | None:
    """Return the first cluster holding a unit groupable with the quantity's unit."""
    unit = resolve_extended_unit(quantity.unit, catalog)
    for unit_list in unit_lists:
        if any(are_units_groupable(entry.unit, unit) for entry in unit_list):
            return unit_list
    return None


def find_compatible_quantity_within_list(
    quantities: Sequence[Quantity],
    quantity: Quantity,
    catalog: UnitCatalog = DEFAULT_CATALOG,
) -> Quantity | None:
    """Return the first entry with the same unit name in any case, else a groupable one."""
    unit = resolve_extended_unit(quantity.unit, catalog)
    for entry in quantities:
        if entry.unit.name.casefold() == unit.name.casefold():
            return entry
    for entry in quantities:
        if are_units_groupable(entry.unit, unit):
            return entry
    return None
