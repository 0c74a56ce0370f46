"""Unit catalog, compatibility rules and conversion."""

from recipequant.units.compatibility import (
    are_units_convertible,
    are_units_groupable,
    is_unit_compatible_with_system,
)
from recipequant.units.conversion import (
    BestUnit,
    find_best_unit,
    get_base_unit_ratio,
    get_to_base,
    get_unit_ratio,
)
from recipequant.units.definitions import (
    DEFAULT_CATALOG,
    NO_UNIT,
    UNIT_DEFINITIONS,
    UnitCatalog,
    is_no_unit,
    normalize_unit,
    resolve_extended_unit,
    resolve_unit,
)
from recipequant.units.lookup import (
    find_compatible_quantity_within_list,
    find_list_with_compatible_quantity,
)

__all__ = [
    "BestUnit",
    "DEFAULT_CATALOG",
    "NO_UNIT",
    "UNIT_DEFINITIONS",
    "UnitCatalog",
    "are_units_convertible",
    "are_units_groupable",
    "find_best_unit",
    "find_compatible_quantity_within_list",
    "find_list_with_compatible_quantity",
    "get_base_unit_ratio",
    "get_to_base",
    "get_unit_ratio",
    "is_no_unit",
    "is_unit_compatible_with_system",
    "normalize_unit",
    "resolve_extended_unit",
    "resolve_unit",
]
