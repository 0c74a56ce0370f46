"""Combining, converting and parsing ingredient quantities."""

from recipequant.quantities.alternatives import (
    SumResult,
    add_quantities_or_groups,
    get_equivalent_unit_lists,
    reduce_ors_to_first_equivalent,
    regroup_quantities_and_expand_equivalents,
    simplify,
    sort_unit_list,
)
from recipequant.quantities.mutations import (
    FlatEntry,
    add_quantities,
    add_quantity_values,
    apply_best_unit,
    convert_quantity_value,
    de_normalize_quantity,
    flatten_plain_unit_group,
    get_default_quantity_value,
    normalize_all_units,
    to_extended_unit,
    to_plain_unit,
)
from recipequant.quantities.parsing import (
    parse_measure,
    parse_numeric_value,
    parse_quantity,
    parse_quantity_value,
    parse_unit,
    split_measure,
)

__all__ = [
    "FlatEntry",
    "SumResult",
    "add_quantities",
    "add_quantities_or_groups",
    "add_quantity_values",
    "apply_best_unit",
    "convert_quantity_value",
    "de_normalize_quantity",
    "flatten_plain_unit_group",
    "get_default_quantity_value",
    "get_equivalent_unit_lists",
    "normalize_all_units",
    "parse_measure",
    "parse_numeric_value",
    "parse_quantity",
    "parse_quantity_value",
    "parse_unit",
    "reduce_ors_to_first_equivalent",
    "regroup_quantities_and_expand_equivalents",
    "simplify",
    "sort_unit_list",
    "split_measure",
    "to_extended_unit",
    "to_plain_unit",
]
