"""
Combining alternative quantity expressions into one total.

The pipeline behind simplify():
1. Build clusters ("unit lists") of units the input itself declares as
   alternatives of one amount.
2. Reduce every item to one canonical quantity per cluster, keeping
   integer-protected units whole.
3. Sum the reduced quantities into partial totals of groupable units.
4. Re-expand each partial across its cluster so every alternative unit gets
   its equivalent value back.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from fractions import Fraction

from recipequant.errors import IncompatibleUnitsError
from recipequant.logging_config import get_logger
from recipequant.models import (
    AndGroup,
    OrGroup,
    Quantity,
    QuantityOrGroup,
    Unit,
)
from recipequant.numeric import (
    get_average_value,
    get_exact_average_value,
    is_value_integer_like,
    multiply_quantity_value,
)
from recipequant.quantities.mutations import (
    add_quantities,
    de_normalize_quantity,
    get_default_quantity_value,
    to_plain_unit,
)
from recipequant.units.compatibility import are_units_groupable
from recipequant.units.conversion import get_base_unit_ratio, get_unit_ratio
from recipequant.units.definitions import (
    DEFAULT_CATALOG,
    NO_UNIT,
    UnitCatalog,
    is_no_unit,
    resolve_extended_unit,
    resolve_unit,
)
from recipequant.units.lookup import (
    find_compatible_quantity_within_list,
    find_list_with_compatible_quantity,
)

logger = get_logger(__name__)

UnitList = list[Quantity]


def _resolve(q: Quantity, catalog: UnitCatalog) -> Quantity:
    return Quantity(q.value, resolve_extended_unit(q.unit, catalog))


def _extended(value, unit: Unit) -> Quantity:
    if is_no_unit(unit):
        return Quantity(value)
    return Quantity(value, Unit(unit.name, unit.integer_protected))


# =============================================================================
# Step 1: Equivalence Clusters
# =============================================================================


def get_equivalent_unit_lists(
    *items: Quantity | OrGroup, catalog: UnitCatalog = DEFAULT_CATALOG
) -> list[UnitList]:
    """
    Group the units declared as alternatives into clusters.

    Only OrGroups with two or more entries, none of them zero, seed or
    extend a cluster. An OrGroup sharing a groupable unit with an existing
    cluster is merged into it: units the cluster already has keep the
    cluster's values, and new units are scaled by the ratio between the
    shared unit's value in the cluster and in the incoming group.

    Returns new lists; the items passed in are never modified.
    """
    unit_lists: list[UnitList] = []

    for group in items:
        if not isinstance(group, OrGroup) or len(group.quantities) < 2:
            continue
        if any(get_average_value(q.value) == 0 for q in group.quantities):
            logger.debug("Skipping alternatives with a zero amount")
            continue

        resolved = [_resolve(q, catalog) for q in group.quantities]
        linked = next(
            (
                unit_list
                for unit_list in unit_lists
                if any(
                    are_units_groupable(entry.unit, q.unit)
                    for entry in unit_list
                    for q in resolved
                )
            ),
            None,
        )

        if linked is None:
            unit_lists.append(resolved)
            logger.debug(f"New unit cluster: {[q.unit.name for q in resolved]}")
            continue

        anchors: list[Quantity] = []
        ratio = Fraction(1)
        for entry in linked:
            counterpart = next(
                (q for q in resolved if are_units_groupable(q.unit, entry.unit)), None
            )
            if counterpart is not None:
                anchors.append(entry)
                ratio = get_unit_ratio(entry, counterpart)

        for new_q in resolved:
            if any(are_units_groupable(anchor.unit, new_q.unit) for anchor in anchors):
                continue
            linked.append(Quantity(multiply_quantity_value(new_q.value, ratio), new_q.unit))
            logger.debug(f"Merged {new_q.unit.name} into cluster with ratio {float(ratio):.4g}")

    return unit_lists


def _sort_rank(q: Quantity) -> int:
    if q.unit.integer_protected:
        return 0
    if q.unit.system == "none":
        return 1
    return 2


def sort_unit_list(unit_list: Sequence[Quantity]) -> UnitList:
    """
    Order a cluster for reduction and display.

    Integer-protected units come first, then unit-less and unknown units,
    each alphabetically; the remaining units keep their original order.
    """
    priority = sorted(
        (q for q in unit_list if _sort_rank(q) < 2),
        key=lambda q: (_sort_rank(q), q.unit.name.casefold()),
    )
    return priority + [q for q in unit_list if _sort_rank(q) == 2]


# =============================================================================
# Step 2: Canonical Reduction
# =============================================================================


def _convert_through_cluster(q: Quantity, in_list: Quantity, target: Quantity) -> Quantity:
    """Express q in target's unit using the values the cluster pairs together."""
    reference = get_exact_average_value(in_list.value)
    if reference == 0:
        raise IncompatibleUnitsError(q.unit.name, target.unit.name)
    ratio = (
        get_base_unit_ratio(q, in_list) * get_exact_average_value(target.value) / reference
    )
    return multiply_quantity_value(q.value, ratio)


def _reduce_to_quantity(
    first: Quantity, unit_lists: Sequence[UnitList], catalog: UnitCatalog
) -> Quantity:
    cluster = find_list_with_compatible_quantity(unit_lists, first, catalog)
    if cluster is None:
        return _extended(first.value, first.unit)

    equivalents = sort_unit_list(cluster)
    in_list = find_compatible_quantity_within_list(equivalents, first, catalog)

    # Priority 1: the quantity is already in a protected unit
    if in_list.unit.integer_protected or first.unit.integer_protected:
        return _extended(first.value, first.unit)

    # Priority 2: a protected unit into which the quantity converts to a whole number
    for candidate in equivalents:
        if not candidate.unit.integer_protected:
            continue
        value = _convert_through_cluster(first, in_list, candidate)
        if is_value_integer_like(value):
            logger.debug(f"Reduced {first.unit.name} to protected unit {candidate.unit.name}")
            return _extended(value, candidate.unit)

    # Priority 3: the first unit that is not protected
    target = next((q for q in equivalents if not q.unit.integer_protected), None)
    if target is None or target.unit.name == first.unit.name:
        return _extended(first.value, first.unit)
    return _extended(_convert_through_cluster(first, in_list, target), target.unit)


def reduce_ors_to_first_equivalent(
    unit_lists: Sequence[UnitList],
    items: Sequence[Quantity | OrGroup],
    catalog: UnitCatalog = DEFAULT_CATALOG,
) -> list[Quantity]:
    """
    Reduce every item to one canonical quantity.

    OrGroups are represented by their first entry once sorted like a cluster.
    Each quantity is then expressed in the preferred unit of its cluster:
    its own unit if protected, else a protected unit giving a whole number,
    else the cluster's first unprotected unit. Items matching no cluster
    pass through unchanged.
    """
    reduced: list[Quantity] = []
    for item in items:
        if isinstance(item, Quantity):
            first = _resolve(item, catalog)
        else:
            first = sort_unit_list([_resolve(q, catalog) for q in item.quantities])[0]
        reduced.append(_reduce_to_quantity(first, unit_lists, catalog))
    return reduced


# =============================================================================
# Step 3: Summation
# =============================================================================


@dataclass(frozen=True)
class SumResult:
    """Partial totals of a set of items, with the clusters used to reduce them."""

    sum: Quantity | AndGroup
    unit_lists: list[UnitList]


def add_quantities_or_groups(
    *items: Quantity | OrGroup, catalog: UnitCatalog = DEFAULT_CATALOG
) -> SumResult:
    """
    Add quantities and OrGroups into as few partial totals as possible.

    A reduced quantity joins the first partial whose unit is groupable with
    its own, otherwise it starts a new partial. A single partial is returned
    as a Quantity, several as an AndGroup. Units are resolved definitions.

    Raises:
        CannotAddTextValueError: If a text value has to be added.
        IncompatibleUnitsError: If groupable units turn out not to convert.
    """
    if not items:
        return SumResult(
            sum=Quantity(get_default_quantity_value(), resolve_unit(NO_UNIT, catalog=catalog)),
            unit_lists=[],
        )
    if len(items) == 1 and isinstance(items[0], Quantity):
        return SumResult(sum=_resolve(items[0], catalog), unit_lists=[])

    unit_lists = get_equivalent_unit_lists(*items, catalog=catalog)
    reduced = reduce_ors_to_first_equivalent(unit_lists, items, catalog)

    partials: list[Quantity] = []
    for next_q in reduced:
        existing = find_compatible_quantity_within_list(partials, next_q, catalog)
        if existing is None:
            partials.append(_resolve(next_q, catalog))
            continue
        total = add_quantities(existing, next_q, catalog)
        partials[partials.index(existing)] = _resolve(total, catalog)

    logger.debug(
        f"Summed {len(items)} items into {len(partials)} partial(s) over {len(unit_lists)} cluster(s)"
    )
    if len(partials) == 1:
        return SumResult(sum=partials[0], unit_lists=unit_lists)
    return SumResult(sum=AndGroup(tuple(partials)), unit_lists=unit_lists)


# =============================================================================
# Step 4: Re-expansion
# =============================================================================


def regroup_quantities_and_expand_equivalents(
    summed: Quantity | AndGroup,
    unit_lists: Sequence[UnitList],
    catalog: UnitCatalog = DEFAULT_CATALOG,
) -> list[Quantity | OrGroup]:
    """
    Express each partial total again in every unit of its cluster.

    For each cluster, the partials whose units belong to it are its mains.
    Every other unit of the cluster gets the sum of the mains scaled by the
    ratio the cluster records between that unit and each main. A cluster
    with a single representation yields a Quantity; otherwise an OrGroup of
    the mains (an AndGroup when there are several) followed by the
    equivalents. Partials matching no cluster are appended unchanged.
    """
    sum_quantities = list(summed.quantities) if isinstance(summed, AndGroup) else [summed]
    processed: set[int] = set()
    result: list[Quantity | OrGroup] = []

    for unit_list in unit_lists:
        remaining = list(unit_list)
        mains: list[tuple[Quantity, Quantity]] = []

        for index, q in enumerate(sum_quantities):
            if index in processed:
                continue
            match = find_compatible_quantity_within_list(remaining, q, catalog)
            if match is not None:
                processed.add(index)
                mains.append((q, match))
                remaining.remove(match)

        if not mains:
            continue

        equivalents: list[Quantity] = []
        for equiv in sort_unit_list(remaining):
            total = _extended(get_default_quantity_value(), equiv.unit)
            for main, main_in_list in mains:
                contribution = _extended(
                    _convert_through_cluster(main, main_in_list, equiv), equiv.unit
                )
                total = add_quantities(total, contribution, catalog)
            equivalents.append(total)

        if len(mains) + len(equivalents) > 1:
            if len(mains) > 1:
                head = AndGroup(tuple(de_normalize_quantity(main) for main, _ in mains))
            else:
                head = de_normalize_quantity(mains[0][0])
            result.append(OrGroup((head, *equivalents)))
        else:
            result.append(de_normalize_quantity(mains[0][0]))

    for index, q in enumerate(sum_quantities):
        if index not in processed:
            result.append(de_normalize_quantity(q))

    return result


def simplify(
    *items: Quantity | OrGroup, catalog: UnitCatalog = DEFAULT_CATALOG
) -> QuantityOrGroup:
    """
    Combine every mention of one ingredient into a total with plain unit names.

    A single item is returned as is (in plain-unit form), so feeding a
    previous result back in is a no-op. Several independent totals are
    wrapped in an AndGroup.

    Raises:
        CannotAddTextValueError: If a text value has to be added.
        IncompatibleUnitsError: If groupable units turn out not to convert.
    """
    if len(items) == 1:
        return to_plain_unit(items[0])

    summed = add_quantities_or_groups(*items, catalog=catalog)
    regrouped = regroup_quantities_and_expand_equivalents(summed.sum, summed.unit_lists, catalog)
    if len(regrouped) == 1:
        return to_plain_unit(regrouped[0])
    return AndGroup(tuple(to_plain_unit(q) for q in regrouped))
