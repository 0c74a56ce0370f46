"""Compatibility relations between units."""

from recipequant.models import SpecificUnitSystem, UnitDefinition


def are_units_groupable(u1: UnitDefinition, u2: UnitDefinition) -> bool:
    """
    Check whether two units may be grouped without an explicit link.

    Strict matching: same name in any case, or same type and same system. An ambiguous
    unit also groups with a metric unit of the same type when it defines a
    metric factor. A US cup and a UK cup, or grams and ounces, are only
    grouped when the caller links them in an OrGroup.
    """
    if u1.name.casefold() == u2.name.casefold():
        return True
    if u1.type == "other" or u2.type == "other":
        return False
    if u1.type != u2.type:
        return False
    if u1.system == u2.system:
        return True

    if u1.system == "ambiguous" and u2.system == "metric":
        return bool(u1.to_base_by_system) and "metric" in u1.to_base_by_system
    if u2.system == "ambiguous" and u1.system == "metric":
        return bool(u2.to_base_by_system) and "metric" in u2.to_base_by_system
    return False


def are_units_convertible(u1: UnitDefinition, u2: UnitDefinition) -> bool:
    """
    Check whether two units can be converted into one another.

    Looser than grouping: any two units of the same known type convert,
    whatever their system.
    """
    if u1.name.casefold() == u2.name.casefold():
        return True
    if u1.type == "other" or u2.type == "other":
        return False
    return u1.type == u2.type


def is_unit_compatible_with_system(unit: UnitDefinition, system: SpecificUnitSystem) -> bool:
    """
    Check whether a unit can be used to display amounts in a given system.

    - Units of that system are compatible
    - Ambiguous units are compatible with the systems they define a factor for
    - Metric units are also usable in the JP system
    """
    if unit.system == system:
        return True
    if unit.system == "ambiguous":
        if unit.to_base_by_system:
            return system in unit.to_base_by_system
        return system == "metric"
    return unit.system == "metric" and system == "JP"
