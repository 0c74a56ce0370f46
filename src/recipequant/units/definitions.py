"""Unit catalog: known units, their types, systems and conversion factors."""

from dataclasses import replace
from types import MappingProxyType
from typing import Iterable

from recipequant.models import FractionPolicy, Unit, UnitDefinition

# Sentinel name used internally for quantities without a unit
NO_UNIT = "__no-unit__"


# =============================================================================
# Unit Definitions
# =============================================================================

# Base units: mass -> g, volume -> ml, count -> piece
UNIT_DEFINITIONS: tuple[UnitDefinition, ...] = (
    # Mass (metric)
    UnitDefinition(
        name="g",
        type="mass",
        system="metric",
        aliases=("gram", "grams", "grammes"),
        to_base=1,
        max_value=999,
    ),
    UnitDefinition(
        name="kg",
        type="mass",
        system="metric",
        aliases=("kilogram", "kilograms", "kilogrammes", "kilos", "kilo"),
        to_base=1000,
    ),
    # Mass (US/UK, identical in both systems)
    UnitDefinition(
        name="oz",
        type="mass",
        system="ambiguous",
        aliases=("ounce", "ounces"),
        to_base=28.3495,
        to_base_by_system={"US": 28.3495, "UK": 28.3495},
        max_value=31,  # 16 oz = 1 lb
        fractions=FractionPolicy(enabled=True, denominators=(2,)),
    ),
    UnitDefinition(
        name="lb",
        type="mass",
        system="ambiguous",
        aliases=("pound", "pounds"),
        to_base=453.592,
        to_base_by_system={"US": 453.592, "UK": 453.592},
        fractions=FractionPolicy(enabled=True, denominators=(2, 4)),
    ),
    # Volume (metric)
    UnitDefinition(
        name="ml",
        type="volume",
        system="metric",
        aliases=("milliliter", "milliliters", "millilitre", "millilitres", "cc"),
        to_base=1,
        max_value=999,
    ),
    UnitDefinition(
        name="cl",
        type="volume",
        system="metric",
        aliases=("centiliter", "centiliters", "centilitre", "centilitres"),
        to_base=10,
        is_best_unit=False,
    ),
    UnitDefinition(
        name="dl",
        type="volume",
        system="metric",
        aliases=("deciliter", "deciliters", "decilitre", "decilitres"),
        to_base=100,
        is_best_unit=False,
    ),
    UnitDefinition(
        name="l",
        type="volume",
        system="metric",
        aliases=("liter", "liters", "litre", "litres"),
        to_base=1000,
    ),
    # Volume (JP)
    UnitDefinition(
        name="go",
        type="volume",
        system="JP",
        aliases=("gou", "goo", "合", "rice cup"),
        to_base=180,
        max_value=10,
    ),
    # Volume (ambiguous: metric/US/UK/JP)
    UnitDefinition(
        name="tsp",
        type="volume",
        system="ambiguous",
        aliases=("teaspoon", "teaspoons"),
        to_base=5,
        to_base_by_system={"metric": 5, "US": 4.929, "UK": 5.919, "JP": 5},
        max_value=5,  # 3 tsp = 1 tbsp
        fractions=FractionPolicy(enabled=True, denominators=(2, 3, 4, 8)),
    ),
    UnitDefinition(
        name="tbsp",
        type="volume",
        system="ambiguous",
        aliases=("tablespoon", "tablespoons"),
        to_base=15,
        to_base_by_system={"metric": 15, "US": 14.787, "UK": 17.758, "JP": 15},
        max_value=4,
        fractions=FractionPolicy(enabled=True),
    ),
    # Volume (ambiguous: US/UK only)
    UnitDefinition(
        name="fl-oz",
        type="volume",
        system="ambiguous",
        aliases=("fluid ounce", "fluid ounces"),
        to_base=29.5735,
        to_base_by_system={"US": 29.5735, "UK": 28.4131},
        max_value=15,
        fractions=FractionPolicy(enabled=True, denominators=(2,)),
    ),
    UnitDefinition(
        name="cup",
        type="volume",
        system="ambiguous",
        aliases=("cups",),
        to_base=236.588,
        to_base_by_system={"US": 236.588, "UK": 284.131},
        max_value=15,
        fractions=FractionPolicy(enabled=True),
    ),
    UnitDefinition(
        name="pint",
        type="volume",
        system="ambiguous",
        aliases=("pints",),
        to_base=473.176,
        to_base_by_system={"US": 473.176, "UK": 568.261},
        max_value=3,  # 2 pints = 1 quart
        fractions=FractionPolicy(enabled=True, denominators=(2,)),
        is_best_unit=False,
    ),
    UnitDefinition(
        name="quart",
        type="volume",
        system="ambiguous",
        aliases=("quarts",),
        to_base=946.353,
        to_base_by_system={"US": 946.353, "UK": 1136.52},
        max_value=3,  # 4 quarts = 1 gallon
        fractions=FractionPolicy(enabled=True, denominators=(2,)),
        is_best_unit=False,
    ),
    UnitDefinition(
        name="gallon",
        type="volume",
        system="ambiguous",
        aliases=("gallons",),
        to_base=3785.41,
        to_base_by_system={"US": 3785.41, "UK": 4546.09},
        fractions=FractionPolicy(enabled=True, denominators=(2,)),
    ),
    # Count
    UnitDefinition(
        name="piece",
        type="count",
        system="metric",
        aliases=("pieces", "pc"),
        to_base=1,
        max_value=999,
    ),
)


# =============================================================================
# Catalog
# =============================================================================


class UnitCatalog:
    """
    Read-only registry of unit definitions.

    Built once from a sequence of definitions and passed to the engine
    functions that need lookups. Names and aliases are matched
    case-insensitively.
    """

    def __init__(self, definitions: Iterable[UnitDefinition]):
        self._definitions = tuple(definitions)
        lookup: dict[str, UnitDefinition] = {}
        for unit in self._definitions:
            lookup[unit.name.lower()] = unit
            for alias in unit.aliases:
                lookup[alias.lower()] = unit
        self._lookup = MappingProxyType(lookup)

    @property
    def definitions(self) -> tuple[UnitDefinition, ...]:
        return self._definitions

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def normalize(self, name: str | None) -> UnitDefinition | None:
        """Look up a unit by name or alias, returning None if unknown."""
        if not name:
            return None
        return self._lookup.get(name.lower().strip())


DEFAULT_CATALOG = UnitCatalog(UNIT_DEFINITIONS)


# =============================================================================
# Resolution
# =============================================================================


def normalize_unit(
    name: str | None, catalog: UnitCatalog = DEFAULT_CATALOG
) -> UnitDefinition | None:
    """Case-insensitive name/alias lookup. Returns None for unknown strings."""
    return catalog.normalize(name)


def resolve_unit(
    name: str | None = None,
    integer_protected: bool = False,
    catalog: UnitCatalog = DEFAULT_CATALOG,
) -> UnitDefinition:
    """
    Resolve a unit name to a definition. Never fails.

    - Known names resolve to their definition, keeping the caller's spelling.
    - Unknown names resolve to a placeholder of type "other" and system "none".
    - An empty or missing name resolves to the NO_UNIT sentinel.
    """
    if not name:
        name = NO_UNIT

    definition = catalog.normalize(name)
    if definition is not None:
        resolved = replace(definition, name=name)
    else:
        resolved = UnitDefinition(name=name, type="other", system="none")

    if integer_protected:
        resolved = replace(resolved, integer_protected=True)
    return resolved


def resolve_extended_unit(
    unit: str | Unit | None, catalog: UnitCatalog = DEFAULT_CATALOG
) -> UnitDefinition:
    """Resolve a plain name or an extended Unit, carrying its integer-protected flag."""
    if unit is None or isinstance(unit, str):
        return resolve_unit(unit, catalog=catalog)
    return resolve_unit(unit.name, unit.integer_protected, catalog=catalog)


def is_no_unit(unit: str | Unit | None) -> bool:
    """Check whether a unit is missing, empty or the NO_UNIT sentinel."""
    if unit is None:
        return True
    name = unit if isinstance(unit, str) else unit.name
    return not name or name == NO_UNIT
