"""Value types for amounts, units and groups of quantities."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, TypeAlias, Union

UnitType = Literal["mass", "volume", "count", "other"]
UnitSystem = Literal["metric", "US", "UK", "JP", "ambiguous", "none"]
SpecificUnitSystem = Literal["metric", "US", "UK", "JP"]


# =============================================================================
# Numeric Values
# =============================================================================


@dataclass(frozen=True)
class DecimalValue:
    """A plain decimal number, e.g. 1.5."""

    value: float


@dataclass(frozen=True)
class FractionValue:
    """An exact fraction, e.g. 1/3. Always kept in lowest terms by the engine."""

    num: int
    den: int


@dataclass(frozen=True)
class TextValue:
    """A free-text amount such as "a pinch". Cannot be used in arithmetic."""

    text: str


NumericValue: TypeAlias = DecimalValue | FractionValue
AnyNumericValue: TypeAlias = DecimalValue | FractionValue | TextValue


@dataclass(frozen=True)
class FixedValue:
    """A single point amount."""

    value: AnyNumericValue


@dataclass(frozen=True)
class RangeValue:
    """An inclusive span like "1-2"."""

    min: NumericValue
    max: NumericValue


QuantityValue: TypeAlias = FixedValue | RangeValue


# =============================================================================
# Units
# =============================================================================


@dataclass(frozen=True)
class FractionPolicy:
    """Whether and how values below one may be shown as simple fractions."""

    enabled: bool = False
    denominators: tuple[int, ...] | None = None
    max_whole: int | None = None


@dataclass(frozen=True)
class Unit:
    """A unit name, optionally pinned by the author as integer-protected."""

    name: str
    integer_protected: bool = False


@dataclass(frozen=True, kw_only=True)
class UnitDefinition(Unit):
    """A fully resolved unit with its type, system and conversion factors."""

    type: UnitType
    system: UnitSystem
    aliases: tuple[str, ...] = ()
    # None for placeholder units that have no known conversion
    to_base: float | None = None
    to_base_by_system: Mapping[str, float] | None = field(default=None, hash=False)
    max_value: float | None = None
    fractions: FractionPolicy | None = None
    is_best_unit: bool = True

    def __post_init__(self) -> None:
        # Resolved copies share this mapping with the catalog entry
        if self.to_base_by_system is not None and not isinstance(
            self.to_base_by_system, MappingProxyType
        ):
            object.__setattr__(
                self, "to_base_by_system", MappingProxyType(dict(self.to_base_by_system))
            )


# =============================================================================
# Quantities and Groups
# =============================================================================


@dataclass(frozen=True)
class Quantity:
    """
    An amount with an optional unit.

    The unit is refined as a value moves through the pipeline:
    - a plain name (str) for caller-facing results
    - an extended Unit carrying the integer-protected flag
    - a resolved UnitDefinition inside the engine
    """

    value: QuantityValue
    unit: Union[str, Unit, UnitDefinition, None] = None

    @property
    def unit_name(self) -> str | None:
        if self.unit is None:
            return None
        if isinstance(self.unit, str):
            return self.unit
        return self.unit.name


@dataclass(frozen=True)
class OrGroup:
    """Alternative expressions of one physical amount, e.g. "1 cup | 236 ml"."""

    quantities: tuple[Union[Quantity, "AndGroup", "OrGroup"], ...]

    def __post_init__(self) -> None:
        if not self.quantities:
            raise ValueError("OrGroup needs at least one quantity")
        object.__setattr__(self, "quantities", tuple(self.quantities))


@dataclass(frozen=True)
class AndGroup:
    """Distinct amounts that must be reported separately."""

    quantities: tuple[Union[Quantity, "OrGroup", "AndGroup"], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantities", tuple(self.quantities))


Group: TypeAlias = OrGroup | AndGroup
QuantityOrGroup: TypeAlias = Quantity | OrGroup | AndGroup


def is_group(item: object) -> bool:
    """Check whether an item is an OrGroup or an AndGroup."""
    return isinstance(item, (OrGroup, AndGroup))
