"""Shopping list aggregation from recipes."""

from dataclasses import dataclass, field
from uuid import uuid4

from recipequant.config import get_settings
from recipequant.errors import CannotAddTextValueError, IncompatibleUnitsError
from recipequant.logging_config import LoggingContext, get_logger
from recipequant.models import (
    AndGroup,
    OrGroup,
    Quantity,
    QuantityOrGroup,
    SpecificUnitSystem,
)
from recipequant.numeric import multiply_quantity_value
from recipequant.quantities.alternatives import simplify
from recipequant.quantities.mutations import (
    FlatEntry,
    apply_best_unit,
    flatten_plain_unit_group,
    to_plain_unit,
)
from recipequant.quantities.parsing import parse_quantity
from recipequant.schemas import IngredientMention, RecipeIngredients
from recipequant.units.definitions import DEFAULT_CATALOG, UnitCatalog

logger = get_logger(__name__)

MentionItem = Quantity | OrGroup


@dataclass
class ShoppingItem:
    """
    One ingredient of the shopping list.

    `lines` holds a single combined total in the usual case. When some
    mentions could not be added together (text amounts such as "a pinch"),
    each group of mentions that could be combined gets its own line.
    """

    name: str
    lines: list[QuantityOrGroup] = field(default_factory=list)
    recipe_sources: list[str] = field(default_factory=list)

    @property
    def is_combined(self) -> bool:
        """Check whether every mention was folded into one total."""
        return len(self.lines) == 1

    @property
    def quantity(self) -> QuantityOrGroup:
        """The total as a single value; separate lines come back as an AndGroup."""
        if self.is_combined:
            return self.lines[0]
        return AndGroup(tuple(self.lines))

    @property
    def entries(self) -> list[FlatEntry]:
        """Every line flattened to primary quantities and their equivalents."""
        return [entry for line in self.lines for entry in flatten_plain_unit_group(line)]

    def display_quantities(
        self,
        system: SpecificUnitSystem | None = None,
        catalog: UnitCatalog = DEFAULT_CATALOG,
    ) -> list[Quantity]:
        """Primary quantities of the item, each re-expressed in its best unit."""
        settings = get_settings()
        return [
            apply_best_unit(
                q,
                system,
                catalog,
                precision=settings.output_precision,
                accuracy=settings.fraction_accuracy,
            )
            for entry in self.entries
            for q in entry.primary
        ]


class ShoppingList:
    """
    Combines the ingredients of several recipes into one list.

    Mentions of the same ingredient (matched by normalized name) are scaled
    by their recipe's factor and combined with simplify(). The list is
    recomputed after recipes are added or removed.
    """

    def __init__(
        self,
        system: SpecificUnitSystem | None = None,
        catalog: UnitCatalog = DEFAULT_CATALOG,
    ):
        self.system = system if system is not None else get_settings().default_unit_system
        self.catalog = catalog
        self.recipes: list[RecipeIngredients] = []
        self._items: list[ShoppingItem] | None = None

    def add_recipe(self, recipe: RecipeIngredients) -> None:
        """Add a recipe's ingredients to the list."""
        self.recipes.append(recipe)
        self._items = None
        with LoggingContext(recipe_id=recipe.recipe_id):
            logger.info(
                f"Added recipe {recipe.recipe_id} "
                f"({len(recipe.ingredients)} ingredients, factor {recipe.factor})"
            )

    def remove_recipe(self, index: int) -> RecipeIngredients:
        """
        Remove the recipe at a position and return it.

        Raises:
            IndexError: If no recipe exists at that position.
        """
        if not 0 <= index < len(self.recipes):
            raise IndexError(f"Recipe index {index} out of range")
        recipe = self.recipes.pop(index)
        self._items = None
        logger.info(f"Removed recipe {recipe.recipe_id}")
        return recipe

    @property
    def items(self) -> list[ShoppingItem]:
        """Shopping items in order of first mention."""
        if self._items is None:
            self._items = self._compute_items()
        return self._items

    def display(self) -> list[tuple[str, list[Quantity]]]:
        """Item names with their quantities in best units for the list's system."""
        return [
            (item.name, item.display_quantities(self.system, self.catalog))
            for item in self.items
        ]

    # =========================================================================
    # Aggregation
    # =========================================================================

    def _compute_items(self) -> list[ShoppingItem]:
        mentions: dict[str, list[MentionItem]] = {}
        names: dict[str, str] = {}
        sources: dict[str, list[str]] = {}

        for recipe in self.recipes:
            with LoggingContext(recipe_id=recipe.recipe_id):
                for mention in recipe.ingredients:
                    key = mention.normalized_name
                    names.setdefault(key, mention.name)
                    mentions.setdefault(key, []).append(_mention_to_item(mention, recipe.factor))
                    recipe_sources = sources.setdefault(key, [])
                    if recipe.recipe_id not in recipe_sources:
                        recipe_sources.append(recipe.recipe_id)
                logger.debug(f"Parsed {len(recipe.ingredients)} mentions")

        items = []
        with LoggingContext(computation_id=uuid4().hex):
            for key, ingredient_mentions in mentions.items():
                with LoggingContext(ingredient=key):
                    lines = self._combine(ingredient_mentions)
                items.append(
                    ShoppingItem(name=names[key], lines=lines, recipe_sources=sources[key])
                )

            logger.info(
                f"Computed shopping list: {len(items)} items from {len(self.recipes)} recipes"
            )
        return items

    def _combine(self, ingredient_mentions: list[MentionItem]) -> list[QuantityOrGroup]:
        try:
            return [simplify(*ingredient_mentions, catalog=self.catalog)]
        except (CannotAddTextValueError, IncompatibleUnitsError) as e:
            logger.warning(f"Listing amounts separately: {e}")
            return self._combine_separately(ingredient_mentions)

    def _combine_separately(self, ingredient_mentions: list[MentionItem]) -> list[QuantityOrGroup]:
        """Fold mentions one by one, starting a new line for each that fits no existing one."""
        lines: list[tuple[list[MentionItem], QuantityOrGroup]] = []

        for mention in ingredient_mentions:
            for index, (members, _) in enumerate(lines):
                try:
                    total = simplify(*members, mention, catalog=self.catalog)
                except (CannotAddTextValueError, IncompatibleUnitsError):
                    continue
                lines[index] = ([*members, mention], total)
                break
            else:
                lines.append(([mention], to_plain_unit(mention)))

        return [total for _, total in lines]


def _mention_to_item(mention: IngredientMention, factor: float) -> MentionItem:
    """Turn a mention into a quantity, or an OrGroup when it lists alternatives."""
    quantities = [parse_quantity(mention.amount, mention.unit)]
    quantities.extend(parse_quantity(alt.amount, alt.unit) for alt in mention.alternatives)

    if factor != 1:
        quantities = [Quantity(multiply_quantity_value(q.value, factor), q.unit) for q in quantities]

    if len(quantities) == 1:
        return quantities[0]
    return OrGroup(tuple(quantities))
