"""Input schemas for recipes fed to the shopping-list aggregator."""

from pydantic import BaseModel, Field, field_validator


class AmountInput(BaseModel):
    """A raw amount with its unit, as written in a recipe."""

    amount: str | float
    unit: str | None = Field(None, description='Unit name; a leading "=" keeps amounts whole')


class IngredientMention(AmountInput):
    """One mention of an ingredient in a recipe."""

    name: str
    alternatives: list[AmountInput] = Field(
        default_factory=list,
        description="Other expressions of the same amount, e.g. 236 ml for 1 cup",
    )

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Ingredient name cannot be blank")
        return value.strip()

    @property
    def normalized_name(self) -> str:
        """Key used to combine mentions of the same ingredient."""
        return " ".join(self.name.lower().split())


class RecipeIngredients(BaseModel):
    """The ingredient mentions of one recipe and the factor to scale them by."""

    recipe_id: str
    ingredients: list[IngredientMention] = Field(default_factory=list)
    factor: float = Field(1, gt=0, description="Scaling factor, e.g. 2 to double the recipe")
