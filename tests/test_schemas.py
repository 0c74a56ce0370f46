"""Tests for recipe input schemas."""

import pytest
from pydantic import ValidationError

from recipequant.schemas import AmountInput, IngredientMention, RecipeIngredients


class TestIngredientMention:
    """Tests for IngredientMention."""

    def test_name_stripped(self):
        """Test that surrounding whitespace is removed from names."""
        assert IngredientMention(name="  Flour ", amount="1").name == "Flour"

    def test_blank_name_rejected(self):
        """Test that a blank name is invalid."""
        with pytest.raises(ValidationError):
            IngredientMention(name="   ", amount="1")

    def test_normalized_name(self):
        """Test that names differing in case and spacing share a key."""
        a = IngredientMention(name="Brown  Sugar", amount="1")
        b = IngredientMention(name="brown sugar", amount="2")
        assert a.normalized_name == b.normalized_name == "brown sugar"

    def test_alternatives_default_empty(self):
        """Test that alternatives are optional."""
        mention = IngredientMention(name="Milk", amount=1, unit="cup")
        assert mention.alternatives == []
        assert mention.amount == 1

    def test_alternatives(self):
        """Test mentions with declared alternatives."""
        mention = IngredientMention(
            name="Milk", amount="1", unit="cup", alternatives=[{"amount": "236", "unit": "ml"}]
        )
        assert mention.alternatives == [AmountInput(amount="236", unit="ml")]


class TestRecipeIngredients:
    """Tests for RecipeIngredients."""

    def test_defaults(self):
        """Test a recipe with no ingredients."""
        recipe = RecipeIngredients(recipe_id="empty")
        assert recipe.ingredients == []
        assert recipe.factor == 1

    @pytest.mark.parametrize("factor", [0, -1])
    def test_factor_must_be_positive(self, factor):
        """Test that non-positive factors are rejected."""
        with pytest.raises(ValidationError):
            RecipeIngredients(recipe_id="bad", factor=factor)
