"""Pytest configuration and shared fixtures."""

import logging

import pytest

from recipequant.config import get_settings
from recipequant.logging_config import clear_context
from recipequant.schemas import AmountInput, IngredientMention, RecipeIngredients

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate every test from RECIPEQUANT_* variables and the settings cache."""
    for name in (
        "RECIPEQUANT_ENVIRONMENT",
        "RECIPEQUANT_LOG_LEVEL",
        "RECIPEQUANT_DEFAULT_UNIT_SYSTEM",
        "RECIPEQUANT_FRACTION_ACCURACY",
        "RECIPEQUANT_OUTPUT_PRECISION",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    clear_context()


@pytest.fixture
def restore_root_logger():
    """Put the root logger's handlers and level back after configure_logging()."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


# =============================================================================
# Recipe Fixtures
# =============================================================================


@pytest.fixture
def pancakes():
    """Pancake recipe using metric and US units with declared alternatives."""
    return RecipeIngredients(
        recipe_id="pancakes",
        ingredients=[
            IngredientMention(name="Flour", amount="500", unit="g"),
            IngredientMention(
                name="Milk",
                amount="1",
                unit="cup",
                alternatives=[AmountInput(amount="236", unit="ml")],
            ),
            IngredientMention(name="Eggs", amount="2"),
            IngredientMention(name="Salt", amount="a pinch"),
        ],
    )


@pytest.fixture
def bread():
    """Bread recipe sharing flour and milk with the pancakes."""
    return RecipeIngredients(
        recipe_id="bread",
        ingredients=[
            IngredientMention(name="flour", amount="1", unit="kg"),
            IngredientMention(
                name="milk",
                amount="2",
                unit="cups",
                alternatives=[AmountInput(amount="473", unit="ml")],
            ),
            IngredientMention(name="Yeast", amount="1 1/2", unit="tsp"),
        ],
    )


@pytest.fixture
def omelette():
    """Omelette recipe whose egg amount cannot be added to a number."""
    return RecipeIngredients(
        recipe_id="omelette",
        ingredients=[
            IngredientMention(name="eggs", amount="some"),
            IngredientMention(name="Salt", amount="1", unit="tsp"),
        ],
    )
