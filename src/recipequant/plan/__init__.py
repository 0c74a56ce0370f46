"""Shopping list aggregation."""

from recipequant.plan.shopping_list import ShoppingItem, ShoppingList

__all__ = [
    "ShoppingItem",
    "ShoppingList",
]
