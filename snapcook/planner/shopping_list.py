"""Categorized shopping list with check-off progress and plain-text export."""

import math
from typing import Annotated, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from snapcook.models.models import IngredientCategory, IngredientPrediction, Recipe
from snapcook.utils.logger import logger

PRODUCE = "Fruits & Vegetables"
PROTEIN = "Meat & Protein"
DAIRY = "Dairy & Alternatives"
PANTRY = "Grains & Pantry"

CATEGORY_FOR_INGREDIENT: dict[Optional[IngredientCategory], str] = {
    IngredientCategory.VEGETABLE: PRODUCE,
    IngredientCategory.FRUIT: PRODUCE,
    IngredientCategory.PROTEIN: PROTEIN,
    IngredientCategory.DAIRY: DAIRY,
    IngredientCategory.GRAIN: PANTRY,
    IngredientCategory.OIL: PANTRY,
    IngredientCategory.SEASONING: PANTRY,
    IngredientCategory.OTHER: PANTRY,
    None: PANTRY,
}


class ShoppingItem(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int
    name: Annotated[str, Field(min_length=1)]
    quantity: str = "1"
    unit: str = ""
    checked: bool = False


def _items(start_id: int, *entries: tuple[str, str, str]) -> list[ShoppingItem]:
    return [
        ShoppingItem(id=start_id + offset, name=name, quantity=quantity, unit=unit)
        for offset, (name, quantity, unit) in enumerate(entries)
    ]


DEFAULT_ITEMS: dict[str, list[ShoppingItem]] = {
    PRODUCE: _items(1, ("Apples", "5", ""), ("Carrots", "1", "bunch"), ("Spinach", "1", "bag"), ("Tomatoes", "4", "")),
    PROTEIN: _items(5, ("Chicken Breast", "1", "lb"), ("Eggs", "12", ""), ("Tofu", "1", "block")),
    DAIRY: _items(8, ("Greek Yogurt", "32", "oz"), ("Almond Milk", "1", "carton"), ("Cheddar Cheese", "8", "oz")),
    PANTRY: _items(
        11, ("Brown Rice", "2", "cups"), ("Quinoa", "1", "cup"), ("Olive Oil", "1", "bottle"), ("Pasta", "1", "box")
    ),
}


class ShoppingList:
    """Items grouped by store category."""

    def __init__(self, items: Optional[Mapping[str, Sequence[ShoppingItem]]] = None) -> None:
        source = DEFAULT_ITEMS if items is None else items
        self.items: dict[str, list[ShoppingItem]] = {category: list(entries) for category, entries in source.items()}

    def all_items(self) -> list[ShoppingItem]:
        return [item for entries in self.items.values() for item in entries]

    def sorted_categories(self) -> list[str]:
        return sorted(self.items)

    def toggle_item(self, category: str, item_id: int) -> ShoppingItem:
        """Flip the checked flag of one item and return the updated item.

        Raises:
            ValueError: If the category or item does not exist.
        """
        if category not in self.items:
            raise ValueError(f"Unknown category: {category}")

        entries = self.items[category]
        for index, item in enumerate(entries):
            if item.id == item_id:
                entries[index] = item.model_copy(update={"checked": not item.checked})
                return entries[index]
        raise ValueError(f"No item {item_id} in {category}")

    def checked_items(self) -> list[ShoppingItem]:
        return [item for item in self.all_items() if item.checked]

    def progress(self) -> int:
        """Percentage of checked items, rounded half up; 0 for an empty list."""
        total = len(self.all_items())
        if total == 0:
            return 0
        return math.floor(len(self.checked_items()) / total * 100 + 0.5)

    def add_item(self, category: str, name: str, quantity: str = "1", unit: str = "") -> ShoppingItem:
        item = ShoppingItem(id=self._next_id(), name=name, quantity=quantity, unit=unit)
        self.items.setdefault(category, []).append(item)
        return item

    def add_recipe(
        self, recipe: Recipe, predictions: Sequence[IngredientPrediction] = ()
    ) -> list[ShoppingItem]:
        """Add a recipe's ingredients, skipping names already on the list.

        Each ingredient goes under the category derived from the matching
        prediction's IngredientCategory ("Grains & Pantry" when unknown).
        """
        categories = {prediction.name.lower(): prediction.category for prediction in predictions}
        present = {item.name.lower() for item in self.all_items()}

        added = []
        for ingredient in recipe.ingredients:
            if ingredient.name.lower() in present:
                continue
            category = CATEGORY_FOR_INGREDIENT[categories.get(ingredient.name.lower())]
            added.append(self.add_item(category, ingredient.name, quantity=ingredient.amount))
            present.add(ingredient.name.lower())

        logger.info(f"Added {len(added)} ingredient(s) from '{recipe.title}' to the shopping list")
        return added

    def export(self) -> str:
        """Plain-text checklist, categories in alphabetical order."""
        lines = []
        for category in self.sorted_categories():
            lines.append(f"{category}:")
            for item in self.items[category]:
                mark = "x" if item.checked else " "
                amount = " ".join(part for part in (item.quantity, item.unit) if part)
                lines.append(f"  [{mark}] {item.name} ({amount})" if amount else f"  [{mark}] {item.name}")
        return "\n".join(lines)

    def _next_id(self) -> int:
        return max((item.id for item in self.all_items()), default=0) + 1
