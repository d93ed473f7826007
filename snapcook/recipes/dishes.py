"""Rule-based dish suggestions for a set of detected ingredients."""

from typing import Iterable

CHICKEN_DISHES = ("Chicken Stir-Fry", "Chicken Fajitas", "Chicken Cacciatore")
TOMATO_GARLIC_DISHES = ("Pasta Sauce", "Bruschetta", "Tomato Soup")
DEFAULT_DISHES = ("Mixed Vegetable Stir-Fry", "Garden Salad", "Vegetable Soup")


def suggest_dishes(ingredient_names: Iterable[str]) -> list[str]:
    """Suggest plausible dishes; matching is case-insensitive.

    Rules are checked in priority order and the first match wins:
    1. chicken breast with bell pepper or tomato
    2. tomato with garlic
    3. default vegetable dishes
    """
    names = {name.strip().lower() for name in ingredient_names}

    if "chicken breast" in names and ("bell pepper" in names or "tomato" in names):
        return list(CHICKEN_DISHES)
    if "tomato" in names and "garlic" in names:
        return list(TOMATO_GARLIC_DISHES)
    return list(DEFAULT_DISHES)
