"""Preference-aware recipe generation from detected ingredients.

The generator is a deterministic template: the goal picks a title variant and
a macro profile, the ingredient categories pick the cooking steps. Nothing is
looked up or learned.
"""

import asyncio
from typing import NamedTuple, Optional, Sequence

from snapcook.models.models import (
    Goal,
    IngredientCategory,
    IngredientPrediction,
    NutritionalPreference,
    NutritionInfo,
    Recipe,
    RecipeIngredient,
)
from snapcook.utils.config import config
from snapcook.utils.errors import GenerationError
from snapcook.utils.logger import logger

DEFAULT_RECIPE_IMAGE_URL = "https://images.unsplash.com/photo-1465146344425-f00d5f5c8f07"
DEFAULT_SERVINGS = 2
MAX_TITLE_LENGTH = 200
MAX_COOKING_TIME = 1440


class GoalProfile(NamedTuple):
    title_prefix: str
    dish_style: str
    calories: float
    protein: float
    carbs: float
    fat: float
    finishing_step: str


WEIGHT_LOSS_PROFILE = GoalProfile(
    "Light", "Salad Bowl", 350, 30, 25, 12,
    "Serve over a bed of leafy greens and skip heavy sauces.",
)
MUSCLE_BUILDING_PROFILE = GoalProfile(
    "High-Protein", "Power Bowl", 550, 45, 40, 18,
    "Add an extra portion of lean protein before serving.",
)
WEIGHT_GAIN_PROFILE = GoalProfile(
    "Hearty", "Skillet", 750, 35, 80, 30,
    "Serve with rice or crusty bread and finish with a drizzle of olive oil.",
)
MAINTENANCE_PROFILE = GoalProfile(
    "Balanced", "Stir-Fry", 500, 28, 50, 18,
    "Serve with a side of whole grains.",
)

# (amount, multiplier applied to the prediction's per-portion calories)
PORTIONS: dict[Optional[IngredientCategory], tuple[str, float]] = {
    IngredientCategory.VEGETABLE: ("1 cup", 1.0),
    IngredientCategory.PROTEIN: ("200 g", 2.0),
    IngredientCategory.SEASONING: ("1 tsp", 1.0),
    IngredientCategory.OIL: ("1 tbsp", 1.0),
    IngredientCategory.GRAIN: ("1 cup", 1.0),
    IngredientCategory.DAIRY: ("1/2 cup", 1.0),
    IngredientCategory.FRUIT: ("1 piece", 1.0),
    IngredientCategory.OTHER: ("to taste", 1.0),
    None: ("to taste", 1.0),
}

OTHER_CATEGORIES = (
    IngredientCategory.GRAIN,
    IngredientCategory.DAIRY,
    IngredientCategory.FRUIT,
    IngredientCategory.OTHER,
    None,
)


def select_goal_profile(goal: Goal) -> GoalProfile:
    """Exactly one profile applies; checked in priority order."""
    if goal is Goal.WEIGHT_LOSS:
        return WEIGHT_LOSS_PROFILE
    if goal is Goal.MUSCLE_BUILDING:
        return MUSCLE_BUILDING_PROFILE
    if goal is Goal.WEIGHT_GAIN:
        return WEIGHT_GAIN_PROFILE
    return MAINTENANCE_PROFILE


def _join_names(names: Sequence[str]) -> str:
    """'a', 'a and b', 'a, b and c'."""
    names = [name.lower() for name in names]
    if len(names) <= 1:
        return "".join(names)
    return f"{', '.join(names[:-1])} and {names[-1]}"


def _is_allergen(name: str, allergies: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(allergy.lower() in lowered for allergy in allergies)


def target_nutrition(profile: GoalProfile, preferences: NutritionalPreference) -> NutritionInfo:
    """Per-serving macros for a goal profile.

    `calorie_target` replaces the profile calories and scales its macros;
    `macro_ratios` derives grams from calories instead (4 kcal/g protein and
    carbs, 9 kcal/g fat).
    """
    calories = float(preferences.calorie_target or profile.calories)

    if preferences.macro_ratios is not None:
        ratios = preferences.macro_ratios
        protein = calories * ratios.protein / 100 / 4
        carbs = calories * ratios.carbs / 100 / 4
        fat = calories * ratios.fat / 100 / 9
    else:
        scale = calories / profile.calories
        protein = profile.protein * scale
        carbs = profile.carbs * scale
        fat = profile.fat * scale

    return NutritionInfo(
        calories=round(calories),
        protein=round(protein, 1),
        carbs=round(carbs, 1),
        fat=round(fat, 1),
    )


def build_instructions(ingredients: Sequence[IngredientPrediction], profile: GoalProfile) -> list[str]:
    """Cooking steps; count and order depend only on the ingredients and the goal."""

    def names_in(*categories) -> list[str]:
        return [ingredient.name for ingredient in ingredients if ingredient.category in categories]

    oils = names_in(IngredientCategory.OIL)
    proteins = names_in(IngredientCategory.PROTEIN)
    vegetables = names_in(IngredientCategory.VEGETABLE)
    seasonings = names_in(IngredientCategory.SEASONING)
    others = names_in(*OTHER_CATEGORIES)

    if ingredients:
        steps = [f"Wash and prepare the ingredients: {_join_names([i.name for i in ingredients])}."]
    else:
        steps = ["Gather a selection of fresh vegetables."]

    steps.append(
        f"Heat the {_join_names(oils)} in a large pan over medium heat."
        if oils
        else "Heat a large non-stick pan over medium heat."
    )
    if proteins:
        steps.append(f"Cook the {_join_names(proteins)} until golden and cooked through, then set aside.")
    if vegetables:
        steps.append(f"Add the {_join_names(vegetables)} and sauté until tender, about 5-7 minutes.")
    if seasonings:
        steps.append(f"Stir in the {_join_names(seasonings)} and cook for 1 minute until fragrant.")
    if others:
        steps.append(f"Fold in the {_join_names(others)} and warm through.")
    if proteins:
        steps.append("Return the protein to the pan and toss everything together.")
    steps.append(profile.finishing_step)
    steps.append(f"Divide into {DEFAULT_SERVINGS} portions and serve warm.")
    return steps


def build_title(ingredients: Sequence[IngredientPrediction], profile: GoalProfile) -> str:
    """Goal prefix, the first two ingredient names and the dish style.

    Long ingredient names are cut so the title stays within MAX_TITLE_LENGTH.
    """
    main = " & ".join(i.name for i in ingredients[:2]) or "Garden"
    room = MAX_TITLE_LENGTH - len(profile.title_prefix) - len(profile.dish_style) - 2
    if len(main) > room:
        main = main[:room].rstrip(" &")
    return f"{profile.title_prefix} {main} {profile.dish_style}"


def build_tags(ingredients: Sequence[IngredientPrediction], preferences: NutritionalPreference) -> list[str]:
    """Goal, dietary restrictions and ingredient categories, de-duplicated in first-seen order."""
    tags = [preferences.goal.value, *preferences.dietary_restrictions]
    tags.extend(ingredient.category.value for ingredient in ingredients if ingredient.category is not None)
    return list(dict.fromkeys(tags))


class RecipeGenerator:
    """Builds a Recipe from detected ingredients and nutritional preferences."""

    def __init__(self, delay: Optional[float] = None) -> None:
        """Initialize generator.

        Args:
            delay: Simulated generation latency in seconds. Default: GENERATION_DELAY_SECONDS.
        """
        self.delay = config.GENERATION_DELAY_SECONDS if delay is None else delay

    async def generate(
        self,
        ingredients: Sequence[IngredientPrediction],
        preferences: Optional[NutritionalPreference] = None,
    ) -> Recipe:
        """Generate a recipe.

        Ingredients matching an allergy are left out of the recipe.

        Raises:
            GenerationError: If the recipe record cannot be built.
        """
        preferences = preferences or NutritionalPreference(goal=config.DEFAULT_GOAL)
        await asyncio.sleep(self.delay)

        try:
            recipe = self._build(ingredients, preferences)
        except Exception as e:
            logger.error(f"Recipe generation failed: {e}")
            raise GenerationError("Could not generate a recipe from the detected ingredients") from e

        logger.info(f"Generated recipe '{recipe.title}' for goal {preferences.goal.value}")
        return recipe

    def _build(self, ingredients: Sequence[IngredientPrediction], preferences: NutritionalPreference) -> Recipe:
        usable = [i for i in ingredients if not _is_allergen(i.name, preferences.allergies)]
        if len(usable) < len(ingredients):
            logger.debug(f"Left out {len(ingredients) - len(usable)} ingredient(s) matching allergies")

        profile = select_goal_profile(preferences.goal)
        title = build_title(usable, profile)

        recipe_ingredients = []
        for ingredient in usable:
            amount, multiplier = PORTIONS.get(ingredient.category, PORTIONS[None])
            base_calories = ingredient.nutritional_value.calories if ingredient.nutritional_value else 0.0
            recipe_ingredients.append(
                RecipeIngredient(name=ingredient.name, amount=amount, calories=round(base_calories * multiplier, 1))
            )

        return Recipe(
            title=title,
            ingredients=recipe_ingredients,
            instructions=build_instructions(usable, profile),
            nutritional_info=target_nutrition(profile, preferences),
            cooking_time=min(15 + 5 * len(usable), MAX_COOKING_TIME),
            servings=DEFAULT_SERVINGS,
            difficulty="Easy" if len(usable) <= 4 else "Medium",
            tags=build_tags(usable, preferences),
            image_url=DEFAULT_RECIPE_IMAGE_URL,
        )
