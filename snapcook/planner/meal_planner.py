"""Weekly meal planner.

A plan maps weekday → meal type → selected meal (or None when cleared).
"""

import asyncio
import random
from typing import Annotated, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from snapcook.utils.config import config
from snapcook.utils.logger import logger

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


class Meal(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: Annotated[str, Field(min_length=1)]
    calories: Annotated[int, Field(ge=0)]
    type: Annotated[str, Field(description="One of MEAL_TYPES")]


def _meals(meal_type: str, *entries: tuple[str, int]) -> tuple[Meal, ...]:
    return tuple(
        Meal(id=index, name=name, calories=calories, type=meal_type)
        for index, (name, calories) in enumerate(entries, start=1)
    )


MEAL_OPTIONS: dict[str, tuple[Meal, ...]] = {
    "breakfast": _meals(
        "breakfast",
        ("Greek Yogurt with Honey and Berries", 280),
        ("Avocado Toast with Egg", 320),
        ("Overnight Oats with Fruit", 340),
        ("Spinach and Mushroom Omelet", 290),
    ),
    "lunch": _meals(
        "lunch",
        ("Chicken Caesar Salad", 380),
        ("Quinoa Bowl with Roasted Vegetables", 410),
        ("Turkey and Avocado Wrap", 450),
        ("Lentil Soup with Whole Grain Bread", 350),
    ),
    "dinner": _meals(
        "dinner",
        ("Grilled Salmon with Asparagus", 420),
        ("Stir-Fried Tofu with Vegetables", 380),
        ("Spaghetti with Turkey Meatballs", 490),
        ("Baked Chicken with Sweet Potato", 450),
    ),
    "snack": _meals(
        "snack",
        ("Apple with Almond Butter", 200),
        ("Greek Yogurt with Berries", 150),
        ("Trail Mix", 180),
        ("Carrot Sticks with Hummus", 120),
    ),
}


class MealPlanner:
    """Holds one weekly plan and the meal options it is built from."""

    def __init__(
        self,
        options: Optional[Mapping[str, Sequence[Meal]]] = None,
        delay: Optional[float] = None,
    ) -> None:
        self.options = dict(MEAL_OPTIONS if options is None else options)
        self.delay = config.MEAL_PLAN_DELAY_SECONDS if delay is None else delay
        self.plan: dict[str, dict[str, Optional[Meal]]] = {}

    @staticmethod
    def _check_slot(day: str, meal_type: str) -> None:
        if day not in WEEKDAYS:
            raise ValueError(f"Unknown day: {day}")
        if meal_type not in MEAL_TYPES:
            raise ValueError(f"Unknown meal type: {meal_type}")

    def select_meal(self, day: str, meal_type: str, meal: Meal) -> None:
        self._check_slot(day, meal_type)
        if meal.type != meal_type:
            raise ValueError(f"Meal '{meal.name}' is a {meal.type}, not a {meal_type}")
        self.plan.setdefault(day, {})[meal_type] = meal

    def clear_meal(self, day: str, meal_type: str) -> None:
        self._check_slot(day, meal_type)
        self.plan.setdefault(day, {})[meal_type] = None

    def is_meal_selected(self, day: str, meal_type: str) -> bool:
        self._check_slot(day, meal_type)
        return self.plan.get(day, {}).get(meal_type) is not None

    def day_calories(self, day: str) -> int:
        """Total calories of the meals selected for a day (0 for an empty day)."""
        if day not in WEEKDAYS:
            raise ValueError(f"Unknown day: {day}")
        return sum(meal.calories for meal in self.plan.get(day, {}).values() if meal is not None)

    def week_calories(self) -> int:
        return sum(self.day_calories(day) for day in WEEKDAYS)

    async def generate_plan(self, rng: Optional[random.Random] = None) -> dict[str, dict[str, Optional[Meal]]]:
        """Replace the plan with one random option per day and meal type."""
        rng = rng or random.Random()
        logger.info("Generating weekly meal plan...")
        await asyncio.sleep(self.delay)

        self.plan = {
            day: {meal_type: rng.choice(self.options[meal_type]) for meal_type in MEAL_TYPES}
            for day in WEEKDAYS
        }
        logger.info(f"Meal plan generated ({self.week_calories()} kcal for the week)")
        return self.plan
