"""Unit tests for the weekly meal planner."""

import random

import pytest

from snapcook.planner.meal_planner import MEAL_OPTIONS, MEAL_TYPES, WEEKDAYS, MealPlanner


@pytest.fixture
def planner():
    return MealPlanner(delay=0)


class TestMealSelection:
    """Test manual selection of meals."""

    def test_starts_empty(self, planner):
        assert planner.week_calories() == 0
        assert not planner.is_meal_selected("Monday", "breakfast")

    def test_select_and_total(self, planner):
        planner.select_meal("Monday", "breakfast", MEAL_OPTIONS["breakfast"][0])
        planner.select_meal("Monday", "dinner", MEAL_OPTIONS["dinner"][2])

        assert planner.is_meal_selected("Monday", "breakfast")
        assert planner.day_calories("Monday") == 280 + 490
        assert planner.week_calories() == 770

    def test_clear_meal(self, planner):
        planner.select_meal("Friday", "snack", MEAL_OPTIONS["snack"][2])
        planner.clear_meal("Friday", "snack")

        assert not planner.is_meal_selected("Friday", "snack")
        assert planner.day_calories("Friday") == 0

    def test_wrong_meal_type(self, planner):
        with pytest.raises(ValueError, match="not a lunch"):
            planner.select_meal("Monday", "lunch", MEAL_OPTIONS["breakfast"][0])

    @pytest.mark.parametrize("day,meal_type", [("Funday", "lunch"), ("Monday", "brunch")])
    def test_unknown_slot(self, planner, day, meal_type):
        with pytest.raises(ValueError, match="Unknown"):
            planner.is_meal_selected(day, meal_type)

    def test_unknown_day_calories(self, planner):
        with pytest.raises(ValueError):
            planner.day_calories("Someday")


class TestGeneratePlan:
    """Test random weekly plan generation."""

    @pytest.mark.asyncio
    async def test_fills_every_slot(self, planner):
        plan = await planner.generate_plan(random.Random(1))

        assert list(plan) == list(WEEKDAYS)
        for day in WEEKDAYS:
            for meal_type in MEAL_TYPES:
                meal = plan[day][meal_type]
                assert meal in MEAL_OPTIONS[meal_type]
                assert meal.type == meal_type

    @pytest.mark.asyncio
    async def test_seeded_plans_repeat(self):
        first = await MealPlanner(delay=0).generate_plan(random.Random(42))
        second = await MealPlanner(delay=0).generate_plan(random.Random(42))

        assert first == second

    @pytest.mark.asyncio
    async def test_week_calories_within_bounds(self, planner):
        await planner.generate_plan(random.Random(7))

        low = sum(min(m.calories for m in MEAL_OPTIONS[t]) for t in MEAL_TYPES) * 7
        high = sum(max(m.calories for m in MEAL_OPTIONS[t]) for t in MEAL_TYPES) * 7
        assert low <= planner.week_calories() <= high

    @pytest.mark.asyncio
    async def test_replaces_manual_selection(self, planner):
        planner.clear_meal("Monday", "breakfast")

        await planner.generate_plan(random.Random(3))

        assert planner.is_meal_selected("Monday", "breakfast")
