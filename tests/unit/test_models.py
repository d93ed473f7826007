"""Unit tests for Pydantic data models."""

import pytest
from pydantic import ValidationError

from snapcook.models.models import (
    Goal,
    ImageQuality,
    IngredientAnalysisResult,
    IngredientCategory,
    IngredientPrediction,
    MacroRatios,
    ModelConfig,
    NutritionalPreference,
    NutritionInfo,
    OutcomeStatus,
    Recipe,
    RecommendationOutcome,
    UserProfile,
)


def make_recipe(**overrides) -> Recipe:
    fields = {
        "title": "Test Bowl",
        "instructions": ["Mix everything."],
        "nutritional_info": NutritionInfo(calories=400, protein=20, carbs=40, fat=10),
        "cooking_time": 20,
        "servings": 2,
        "difficulty": "Easy",
        "image_url": "https://example.com/bowl.jpg",
    }
    fields.update(overrides)
    return Recipe(**fields)


class TestImageQuality:
    """Test the confidence → quality step function."""

    @pytest.mark.parametrize(
        "confidence,expected",
        [
            (1.0, ImageQuality.HIGH),
            (0.91, ImageQuality.HIGH),
            (0.9, ImageQuality.MEDIUM),
            (0.71, ImageQuality.MEDIUM),
            (0.7, ImageQuality.LOW),
            (0.0, ImageQuality.LOW),
        ],
    )
    def test_thresholds_are_exclusive(self, confidence, expected):
        assert ImageQuality.from_confidence(confidence) is expected


class TestIngredientPrediction:
    """Test IngredientPrediction validation."""

    def test_valid_prediction(self):
        prediction = IngredientPrediction(name="  Tomato ", confidence=0.98, category="vegetable")

        assert prediction.name == "Tomato"
        assert prediction.category is IngredientCategory.VEGETABLE
        assert prediction.nutritional_value is None

    @pytest.mark.parametrize("confidence", [-0.01, 1.01])
    def test_confidence_out_of_range(self, confidence):
        with pytest.raises(ValidationError):
            IngredientPrediction(name="Tomato", confidence=confidence)

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            IngredientPrediction(name="", confidence=0.5)

    def test_immutable(self):
        prediction = IngredientPrediction(name="Tomato", confidence=0.9)
        with pytest.raises(ValidationError):
            prediction.confidence = 0.1


class TestIngredientAnalysisResult:
    """Test IngredientAnalysisResult validation."""

    def test_requires_at_least_one_ingredient(self):
        with pytest.raises(ValidationError):
            IngredientAnalysisResult(
                ingredients=[], processing_time_ms=1, image_quality=ImageQuality.LOW, confidence=0.5
            )

    def test_ingredient_names(self, make_prediction):
        result = IngredientAnalysisResult(
            ingredients=[make_prediction("Tomato", 0.9), make_prediction("Garlic", 0.8)],
            processing_time_ms=12.5,
            image_quality=ImageQuality.MEDIUM,
            confidence=0.85,
        )

        assert result.ingredient_names == ["Tomato", "Garlic"]
        assert result.possible_dishes == []


class TestModelConfig:
    """Test per-request analysis overrides."""

    def test_defaults(self):
        model_config = ModelConfig()

        assert model_config.threshold is None
        assert model_config.max_predictions is None
        assert model_config.excluded_ingredients == []

    def test_excluded_from_comma_string(self):
        assert ModelConfig(excluded_ingredients="garlic, Onion ,garlic").excluded_ingredients == ["garlic", "Onion"]

    def test_max_predictions_must_be_positive(self):
        with pytest.raises(ValidationError):
            ModelConfig(max_predictions=0)


class TestNutritionalPreference:
    """Test NutritionalPreference parsing and validation."""

    def test_defaults(self):
        preference = NutritionalPreference()

        assert preference.goal is Goal.MAINTENANCE
        assert preference.calorie_target is None
        assert preference.dietary_restrictions == []
        assert preference.allergies == []

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("weightLoss", Goal.WEIGHT_LOSS),
            ("muscleBuilding", Goal.MUSCLE_BUILDING),
            ("weight-gain", Goal.WEIGHT_GAIN),
            ("maintenance", Goal.MAINTENANCE),
            ("WEIGHT_LOSS", Goal.WEIGHT_LOSS),
            ("Weight Loss", Goal.WEIGHT_LOSS),
            ("MuscleBuilding", Goal.MUSCLE_BUILDING),
            ("weight - gain", Goal.WEIGHT_GAIN),
            (Goal.WEIGHT_LOSS, Goal.WEIGHT_LOSS),
        ],
    )
    def test_goal_spellings(self, raw, expected):
        assert NutritionalPreference(goal=raw).goal is expected

    def test_unknown_goal(self):
        with pytest.raises(ValidationError):
            NutritionalPreference(goal="bulk")

    def test_restrictions_deduplicated_case_insensitively(self):
        preference = NutritionalPreference(dietary_restrictions=["Vegetarian", "vegetarian", " gluten-free "])
        assert preference.dietary_restrictions == ["Vegetarian", "gluten-free"]

    def test_allergies_from_comma_string(self):
        assert NutritionalPreference(allergies="peanuts, shellfish,").allergies == ["peanuts", "shellfish"]

    def test_non_string_restriction_rejected(self):
        with pytest.raises(ValidationError):
            NutritionalPreference(dietary_restrictions=[1, 2])

    @pytest.mark.parametrize("calories", [0, -100, 10001])
    def test_calorie_target_bounds(self, calories):
        with pytest.raises(ValidationError):
            NutritionalPreference(calorie_target=calories)

    def test_macro_ratios(self):
        preference = NutritionalPreference(macro_ratios={"protein": 30, "carbs": 40, "fat": 30})
        assert preference.macro_ratios == MacroRatios(protein=30, carbs=40, fat=30)


class TestRecipe:
    """Test Recipe validation."""

    def test_valid_recipe(self):
        recipe = make_recipe(tags=["quick"])

        assert recipe.title == "Test Bowl"
        assert recipe.ingredients == []
        assert recipe.tags == ["quick"]

    def test_requires_instructions(self):
        with pytest.raises(ValidationError):
            make_recipe(instructions=[])

    def test_title_length(self):
        with pytest.raises(ValidationError):
            make_recipe(title="x" * 201)

    def test_servings_minimum(self):
        with pytest.raises(ValidationError):
            make_recipe(servings=0)


class TestRecommendationOutcome:
    """Test the explicit pipeline result."""

    def test_ok_when_recipe_present(self):
        outcome = RecommendationOutcome(status=OutcomeStatus.FALLBACK, recipe=make_recipe(), message="fallback")
        assert outcome.ok is True

    def test_not_ok_without_recipe(self):
        outcome = RecommendationOutcome(status=OutcomeStatus.INVALID_IMAGE, message="bad image")
        assert outcome.ok is False

    def test_generated_requires_analysis(self):
        with pytest.raises(ValidationError, match="requires both recipe and analysis"):
            RecommendationOutcome(status=OutcomeStatus.GENERATED, recipe=make_recipe())

    @pytest.mark.parametrize("status", [OutcomeStatus.INVALID_IMAGE, OutcomeStatus.SUPERSEDED])
    def test_blocking_outcome_cannot_carry_recipe(self, status):
        with pytest.raises(ValidationError, match="cannot carry a recipe"):
            RecommendationOutcome(status=status, recipe=make_recipe())

    def test_serializes_status_value(self):
        dumped = RecommendationOutcome(status=OutcomeStatus.SUPERSEDED).model_dump(mode="json")
        assert dumped["status"] == "superseded"


class TestUserProfile:
    """Test the profile form model."""

    def test_defaults(self):
        profile = UserProfile()

        assert profile.goal is Goal.WEIGHT_LOSS
        assert profile.activity_level == 2
        assert profile.activity_label == "Lightly Active"

    @pytest.mark.parametrize("level", [0, 6])
    def test_activity_level_bounds(self, level):
        with pytest.raises(ValidationError):
            UserProfile(activity_level=level)

    def test_to_preferences(self):
        profile = UserProfile(
            name="Sam",
            goal="muscleBuilding",
            dietary_preferences=["high-protein"],
            allergies="peanuts, dairy",
            cuisine_preferences=["Mexican"],
            calorie_target=600,
        )

        preference = profile.to_preferences()

        assert preference.goal is Goal.MUSCLE_BUILDING
        assert preference.allergies == ["peanuts", "dairy"]
        assert preference.dietary_restrictions == ["high-protein"]
        assert preference.cuisine_preferences == ["Mexican"]
        assert preference.calorie_target == 600
