"""Unit tests for Markdown rendering of recipes and outcomes."""

from snapcook.models.models import (
    ImageQuality,
    IngredientAnalysisResult,
    OutcomeStatus,
    RecommendationOutcome,
)
from snapcook.recipes.catalog import RECIPE_CATALOG
from snapcook.recipes.render import render_outcome_markdown, render_recipe_markdown

RECIPE = RECIPE_CATALOG[1].to_recipe()


class TestRenderRecipe:
    """Test recipe Markdown."""

    def test_sections(self):
        text = render_recipe_markdown(RECIPE)

        assert text.startswith("# Spicy Chicken Stir-Fry")
        assert "**20 min** · 2 servings · Easy" in text
        assert "| 380 | 32g | 28g | 14g |" in text
        assert "## Ingredients" in text
        assert "Tags: `high-protein`, `poultry`, `spicy`" in text

    def test_instructions_numbered_from_one(self):
        lines = render_recipe_markdown(RECIPE).splitlines()

        assert "1. Slice the chicken breast into thin strips." in lines
        assert f"{len(RECIPE.instructions)}. {RECIPE.instructions[-1]}" in lines


class TestRenderOutcome:
    """Test outcome Markdown."""

    def test_generated_includes_detections(self, make_prediction):
        analysis = IngredientAnalysisResult(
            ingredients=[make_prediction("Tomato", 0.98)],
            processing_time_ms=5,
            image_quality=ImageQuality.HIGH,
            possible_dishes=["Tomato Soup"],
            confidence=0.98,
        )
        outcome = RecommendationOutcome(status=OutcomeStatus.GENERATED, recipe=RECIPE, analysis=analysis)

        text = render_outcome_markdown(outcome)

        assert "Tomato (98%)" in text
        assert "**Image quality:** high" in text
        assert "Tomato Soup" in text
        assert not text.startswith(">")

    def test_fallback_shows_message(self):
        outcome = RecommendationOutcome(status=OutcomeStatus.FALLBACK, recipe=RECIPE, message="Using a fallback.")

        assert render_outcome_markdown(outcome).startswith("> Using a fallback.")

    def test_no_recipe(self):
        outcome = RecommendationOutcome(status=OutcomeStatus.INVALID_IMAGE, message="Image could not be decoded")

        assert render_outcome_markdown(outcome) == "**Image could not be decoded**"

    def test_no_recipe_without_message(self):
        outcome = RecommendationOutcome(status=OutcomeStatus.SUPERSEDED)

        assert render_outcome_markdown(outcome) == "**No recipe available.**"
