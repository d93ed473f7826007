"""Recommendation pipeline: image → ingredients → recipe.

Composes IngredientAnalyzer and RecipeGenerator into one request/response
cycle and classifies every failure into a RecommendationOutcome:

- InvalidImageError  → INVALID_IMAGE (blocking, no fallback)
- EmptyResultError   → NO_INGREDIENTS, with a catalog fallback recipe
- InferenceError     → FALLBACK, with a catalog fallback recipe
- GenerationError    → FAILED
- fallback failure   → FAILED

Overlapping runs on one pipeline are not queued: the newest request wins and
the one it replaces is cancelled and resolves to SUPERSEDED.
"""

import asyncio
from typing import Iterable, Optional

from snapcook.models.models import (
    ModelConfig,
    NutritionalPreference,
    OutcomeStatus,
    RecommendationOutcome,
)
from snapcook.recipes.fallback import FallbackRecipeMatcher
from snapcook.recipes.generator import RecipeGenerator
from snapcook.utils.config import config
from snapcook.utils.errors import EmptyResultError, InferenceError, InvalidImageError
from snapcook.utils.logger import logger
from snapcook.vision.analyzer import IngredientAnalyzer
from snapcook.vision.model import IngredientRecognitionModel

FAILED_MESSAGE = "Recipe generation failed. Please try again."
FALLBACK_MESSAGE = "We couldn't analyze your photo, so here is a recipe you might like instead."
SUPERSEDED_MESSAGE = "Replaced by a newer request."


class RecommendationPipeline:
    """Runs one recommendation request at a time per instance."""

    def __init__(
        self,
        analyzer: IngredientAnalyzer,
        generator: RecipeGenerator,
        fallback: Optional[FallbackRecipeMatcher] = None,
    ) -> None:
        self.analyzer = analyzer
        self.generator = generator
        self.fallback = fallback or FallbackRecipeMatcher()
        self._current: Optional[asyncio.Task] = None

    @property
    def busy(self) -> bool:
        return self._current is not None and not self._current.done()

    async def run(
        self,
        image: str | bytes,
        preferences: Optional[NutritionalPreference] = None,
        known_ingredients: Optional[Iterable[str]] = None,
        model_config: Optional[ModelConfig] = None,
    ) -> RecommendationOutcome:
        """Recommend a recipe for an image. Never raises except on the caller's own cancellation.

        Args:
            image: Data URI, plain base64 string, raw bytes or http(s) URL.
            preferences: Nutritional preferences. Default: DEFAULT_GOAL with no restrictions.
            known_ingredients: Ingredient names already known to the caller, used by the fallback.
            model_config: Optional per-request analysis overrides.
        """
        if self.busy:
            logger.info("New recommendation request supersedes the one in flight")
            self._current.cancel()

        task = asyncio.create_task(self._run(image, preferences, known_ingredients, model_config))
        self._current = task
        try:
            outcome = await task
        except asyncio.CancelledError:
            if not (task.cancelled() and self._current is not task):
                raise
            outcome = RecommendationOutcome(status=OutcomeStatus.SUPERSEDED, message=SUPERSEDED_MESSAGE)
        finally:
            if self._current is task:
                self._current = None

        logger.info(f"Recommendation finished: {outcome.status.value}", extra={"outcome": outcome.status.value})
        return outcome

    async def _run(
        self,
        image: str | bytes,
        preferences: Optional[NutritionalPreference],
        known_ingredients: Optional[Iterable[str]],
        model_config: Optional[ModelConfig],
    ) -> RecommendationOutcome:
        preferences = preferences or NutritionalPreference(goal=config.DEFAULT_GOAL)
        known = list(known_ingredients) if known_ingredients is not None else None

        try:
            analysis = await self.analyzer.analyze(image, model_config)
        except InvalidImageError as e:
            logger.warning(f"Rejected image: {e}")
            return RecommendationOutcome(status=OutcomeStatus.INVALID_IMAGE, message=str(e))
        except EmptyResultError as e:
            names = known if known is not None else [prediction.name for prediction in e.predictions]
            return self._recover(names, OutcomeStatus.NO_INGREDIENTS, str(e))
        except InferenceError as e:
            logger.warning(f"Ingredient analysis failed, using fallback: {e}")
            return self._recover(known or [], OutcomeStatus.FALLBACK, FALLBACK_MESSAGE)
        except Exception as e:
            logger.error(f"Unexpected ingredient analysis failure, using fallback: {e}", exc_info=True)
            return self._recover(known or [], OutcomeStatus.FALLBACK, FALLBACK_MESSAGE)

        try:
            recipe = await self.generator.generate(analysis.ingredients, preferences)
        except Exception as e:
            logger.error(f"Recipe generation failed: {e}")
            return RecommendationOutcome(status=OutcomeStatus.FAILED, analysis=analysis, message=FAILED_MESSAGE)

        return RecommendationOutcome(status=OutcomeStatus.GENERATED, recipe=recipe, analysis=analysis)

    def _recover(self, known_ingredients: list[str], status: OutcomeStatus, message: str) -> RecommendationOutcome:
        """Fallback step: best catalog match for the known ingredients."""
        try:
            recipe = self.fallback.match(known_ingredients)
        except Exception as e:
            logger.error(f"Fallback recipe selection failed: {e}")
            return RecommendationOutcome(status=OutcomeStatus.FAILED, message=FAILED_MESSAGE)
        return RecommendationOutcome(status=status, recipe=recipe, message=message)


def create_pipeline(
    model: Optional[IngredientRecognitionModel] = None,
    generator: Optional[RecipeGenerator] = None,
    fallback: Optional[FallbackRecipeMatcher] = None,
) -> RecommendationPipeline:
    """Factory wiring a pipeline from configuration.

    The caller owns the returned instances; pass the same model to several
    pipelines to share one loaded model.
    """
    model = model or IngredientRecognitionModel()
    return RecommendationPipeline(
        analyzer=IngredientAnalyzer(model),
        generator=generator or RecipeGenerator(),
        fallback=fallback,
    )
