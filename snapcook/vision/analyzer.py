"""Image → ingredient analysis.

Pipeline Steps:
1. Load image bytes (data URI, plain base64, raw bytes or http(s) URL)
2. Validate format (JPEG/PNG only) and size (MAX_IMAGE_SIZE_MB)
3. Preprocess off the event loop (decode, RGB, resize)
4. Run the injected recognition model (lazy-initialized)
5. Drop excluded names, then filter by confidence threshold and max count
6. Aggregate confidence, image quality and dish suggestions
"""

import asyncio
import time
from statistics import fmean
from typing import Optional

from snapcook.models.models import ImageQuality, IngredientAnalysisResult, ModelConfig
from snapcook.recipes.dishes import suggest_dishes
from snapcook.utils.config import config
from snapcook.utils.errors import EmptyResultError, InvalidImageError
from snapcook.utils.logger import logger
from snapcook.vision.ingredients import (
    exclude_ingredients,
    filter_ingredients_by_confidence,
    load_image_bytes,
    preprocess_image,
    validate_image_format,
    validate_image_size,
)
from snapcook.vision.model import IngredientRecognitionModel


class IngredientAnalyzer:
    """Turns an encoded image into an IngredientAnalysisResult."""

    def __init__(
        self,
        model: IngredientRecognitionModel,
        threshold: Optional[float] = None,
        max_predictions: Optional[int] = None,
        input_size: Optional[int] = None,
    ) -> None:
        """Initialize analyzer.

        Args:
            model: Recognition model instance (shared by reference, owned by the caller).
            threshold: Default confidence threshold. Default: MIN_INGREDIENT_CONFIDENCE.
            max_predictions: Default max predictions kept. Default: MAX_PREDICTIONS.
            input_size: Square model input edge in pixels. Default: MODEL_INPUT_SIZE.
        """
        self.model = model
        self.threshold = config.MIN_INGREDIENT_CONFIDENCE if threshold is None else threshold
        self.max_predictions = config.MAX_PREDICTIONS if max_predictions is None else max_predictions
        self.input_size = input_size or config.MODEL_INPUT_SIZE

    async def analyze(
        self, image: str | bytes, model_config: Optional[ModelConfig] = None
    ) -> IngredientAnalysisResult:
        """Analyze one image.

        Args:
            image: Data URI, plain base64 string, raw bytes or http(s) URL.
            model_config: Optional per-request threshold / max / exclusions.

        Returns:
            IngredientAnalysisResult with at least one ingredient.

        Raises:
            InvalidImageError: Payload undecodable, not JPEG/PNG, or too large.
            InferenceError: Model initialization or inference failed.
            EmptyResultError: No prediction passed the confidence filter.
        """
        started = time.perf_counter()
        model_config = model_config or ModelConfig()
        threshold = self.threshold if model_config.threshold is None else model_config.threshold
        max_count = self.max_predictions if model_config.max_predictions is None else model_config.max_predictions

        image_bytes = await load_image_bytes(image)
        if not validate_image_format(image_bytes):
            raise InvalidImageError("Invalid image format. Only JPEG and PNG are supported.")
        if not validate_image_size(image_bytes):
            raise InvalidImageError(f"Image too large. Maximum size is {config.MAX_IMAGE_SIZE_MB}MB")

        processed = await asyncio.to_thread(preprocess_image, image_bytes, self.input_size)

        raw_predictions = await self.model.identify_ingredients(processed)
        candidates = exclude_ingredients(raw_predictions, model_config.excluded_ingredients)
        ingredients = filter_ingredients_by_confidence(candidates, threshold, max_count)

        if not ingredients:
            logger.warning(
                f"No ingredients with sufficient confidence "
                f"({len(raw_predictions)} raw predictions, threshold: {threshold})"
            )
            raise EmptyResultError(
                "No ingredients detected with sufficient confidence. Please try a clearer photo.",
                predictions=raw_predictions,
            )

        confidence = fmean(ingredient.confidence for ingredient in ingredients)
        image_quality = ImageQuality.from_confidence(confidence)
        possible_dishes = suggest_dishes(ingredient.name for ingredient in ingredients)
        processing_time_ms = (time.perf_counter() - started) * 1000

        logger.info(
            f"Detected {len(ingredients)} ingredients (confidence: {confidence:.3f}, "
            f"quality: {image_quality.value}) in {processing_time_ms:.0f}ms",
            extra={"image_quality": image_quality.value},
        )

        return IngredientAnalysisResult(
            ingredients=ingredients,
            processing_time_ms=processing_time_ms,
            image_quality=image_quality,
            possible_dishes=possible_dishes,
            confidence=confidence,
        )
