"""Ingredient recognition model service.

The built-in model is a placeholder: loading only simulates latency, and
inference normalizes the image into an input tensor but returns a fixed
canned set of predictions. A real model plugs in by subclassing
IngredientRecognitionModel and overriding `_load()` and `_infer()`; the
lifecycle below stays the same.

Lifecycle (per instance):

    UNINITIALIZED → INITIALIZING → READY
                         ↓
                       FAILED  → (next call starts a new attempt)

Concurrent callers that find the model not ready all await one shared
initialization task, so at most one initialization runs at a time.
"""

import asyncio
from enum import Enum
from typing import Optional, Sequence

from PIL import Image

from snapcook.models.models import IngredientCategory, IngredientPrediction, NutritionalValue
from snapcook.utils.config import config
from snapcook.utils.errors import InferenceError, ModelInitializationError
from snapcook.utils.logger import logger
from snapcook.vision.ingredients import normalize_pixels


class ModelState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


# Canned output of the placeholder model, in descending confidence
DEFAULT_PREDICTIONS: tuple[IngredientPrediction, ...] = (
    IngredientPrediction(
        name="Tomato",
        confidence=0.98,
        category=IngredientCategory.VEGETABLE,
        nutritional_value=NutritionalValue(calories=22, protein=1.1, carbs=4.8, fat=0.2),
    ),
    IngredientPrediction(
        name="Onion",
        confidence=0.96,
        category=IngredientCategory.VEGETABLE,
        nutritional_value=NutritionalValue(calories=44, protein=1.2, carbs=10.3, fat=0.1),
    ),
    IngredientPrediction(
        name="Chicken Breast",
        confidence=0.89,
        category=IngredientCategory.PROTEIN,
        nutritional_value=NutritionalValue(calories=165, protein=31, carbs=0, fat=3.6),
    ),
    IngredientPrediction(
        name="Bell Pepper",
        confidence=0.87,
        category=IngredientCategory.VEGETABLE,
        nutritional_value=NutritionalValue(calories=31, protein=1, carbs=6, fat=0.3),
    ),
    IngredientPrediction(
        name="Garlic",
        confidence=0.82,
        category=IngredientCategory.SEASONING,
        nutritional_value=NutritionalValue(calories=13, protein=0.6, carbs=3, fat=0),
    ),
    IngredientPrediction(
        name="Olive Oil",
        confidence=0.78,
        category=IngredientCategory.OIL,
        nutritional_value=NutritionalValue(calories=119, protein=0, carbs=0, fat=13.5),
    ),
)


class IngredientRecognitionModel:
    """Interface to the ingredient recognition model.

    Constructed explicitly by the composing application and injected into
    IngredientAnalyzer; there is no process-wide instance.
    """

    name = "ingredient-recognition"
    version = "0.1.0"

    def __init__(
        self,
        predictions: Optional[Sequence[IngredientPrediction]] = None,
        load_delay: Optional[float] = None,
        inference_delay: Optional[float] = None,
    ) -> None:
        """Initialize the (not yet loaded) model.

        Args:
            predictions: Canned predictions returned by inference. Default: DEFAULT_PREDICTIONS.
            load_delay: Simulated load latency in seconds. Default: MODEL_LOAD_DELAY_SECONDS.
            inference_delay: Simulated inference latency in seconds. Default: INFERENCE_DELAY_SECONDS.
        """
        self.predictions = tuple(predictions) if predictions is not None else DEFAULT_PREDICTIONS
        self.load_delay = config.MODEL_LOAD_DELAY_SECONDS if load_delay is None else load_delay
        self.inference_delay = config.INFERENCE_DELAY_SECONDS if inference_delay is None else inference_delay
        self._state = ModelState.UNINITIALIZED
        self._init_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ModelState.READY

    async def initialize(self) -> None:
        """Bring the model to READY, joining an initialization already in flight.

        Raises:
            ModelInitializationError: If loading fails. The model is left FAILED
                and the next call starts a fresh attempt.
        """
        if self._state is ModelState.READY:
            return

        if self._init_task is None:
            logger.info(f"Initializing {self.name} model v{self.version}...")
            self._state = ModelState.INITIALIZING
            self._init_task = asyncio.create_task(self._initialize_once())
        else:
            logger.debug("Model initialization already in flight, waiting for it")

        # Shielded: a cancelled caller must not abort the load other callers share
        await asyncio.shield(self._init_task)

    async def _initialize_once(self) -> None:
        try:
            await self._load()
        except asyncio.CancelledError:
            self._state = ModelState.UNINITIALIZED
            self._init_task = None
            raise
        except Exception as e:
            self._state = ModelState.FAILED
            self._init_task = None
            logger.error(f"Failed to load ingredient recognition model: {e}", extra={"model_state": self._state.value})
            raise ModelInitializationError("Model initialization failed") from e

        self._state = ModelState.READY
        logger.info("Ingredient recognition model loaded successfully", extra={"model_state": self._state.value})

    async def _load(self) -> None:
        """Load weights and architecture. Placeholder: simulates load latency."""
        await asyncio.sleep(self.load_delay)

    async def identify_ingredients(self, image: Image.Image) -> list[IngredientPrediction]:
        """Run inference on a preprocessed image.

        Initializes the model first if needed.

        Raises:
            InferenceError: If initialization or inference fails.
        """
        if self._state is not ModelState.READY:
            await self.initialize()

        logger.debug("Running ingredient detection on image...")
        try:
            predictions = await self._infer(image)
        except InferenceError:
            raise
        except Exception as e:
            logger.error(f"Error during ingredient identification: {e}")
            raise InferenceError("Ingredient identification failed") from e

        return list(predictions)

    async def _infer(self, image: Image.Image) -> Sequence[IngredientPrediction]:
        """Placeholder inference.

        Builds the normalized input tensor a real model would consume, then
        simulates latency and returns the canned predictions.
        """
        inputs = await asyncio.to_thread(normalize_pixels, image)
        logger.debug(f"Model input tensor: {image.width}x{image.height}x3 ({len(inputs)} values)")
        await asyncio.sleep(self.inference_delay)
        return self.predictions
