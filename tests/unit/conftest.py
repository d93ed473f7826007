"""Shared fixtures for unit tests.

Images are generated in memory with Pillow so tests exercise real decoding,
and every model/generator is built with zero simulated latency.
"""

import base64
from io import BytesIO

import pytest
from PIL import Image

from snapcook.models.models import IngredientCategory, IngredientPrediction
from snapcook.recipes.generator import RecipeGenerator
from snapcook.vision.analyzer import IngredientAnalyzer
from snapcook.vision.model import IngredientRecognitionModel


def _encode(img: Image.Image, image_format: str) -> bytes:
    output = BytesIO()
    img.save(output, format=image_format)
    return output.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _encode(Image.new("RGB", (64, 64), (200, 80, 40)), "JPEG")


@pytest.fixture
def png_bytes() -> bytes:
    """Fully transparent RGBA PNG."""
    return _encode(Image.new("RGBA", (48, 32), (0, 0, 0, 0)), "PNG")


@pytest.fixture
def jpeg_data_uri(jpeg_bytes) -> str:
    return "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode("utf-8")


@pytest.fixture
def make_prediction():
    """Factory for IngredientPrediction instances."""

    def _make(name: str, confidence: float, category: IngredientCategory | None = None) -> IngredientPrediction:
        return IngredientPrediction(name=name, confidence=confidence, category=category)

    return _make


@pytest.fixture
def model() -> IngredientRecognitionModel:
    return IngredientRecognitionModel(load_delay=0, inference_delay=0)


@pytest.fixture
def analyzer(model) -> IngredientAnalyzer:
    return IngredientAnalyzer(model, threshold=0.7, max_predictions=10, input_size=64)


@pytest.fixture
def generator() -> RecipeGenerator:
    return RecipeGenerator(delay=0)
