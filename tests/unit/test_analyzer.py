"""Unit tests for IngredientAnalyzer."""

from unittest.mock import patch

import pytest

from snapcook.models.models import ImageQuality, ModelConfig
from snapcook.recipes.dishes import CHICKEN_DISHES, DEFAULT_DISHES
from snapcook.utils.config import config
from snapcook.utils.errors import EmptyResultError, InferenceError, InvalidImageError
from snapcook.vision.analyzer import IngredientAnalyzer
from snapcook.vision.model import IngredientRecognitionModel


class TestAnalyze:
    """Test the image → ingredients path."""

    @pytest.mark.asyncio
    async def test_default_threshold_keeps_all_canned_predictions(self, analyzer, jpeg_data_uri):
        """Six canned predictions all pass 0.7; mean ≈ 0.883 is medium quality."""
        result = await analyzer.analyze(jpeg_data_uri)

        assert [i.confidence for i in result.ingredients] == [0.98, 0.96, 0.89, 0.87, 0.82, 0.78]
        assert result.confidence == pytest.approx(0.8833, abs=1e-3)
        assert result.image_quality is ImageQuality.MEDIUM
        assert result.possible_dishes == list(CHICKEN_DISHES)
        assert result.processing_time_ms >= 0

    @pytest.mark.asyncio
    async def test_high_threshold_keeps_top_two(self, analyzer, jpeg_data_uri):
        """Threshold 0.9 keeps [.98, .96]; mean 0.97 is high quality."""
        result = await analyzer.analyze(jpeg_data_uri, ModelConfig(threshold=0.9))

        assert result.ingredient_names == ["Tomato", "Onion"]
        assert result.confidence == pytest.approx(0.97)
        assert result.image_quality is ImageQuality.HIGH
        assert result.possible_dishes == list(DEFAULT_DISHES)

    @pytest.mark.asyncio
    async def test_analyzer_level_threshold(self, model, jpeg_data_uri):
        analyzer = IngredientAnalyzer(model, threshold=0.9, input_size=64)

        result = await analyzer.analyze(jpeg_data_uri)

        assert len(result.ingredients) == 2

    @pytest.mark.asyncio
    async def test_max_predictions(self, analyzer, jpeg_data_uri):
        result = await analyzer.analyze(jpeg_data_uri, ModelConfig(max_predictions=3))

        assert result.ingredient_names == ["Tomato", "Onion", "Chicken Breast"]

    @pytest.mark.asyncio
    async def test_excluded_ingredients(self, analyzer, jpeg_data_uri):
        result = await analyzer.analyze(jpeg_data_uri, ModelConfig(excluded_ingredients="tomato, ONION"))

        assert "Tomato" not in result.ingredient_names
        assert "Onion" not in result.ingredient_names
        assert result.ingredient_names[0] == "Chicken Breast"

    @pytest.mark.asyncio
    async def test_accepts_raw_bytes_and_png(self, analyzer, jpeg_bytes, png_bytes):
        assert (await analyzer.analyze(jpeg_bytes)).ingredients
        assert (await analyzer.analyze(png_bytes)).ingredients

    @pytest.mark.asyncio
    async def test_lazily_initializes_model(self, analyzer, model, jpeg_data_uri):
        assert not model.is_ready

        await analyzer.analyze(jpeg_data_uri)

        assert model.is_ready


class TestAnalyzeErrors:
    """Test error classification of analyze()."""

    @pytest.mark.asyncio
    async def test_undecodable_string(self, analyzer, model):
        """Not-base64 input is an InvalidImageError and never reaches the model."""
        with pytest.raises(InvalidImageError):
            await analyzer.analyze("this is definitely not an image!")

        assert not model.is_ready

    @pytest.mark.asyncio
    async def test_unsupported_format(self, analyzer):
        with pytest.raises(InvalidImageError, match="Only JPEG and PNG"):
            await analyzer.analyze(b"GIF89a" + b"\x00" * 64)

    @pytest.mark.asyncio
    async def test_too_large(self, analyzer, jpeg_bytes):
        with patch.object(config, "MAX_IMAGE_SIZE_MB", 0):
            with pytest.raises(InvalidImageError, match="too large"):
                await analyzer.analyze(jpeg_bytes)

    @pytest.mark.asyncio
    async def test_valid_header_corrupt_body(self, analyzer):
        with pytest.raises(InvalidImageError):
            await analyzer.analyze(b"\xff\xd8\xff\xe0\x00\x10JFIF" + b"\x00" * 32)

    @pytest.mark.asyncio
    async def test_nothing_passes_filter(self, analyzer, jpeg_data_uri):
        """An empty filter result is EmptyResultError carrying the raw predictions."""
        with pytest.raises(EmptyResultError) as exc_info:
            await analyzer.analyze(jpeg_data_uri, ModelConfig(threshold=0.99))

        assert len(exc_info.value.predictions) == 6
        assert exc_info.value.predictions[0].name == "Tomato"

    @pytest.mark.asyncio
    async def test_model_returns_nothing(self, jpeg_data_uri):
        model = IngredientRecognitionModel(predictions=[], load_delay=0, inference_delay=0)
        analyzer = IngredientAnalyzer(model, input_size=64)

        with pytest.raises(EmptyResultError):
            await analyzer.analyze(jpeg_data_uri)

    @pytest.mark.asyncio
    async def test_inference_failure_propagates(self, jpeg_data_uri):
        class BrokenModel(IngredientRecognitionModel):
            async def _infer(self, image):
                raise RuntimeError("out of memory")

        analyzer = IngredientAnalyzer(BrokenModel(load_delay=0, inference_delay=0), input_size=64)

        with pytest.raises(InferenceError):
            await analyzer.analyze(jpeg_data_uri)
