"""Image loading, validation, preprocessing and confidence filtering.

Building blocks of IngredientAnalyzer:

Core Functions:
- decode_base64_image(): Strip a data-URI prefix and strictly decode base64
- fetch_image_bytes(): Get image bytes from an http(s) URL (async)
- load_image_bytes(): Normalize any supported image source to bytes (async)
- validate_image_format(): Check JPEG/PNG only
- validate_image_size(): Check MAX_IMAGE_SIZE_MB limit
- preprocess_image(): Decode, convert to RGB and resize to the model input size
- normalize_pixels(): Flatten to RGB values scaled to [0, 1] (model input tensor)
- exclude_ingredients(): Drop caller-excluded names
- filter_ingredients_by_confidence(): Apply threshold and max count
"""

import base64
import binascii
import re
from io import BytesIO
from typing import Iterable, Optional, Sequence

import aiohttp
import filetype
from PIL import Image, UnidentifiedImageError

from snapcook.models.models import IngredientPrediction
from snapcook.utils.config import config
from snapcook.utils.errors import InvalidImageError, safe_execute_async
from snapcook.utils.logger import logger

DEFAULT_THRESHOLD = 0.7
DEFAULT_MAX_COUNT = 10
SUPPORTED_MIME_TYPES = ("image/jpeg", "image/png")

# data:[<mediatype>][;params];base64,
DATA_URI_PREFIX = re.compile(r"^data:[^,]*;base64,", re.IGNORECASE)


def decode_base64_image(payload: str) -> bytes:
    """Decode a base64 image payload, with or without a data-URI prefix.

    Args:
        payload: "data:image/jpeg;base64,/9j/..." or plain base64 text.

    Returns:
        Decoded bytes (never empty).

    Raises:
        InvalidImageError: If the payload is not strictly valid base64 or decodes to nothing.
    """
    encoded = DATA_URI_PREFIX.sub("", payload.strip(), count=1)
    # Line-wrapped base64 (e.g. from `base64` CLI) is still valid input
    encoded = "".join(encoded.split())
    try:
        decoded = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError("Image payload is not valid base64 data") from e

    if not decoded:
        raise InvalidImageError("Image payload is empty")
    return decoded


async def fetch_image_bytes(url: str) -> Optional[bytes]:
    """Download an image; None when the request fails or times out."""

    async def _download():
        timeout = aiohttp.ClientTimeout(total=config.IMAGE_FETCH_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                return await response.read()

    return await safe_execute_async(_download(), f"Fetch image from {url}")


async def load_image_bytes(image_source: str | bytes) -> bytes:
    """Turn any accepted image source into raw bytes.

    bytes pass through, http(s) URLs are downloaded, and any other string is
    decoded as a data URI or plain base64.

    Raises:
        InvalidImageError: If the source cannot be turned into bytes.
    """
    if isinstance(image_source, (bytes, bytearray)):
        if not image_source:
            raise InvalidImageError("Image payload is empty")
        return bytes(image_source)

    if not isinstance(image_source, str):
        raise InvalidImageError(f"Unsupported image source type: {type(image_source).__name__}")

    if image_source.startswith(("http://", "https://")):
        image_bytes = await fetch_image_bytes(image_source)
        if not image_bytes:
            raise InvalidImageError("Could not retrieve image bytes from URL")
        return image_bytes

    return decode_base64_image(image_source)


def validate_image_format(image_bytes: bytes) -> bool:
    """True for JPEG or PNG, judged by magic bytes."""
    mime = getattr(filetype.guess(image_bytes), "mime", None)
    if mime not in SUPPORTED_MIME_TYPES:
        logger.warning(f"Rejected image format {mime or 'unknown'}; expected JPEG or PNG")
    return mime in SUPPORTED_MIME_TYPES


def validate_image_size(image_bytes: bytes) -> bool:
    """True when the payload fits in MAX_IMAGE_SIZE_MB."""
    limit = config.MAX_IMAGE_SIZE_MB * 1024 * 1024
    if len(image_bytes) > limit:
        logger.warning(f"Rejected image of {len(image_bytes) / 1048576:.2f}MB; limit is {config.MAX_IMAGE_SIZE_MB}MB")
    return len(image_bytes) <= limit


def mime_type_for(image_bytes: bytes) -> str:
    """MIME type of a validated image, defaulting to JPEG."""
    kind = filetype.guess(image_bytes)
    return kind.mime if kind is not None else "image/jpeg"


def preprocess_image(image_bytes: bytes, input_size: Optional[int] = None) -> Image.Image:
    """Decode image bytes into a square RGB image of the model input size.

    CPU-bound; callers on the event loop run it via asyncio.to_thread.

    Raises:
        InvalidImageError: If Pillow cannot decode the bytes.
    """
    size = input_size or config.MODEL_INPUT_SIZE
    try:
        img = Image.open(BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        raise InvalidImageError("Image could not be decoded") from e

    # Flatten transparency onto white, as the model expects opaque RGB
    if img.mode in ("RGBA", "LA", "P"):
        img = img.convert("RGBA")
        rgb_img = Image.new("RGB", img.size, (255, 255, 255))
        rgb_img.paste(img, mask=img.split()[-1])
        img = rgb_img
    elif img.mode != "RGB":
        img = img.convert("RGB")

    if img.size != (size, size):
        img = img.resize((size, size), Image.Resampling.LANCZOS)

    logger.debug(f"Preprocessed image to {size}x{size} RGB")
    return img


def normalize_pixels(img: Image.Image) -> list[float]:
    """Flatten an image into RGB channel values scaled to [0, 1], row by row."""
    if img.mode != "RGB":
        img = img.convert("RGB")
    return [value / 255.0 for value in img.tobytes()]


def exclude_ingredients(
    predictions: Sequence[IngredientPrediction], excluded: Iterable[str]
) -> list[IngredientPrediction]:
    """Drop predictions whose name is excluded (case-insensitive), preserving order."""
    excluded_names = {name.strip().lower() for name in excluded}
    if not excluded_names:
        return list(predictions)
    return [prediction for prediction in predictions if prediction.name.lower() not in excluded_names]


def filter_ingredients_by_confidence(
    predictions: Sequence[IngredientPrediction],
    threshold: float = DEFAULT_THRESHOLD,
    max_count: int = DEFAULT_MAX_COUNT,
) -> list[IngredientPrediction]:
    """Keep predictions with confidence >= threshold, truncated to max_count.

    Pure: returns a new list, an order-preserving subsequence of the input.
    Empty input, or max_count <= 0, yields an empty list.
    """
    if max_count <= 0:
        return []

    filtered = [prediction for prediction in predictions if prediction.confidence >= threshold][:max_count]

    if len(filtered) < len(predictions):
        logger.debug(
            f"Filtered ingredients: {len(predictions)} → {len(filtered)} "
            f"(confidence threshold: {threshold}, max: {max_count})"
        )

    return filtered
