"""Image input boundary: file uploads and camera stills as data URIs.

Both inputs normalize to the same contract consumed by IngredientAnalyzer: a
base64 data URI string.

CaptureSession owns a camera stream for its lifetime and releases it on every
exit path: cancel, successful capture, and teardown of the `async with` block
(including errors). The device itself is an injected MediaStream.
"""

import asyncio
import base64
from io import BytesIO
from pathlib import Path
from typing import Awaitable, Callable, Optional, Protocol

import filetype
from PIL import Image, UnidentifiedImageError

from snapcook.utils.errors import InvalidImageError, safe_execute_sync
from snapcook.utils.logger import logger
from snapcook.vision.ingredients import mime_type_for, validate_image_format, validate_image_size

JPEG_QUALITY = 92


class MediaStream(Protocol):
    """Live camera stream handle."""

    def read_frame(self) -> bytes:
        """Return the current frame as encoded image bytes."""
        ...

    def stop(self) -> None:
        """Release the underlying device."""
        ...


def to_data_uri(image_bytes: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('utf-8')}"


def encode_image_file(path: str | Path) -> str:
    """Read a JPEG/PNG file and return it as a base64 data URI.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidImageError: If the file is not a JPEG/PNG or exceeds MAX_IMAGE_SIZE_MB.
    """
    image_bytes = Path(path).read_bytes()
    if not validate_image_format(image_bytes):
        raise InvalidImageError("Invalid image format. Only JPEG and PNG are supported.")
    if not validate_image_size(image_bytes):
        raise InvalidImageError("Image file is too large")
    return to_data_uri(image_bytes, mime_type_for(image_bytes))


def encode_jpeg_frame(frame: bytes) -> str:
    """Encode a captured frame as a JPEG data URI, re-encoding non-JPEG frames.

    Raises:
        InvalidImageError: If the frame cannot be decoded.
    """
    kind = filetype.guess(frame)
    if kind is not None and kind.mime == "image/jpeg":
        return to_data_uri(frame, "image/jpeg")

    try:
        img = Image.open(BytesIO(frame))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageError("Captured frame could not be decoded") from e

    output = BytesIO()
    img.convert("RGB").save(output, format="JPEG", quality=JPEG_QUALITY)
    return to_data_uri(output.getvalue(), "image/jpeg")


class CaptureSession:
    """Scoped camera acquisition.

    Usage:
        async with CaptureSession(open_camera) as session:
            image = await session.capture()
    """

    def __init__(self, open_stream: Callable[[], Awaitable[MediaStream]]) -> None:
        self._open_stream = open_stream
        self._stream: Optional[MediaStream] = None

    @property
    def active(self) -> bool:
        return self._stream is not None

    async def __aenter__(self) -> "CaptureSession":
        self._stream = await self._open_stream()
        logger.debug("Camera stream acquired")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()

    async def capture(self) -> str:
        """Grab one still frame as a JPEG data URI. The stream is released afterwards.

        Raises:
            RuntimeError: If no stream is active (not entered, already captured or cancelled).
            InvalidImageError: If the frame cannot be decoded.
        """
        if self._stream is None:
            raise RuntimeError("No active camera stream")

        stream = self._stream
        try:
            frame = await asyncio.to_thread(stream.read_frame)
        finally:
            self.release()
        return encode_jpeg_frame(frame)

    def cancel(self) -> None:
        """Abort capturing and release the stream."""
        logger.debug("Camera capture cancelled")
        self.release()

    def release(self) -> None:
        """Stop the stream if held. Safe to call repeatedly."""
        stream, self._stream = self._stream, None
        if stream is None:
            return
        safe_execute_sync(stream.stop, "Release camera stream", log_level="warning")
        logger.debug("Camera stream released")
