"""Error taxonomy for the snap-and-cook pipeline.

Component code raises these; RecommendationPipeline classifies every one of
them into a RecommendationOutcome status, so nothing unclassified leaks past
the pipeline boundary.
"""

from typing import Optional, Sequence

from snapcook.utils.logger import logger


class SnapCookError(Exception):
    """Base class for all pipeline errors."""


class InvalidImageError(SnapCookError, ValueError):
    """Image payload is malformed, undecodable, unsupported or too large.

    Blocking for the analyze step and never retried automatically.
    """


class InferenceError(SnapCookError):
    """Ingredient recognition model failed to produce predictions."""


class ModelInitializationError(InferenceError):
    """Ingredient recognition model could not be brought to the ready state."""


class EmptyResultError(SnapCookError):
    """No prediction passed the confidence filter.

    Carries the unfiltered predictions so the caller can still use their names
    (e.g. for a best-effort fallback) and prompt for a clearer photo.
    """

    def __init__(self, message: str, predictions: Optional[Sequence] = None) -> None:
        super().__init__(message)
        self.predictions = list(predictions or [])


class GenerationError(SnapCookError):
    """Recipe generator could not build a recipe."""


def _report(operation: str, error: Exception, log_level: str) -> None:
    log = {"debug": logger.debug, "error": logger.error}.get(log_level, logger.warning)
    log(f"{operation} failed: {error}")


async def safe_execute_async(awaitable, operation: str, log_level: str = "warning", default=None, reraise: bool = False):
    """Await an optional step; on failure log it and return `default`.

    Args:
        awaitable: Coroutine to await.
        operation: What the step does, for the log line (e.g. "Fetch image from URL").
        log_level: "debug", "warning" or "error".
        default: Value returned when the step fails.
        reraise: Re-raise after logging instead of returning `default`.
    """
    try:
        return await awaitable
    except Exception as e:
        _report(operation, e, log_level)
        if reraise:
            raise
        return default


def safe_execute_sync(func, operation: str, log_level: str = "warning", default=None, reraise: bool = False):
    """Synchronous counterpart of safe_execute_async; `func` takes no arguments."""
    try:
        return func()
    except Exception as e:
        _report(operation, e, log_level)
        if reraise:
            raise
        return default
