"""Configuration management for SnapCook.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()

GOALS = ("weight_loss", "weight_gain", "maintenance", "muscle_building")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Minimum confidence score (0.0 - 1.0) for ingredient detection. Default: 0.7
        self.MIN_INGREDIENT_CONFIDENCE: float = float(os.getenv("MIN_INGREDIENT_CONFIDENCE", "0.7"))
        # Maximum number of ingredient predictions kept per image. Default: 10
        self.MAX_PREDICTIONS: int = int(os.getenv("MAX_PREDICTIONS", "10"))
        # Maximum image size (in MB) that can be processed. Default: 5 MB
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))
        # Square edge (pixels) images are resized to before inference. Default: 224
        self.MODEL_INPUT_SIZE: int = int(os.getenv("MODEL_INPUT_SIZE", "224"))
        # Timeout for fetching images given as http(s) URLs. Default: 10 seconds
        self.IMAGE_FETCH_TIMEOUT_SECONDS: int = int(os.getenv("IMAGE_FETCH_TIMEOUT_SECONDS", "10"))

        # Simulated latencies (seconds) of the placeholder model and generator.
        # Set to 0 to run the pipeline without waiting.
        self.MODEL_LOAD_DELAY_SECONDS: float = float(os.getenv("MODEL_LOAD_DELAY_SECONDS", "1.0"))
        self.INFERENCE_DELAY_SECONDS: float = float(os.getenv("INFERENCE_DELAY_SECONDS", "2.0"))
        self.GENERATION_DELAY_SECONDS: float = float(os.getenv("GENERATION_DELAY_SECONDS", "1.5"))
        self.MEAL_PLAN_DELAY_SECONDS: float = float(os.getenv("MEAL_PLAN_DELAY_SECONDS", "1.5"))

        # Goal used when a request carries no nutritional preferences
        self.DEFAULT_GOAL: str = os.getenv("DEFAULT_GOAL", "maintenance")

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any value is out of its allowed range.
        """
        if not (0.0 <= self.MIN_INGREDIENT_CONFIDENCE <= 1.0):
            raise ValueError(
                f"MIN_INGREDIENT_CONFIDENCE must be between 0.0 and 1.0, got: {self.MIN_INGREDIENT_CONFIDENCE}"
            )
        if not (1 <= self.MAX_PREDICTIONS <= 100):
            raise ValueError(f"MAX_PREDICTIONS must be between 1 and 100, got: {self.MAX_PREDICTIONS}")
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ValueError(f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}")
        if self.MODEL_INPUT_SIZE < 32:
            raise ValueError(f"MODEL_INPUT_SIZE must be at least 32, got: {self.MODEL_INPUT_SIZE}")
        if self.IMAGE_FETCH_TIMEOUT_SECONDS < 1:
            raise ValueError(
                f"IMAGE_FETCH_TIMEOUT_SECONDS must be at least 1 second, got: {self.IMAGE_FETCH_TIMEOUT_SECONDS}"
            )
        for name in (
            "MODEL_LOAD_DELAY_SECONDS",
            "INFERENCE_DELAY_SECONDS",
            "GENERATION_DELAY_SECONDS",
            "MEAL_PLAN_DELAY_SECONDS",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got: {getattr(self, name)}")
        if self.DEFAULT_GOAL not in GOALS:
            raise ValueError(f"DEFAULT_GOAL must be one of {', '.join(GOALS)}, got: {self.DEFAULT_GOAL}")


# Create module-level config instance and validate immediately
config = Config()
config.validate()
