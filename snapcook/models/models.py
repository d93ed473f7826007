"""Data models and schemas for the snap-and-cook recommendation pipeline.

Defines Pydantic models for ingredient predictions, analysis results, user
nutritional preferences, generated recipes and pipeline outcomes.
All models use Pydantic v2 for strict validation.
"""

import re
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class IngredientCategory(str, Enum):
    """Coarse ingredient category reported by the recognition model."""

    VEGETABLE = "vegetable"
    PROTEIN = "protein"
    SEASONING = "seasoning"
    OIL = "oil"
    GRAIN = "grain"
    DAIRY = "dairy"
    FRUIT = "fruit"
    OTHER = "other"


class ImageQuality(str, Enum):
    """Coarse signal describing aggregate detection confidence."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_confidence(cls, confidence: float) -> "ImageQuality":
        """Map aggregate confidence to quality; both thresholds are exclusive."""
        if confidence > 0.9:
            return cls.HIGH
        if confidence > 0.7:
            return cls.MEDIUM
        return cls.LOW


class Goal(str, Enum):
    """User's dietary objective driving recipe macro targets."""

    WEIGHT_LOSS = "weight_loss"
    WEIGHT_GAIN = "weight_gain"
    MAINTENANCE = "maintenance"
    MUSCLE_BUILDING = "muscle_building"


def _normalize_goal(value):
    """Accept camelCase ("weightLoss"), UPPER_CASE, kebab-case and spaced spellings."""
    if isinstance(value, str):
        value = value.strip()
        if value == value.upper():
            value = value.lower()
        value = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", value).lower()
        value = re.sub(r"[\s_-]+", "_", value)
    return value


def _split_unique(value) -> list[str]:
    """Parse a comma-separated string or list into stripped, case-insensitively unique names."""
    if not value:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
    else:
        raise ValueError("Expected a comma-separated string or a list of strings")

    seen = set()
    result = []
    for item in items:
        if not isinstance(item, str):
            raise ValueError(f"Expected string values, got {type(item).__name__}")
        item = item.strip()
        if item and item.lower() not in seen:
            seen.add(item.lower())
            result.append(item)
    return result


class NutritionalValue(BaseModel):
    """Per-portion nutrition estimate of a single ingredient."""

    model_config = ConfigDict(frozen=True)

    calories: Annotated[float, Field(ge=0, description="Energy in kcal")]
    protein: Annotated[float, Field(ge=0, description="Protein in grams")]
    carbs: Annotated[float, Field(ge=0, description="Carbohydrates in grams")]
    fat: Annotated[float, Field(ge=0, description="Fat in grams")]


class IngredientPrediction(BaseModel):
    """One detected-ingredient label with a confidence score. Immutable once produced."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: Annotated[str, Field(min_length=1, max_length=100, description="Ingredient name")]
    confidence: Annotated[float, Field(ge=0.0, le=1.0, description="Confidence score (0.0-1.0)")]
    category: Annotated[Optional[IngredientCategory], Field(None, description="Optional ingredient category")]
    nutritional_value: Annotated[
        Optional[NutritionalValue], Field(None, description="Optional per-portion nutrition estimate")
    ]


class IngredientAnalysisResult(BaseModel):
    """Result of analyzing one image.

    `ingredients` keeps the order produced by the model (descending confidence
    for the built-in model) and is never re-sorted. An analysis with no
    ingredients is not representable: that case is EmptyResultError.
    """

    model_config = ConfigDict(frozen=True)

    ingredients: Annotated[
        List[IngredientPrediction], Field(min_length=1, description="Predictions that passed the confidence filter")
    ]
    processing_time_ms: Annotated[float, Field(ge=0, description="Wall-clock analysis time in milliseconds")]
    image_quality: Annotated[ImageQuality, Field(description="Step function of the aggregate confidence")]
    possible_dishes: Annotated[List[str], Field(default_factory=list, description="Plausible dish names")]
    confidence: Annotated[
        float, Field(ge=0.0, le=1.0, description="Mean confidence of the included predictions")
    ]

    @property
    def ingredient_names(self) -> list[str]:
        return [ingredient.name for ingredient in self.ingredients]


class ModelConfig(BaseModel):
    """Per-request overrides for ingredient analysis."""

    threshold: Annotated[
        Optional[float], Field(None, ge=0.0, le=1.0, description="Confidence threshold (default: MIN_INGREDIENT_CONFIDENCE)")
    ]
    max_predictions: Annotated[
        Optional[int], Field(None, ge=1, le=100, description="Maximum predictions to keep (default: MAX_PREDICTIONS)")
    ]
    excluded_ingredients: Annotated[
        List[str], Field(default_factory=list, description="Ingredient names dropped before filtering (case-insensitive)")
    ]

    @field_validator("excluded_ingredients", mode="before")
    @classmethod
    def parse_excluded(cls, v) -> list[str]:
        return _split_unique(v)


class MacroRatios(BaseModel):
    """Macro split in percent of calories. Not required to sum to 100."""

    protein: Annotated[float, Field(ge=0, le=100)]
    carbs: Annotated[float, Field(ge=0, le=100)]
    fat: Annotated[float, Field(ge=0, le=100)]


class NutritionalPreference(BaseModel):
    """User nutritional preferences consumed by the recipe generator."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    goal: Annotated[Goal, Field(Goal.MAINTENANCE, description="Dietary objective")]
    calorie_target: Annotated[
        Optional[int], Field(None, gt=0, le=10000, description="Calories per serving to aim for")
    ]
    macro_ratios: Annotated[Optional[MacroRatios], Field(None, description="Macro split in percent of calories")]
    dietary_restrictions: Annotated[
        List[str], Field(default_factory=list, description="Dietary restrictions (vegetarian, gluten-free, ...)")
    ]
    allergies: Annotated[List[str], Field(default_factory=list, description="Allergies / ingredients to avoid")]
    cuisine_preferences: Annotated[List[str], Field(default_factory=list, description="Preferred cuisines, in order")]

    @field_validator("goal", mode="before")
    @classmethod
    def normalize_goal(cls, v):
        return _normalize_goal(v)

    @field_validator("dietary_restrictions", "allergies", mode="before")
    @classmethod
    def parse_name_set(cls, v) -> list[str]:
        """Treat restrictions and allergies as sets: de-duplicated, first spelling kept."""
        return _split_unique(v)

    @field_validator("cuisine_preferences", mode="before")
    @classmethod
    def parse_cuisines(cls, v) -> list[str]:
        return _split_unique(v)


class RecipeIngredient(BaseModel):
    """Ingredient line of a generated recipe."""

    name: Annotated[str, Field(min_length=1)]
    amount: Annotated[str, Field(min_length=1, description="Human-readable quantity, e.g. '1 cup'")]
    calories: Annotated[float, Field(ge=0)]


class NutritionInfo(BaseModel):
    """Per-serving macro summary of a recipe."""

    calories: Annotated[float, Field(ge=0)]
    protein: Annotated[float, Field(ge=0)]
    carbs: Annotated[float, Field(ge=0)]
    fat: Annotated[float, Field(ge=0)]


class Recipe(BaseModel):
    """Generated recipe record.

    `instructions` are ordered steps, displayed 1-indexed.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: Annotated[str, Field(min_length=1, max_length=200, description="Recipe title (1-200 chars)")]
    ingredients: Annotated[List[RecipeIngredient], Field(default_factory=list)]
    instructions: Annotated[List[str], Field(min_length=1, max_length=100, description="Ordered cooking steps")]
    nutritional_info: NutritionInfo
    cooking_time: Annotated[int, Field(ge=0, le=1440, description="Total time in minutes")]
    servings: Annotated[int, Field(ge=1, le=100)]
    difficulty: Annotated[str, Field(min_length=1)]
    tags: Annotated[List[str], Field(default_factory=list)]
    image_url: Annotated[str, Field(max_length=500)]


class OutcomeStatus(str, Enum):
    """How a recommendation request ended."""

    GENERATED = "generated"            # analysis + generator succeeded
    FALLBACK = "fallback"              # analysis failed, catalog match used
    NO_INGREDIENTS = "no_ingredients"  # nothing passed the filter, catalog match used
    INVALID_IMAGE = "invalid_image"
    FAILED = "failed"
    SUPERSEDED = "superseded"          # a newer request replaced this one


class RecommendationOutcome(BaseModel):
    """Explicit success/failure result of one pipeline run."""

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    recipe: Annotated[Optional[Recipe], Field(None)]
    analysis: Annotated[Optional[IngredientAnalysisResult], Field(None)]
    message: Annotated[Optional[str], Field(None, description="User-facing explanation for non-generated outcomes")]

    @model_validator(mode="after")
    def check_status_payload(self) -> "RecommendationOutcome":
        """Generated outcomes carry recipe and analysis; blocking outcomes carry no recipe."""
        if self.status is OutcomeStatus.GENERATED and (self.recipe is None or self.analysis is None):
            raise ValueError("A generated outcome requires both recipe and analysis")
        if self.status in (OutcomeStatus.INVALID_IMAGE, OutcomeStatus.SUPERSEDED) and self.recipe is not None:
            raise ValueError(f"A {self.status.value} outcome cannot carry a recipe")
        return self

    @property
    def ok(self) -> bool:
        """True when a recipe was produced, by the generator or the fallback."""
        return self.recipe is not None


ACTIVITY_LABELS = ["Sedentary", "Lightly Active", "Moderately Active", "Very Active", "Extremely Active"]


class UserProfile(BaseModel):
    """Dietary profile as filled in on the profile form.

    Mirrors the profile record of the hosted backend: camelCase goal values,
    allergies as one comma-separated string, activity level on a 1-5 slider.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Annotated[Optional[str], Field(None, max_length=100)]
    age: Annotated[Optional[int], Field(None, ge=1, le=120)]
    goal: Annotated[Goal, Field(Goal.WEIGHT_LOSS)]
    dietary_preferences: Annotated[List[str], Field(default_factory=list)]
    activity_level: Annotated[int, Field(2, ge=1, le=5)]
    allergies: Annotated[str, Field("", max_length=500, description="Comma-separated allergies")]
    cuisine_preferences: Annotated[List[str], Field(default_factory=list)]
    calorie_target: Annotated[Optional[int], Field(None, gt=0, le=10000)]

    @field_validator("goal", mode="before")
    @classmethod
    def normalize_goal(cls, v):
        return _normalize_goal(v)

    @property
    def activity_label(self) -> str:
        return ACTIVITY_LABELS[self.activity_level - 1]

    def to_preferences(self) -> NutritionalPreference:
        """Build the generator's NutritionalPreference from the form fields."""
        return NutritionalPreference(
            goal=self.goal,
            calorie_target=self.calorie_target,
            dietary_restrictions=self.dietary_preferences,
            allergies=self.allergies,
            cuisine_preferences=self.cuisine_preferences,
        )
