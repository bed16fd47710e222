"""Data models and schemas for the recipe generation session.

Defines Pydantic models for the generation request, the validated recipe
returned by Gemini and the session history. Wire names from the model reply
(``recipeName``, ``ingredient``, ``thought``) are mapped through aliases.
All recipe models are frozen: once validated a recipe is never mutated.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Generic, Literal, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from src.validation.macros import MACRO_UNITS, canonical_macro_pattern, normalize_macro_value

MealType = Literal["breakfast", "lunch", "dinner", "snack", "soup"]

DIET_FILTER_SENTINELS = ("any", "none", "")


class SessionStatus(str, Enum):
    """Lifecycle of a recipe session. IDLE is only ever the initial state."""

    IDLE = "idle"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Failure categories surfaced to the session."""

    EMPTY_INPUT = "empty_input"
    UPSTREAM = "upstream"
    MALFORMED_RESPONSE = "malformed_response"
    INVALID_RECIPE_SHAPE = "invalid_recipe_shape"


NonEmptyStr = Annotated[str, Field(min_length=1)]


class RecipeRequest(BaseModel):
    """Input schema for a single generation request.

    Whitespace is stripped; a blank diet filter falls back to "none".
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    message: Annotated[
        str,
        Field(min_length=1, max_length=2000, description="Ingredients or recipe request (1-2000 chars)"),
    ]
    diet_filter: Annotated[
        str,
        Field(max_length=100, description="Diet modifier, e.g. 'vegetarian'; 'none'/'any' disables it"),
    ] = "none"
    meal_type: Annotated[
        Optional[MealType],
        Field(description="Optional meal type: breakfast, lunch, dinner, snack or soup"),
    ] = None

    @field_validator("diet_filter", mode="before")
    @classmethod
    def default_blank_diet_filter(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return "none"
        return v

    @field_validator("meal_type", mode="before")
    @classmethod
    def lowercase_meal_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @property
    def has_diet_filter(self) -> bool:
        return self.diet_filter.lower() not in DIET_FILTER_SENTINELS


class Ingredient(BaseModel):
    """One ingredient line; order within a recipe is the listing order."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True, populate_by_name=True)

    name: Annotated[str, Field(alias="ingredient", min_length=1, description="Ingredient name")]
    quantity: Annotated[str, Field(min_length=1, description="Free-form amount, e.g. '30g' or '1 tsp'")]


class Macros(BaseModel):
    """Macros as canonical '<number><unit>' strings.

    Raw values may be numbers or strings; they are normalized on the way in.
    Negative numbers, booleans and other types are rejected.
    """

    model_config = ConfigDict(frozen=True)

    protein: str
    carbs: str
    fats: str
    calories: str

    @field_validator("protein", "carbs", "fats", "calories", mode="before")
    @classmethod
    def normalize_macro(cls, v: Any, info: ValidationInfo) -> str:
        unit = MACRO_UNITS[info.field_name]
        if isinstance(v, bool) or not isinstance(v, (str, int, float)):
            raise ValueError(f"{info.field_name} must be a number or a string, got {type(v).__name__}")
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError(f"{info.field_name} must be a finite number, got {v}")
        if isinstance(v, (int, float)) and v < 0:
            raise ValueError(f"{info.field_name} must not be negative, got {v}")
        if isinstance(v, str) and (not v.strip() or v.strip().startswith("-")):
            raise ValueError(f"{info.field_name} must be a non-negative amount, got {v!r}")

        normalized = normalize_macro_value(v, unit)
        if not canonical_macro_pattern(unit).match(normalized):
            raise ValueError(f"{info.field_name} could not be normalized: {v!r}")
        return normalized


class Recipe(BaseModel):
    """Validated recipe: name, ingredients, macros and steps."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True, populate_by_name=True)

    name: Annotated[str, Field(alias="recipeName", min_length=1, description="Descriptive recipe name")]
    ingredients: Annotated[Tuple[Ingredient, ...], Field(description="Ingredients in listing order")]
    macros: Macros
    steps: Annotated[
        Tuple[NonEmptyStr, ...],
        Field(min_length=1, description="Cooking steps in execution order (prompted to at most 6)"),
    ]


class GenerationResult(BaseModel):
    """Recipe plus the model's advisory rationale (wire key ``thought``)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rationale: Annotated[
        Optional[str],
        Field(alias="thought", description="Model's explanation of its choices; advisory only"),
    ] = None
    recipe: Recipe

    @field_validator("rationale", mode="before")
    @classmethod
    def drop_invalid_rationale(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and v.strip():
            return v.strip()
        return None


class HistoryEntry(BaseModel):
    """A past successful recipe and when it was generated."""

    model_config = ConfigDict(frozen=True)

    recipe: Recipe
    created_at: datetime


T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: Exception


Outcome = Union[Ok[GenerationResult], Err]
