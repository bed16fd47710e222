"""Error taxonomy for recipe generation.

Every failure of a single generation is one of four kinds. Each exception
carries its ``ErrorKind`` and a message that can be shown to the user as-is.
None of them are retried inside the generation pipeline.
"""

from typing import Optional

from src.models.models import ErrorKind


class GenerationError(Exception):
    """Base class for failures of a single recipe generation."""

    kind: ErrorKind
    user_message: str = "Failed to generate recipe. Please try again."


class EmptyInputError(GenerationError):
    """Request text was blank; raised before any network call."""

    kind = ErrorKind.EMPTY_INPUT
    user_message = "Please enter ingredients or a recipe request."

    def __init__(self, message: str = "Please provide ingredients or recipe preferences") -> None:
        super().__init__(message)


class UpstreamError(GenerationError):
    """Transport or service failure while calling the Gemini API."""

    kind = ErrorKind.UPSTREAM
    user_message = "The recipe service is unavailable right now. Please try again."

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Gemini request failed: {cause}")
        self.cause = cause


class MalformedResponseError(GenerationError):
    """Model reply could not be parsed as JSON."""

    kind = ErrorKind.MALFORMED_RESPONSE
    user_message = "The AI generated an invalid response format. Please try again."

    def __init__(self, message: str, raw_text: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class InvalidRecipeShapeError(GenerationError):
    """Reply parsed but does not describe a complete recipe.

    Attributes:
        field: Dotted path of the first failing field, e.g. ``recipe.steps``.
    """

    kind = ErrorKind.INVALID_RECIPE_SHAPE
    user_message = "The AI response was missing recipe details. Please try again."

    def __init__(self, field: str, detail: str = "") -> None:
        message = f"Invalid recipe field '{field}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.field = field
        self.detail = detail
