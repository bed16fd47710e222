"""Response validation for parsed Gemini replies.

The parsed JSON is treated as opaque until it validates against
``GenerationResult``. Pydantic reports every problem; only the first one is
surfaced, as an ``InvalidRecipeShapeError`` naming the failing field.
"""

from typing import Any, Sequence, Union

from pydantic import ValidationError

from src.models.errors import InvalidRecipeShapeError
from src.models.models import GenerationResult
from src.utils.logger import logger


def format_field_path(loc: Sequence[Union[str, int]]) -> str:
    """Render a pydantic error location as a dotted path.

    >>> format_field_path(("recipe", "ingredients", 0, "quantity"))
    'recipe.ingredients[0].quantity'
    """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "response"


def validate_generation_result(parsed: Any) -> GenerationResult:
    """Validate a parsed model reply and build the GenerationResult.

    Macros are normalized while validating, so the returned recipe always
    carries canonical '<number><unit>' strings.

    Args:
        parsed: Output of json.loads on the cleaned reply (any JSON value).

    Returns:
        Validated GenerationResult.

    Raises:
        InvalidRecipeShapeError: If the reply is not a complete recipe. The
            error names the first failing field.
    """
    if not isinstance(parsed, dict):
        raise InvalidRecipeShapeError("response", f"expected a JSON object, got {type(parsed).__name__}")

    try:
        result = GenerationResult.model_validate(parsed)
    except ValidationError as e:
        first = e.errors()[0]
        field = format_field_path(first["loc"])
        logger.warning(f"Recipe validation failed at {field}: {first['msg']} ({e.error_count()} error(s))")
        raise InvalidRecipeShapeError(field, first["msg"]) from e

    if result.rationale is None:
        logger.debug("Reply has no rationale (thought); continuing without it")

    return result
