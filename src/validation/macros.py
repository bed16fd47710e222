"""Macro value normalization.

Gemini returns macros in whatever shape it likes: ``30``, ``"30"``, ``"30g"``,
``"30gg"``, ``"415 kcal kcal"`` or ``"about 30 grams"``. Everything is coerced
into ``"<number><unit>"`` with the unit exactly once.

The last rule is lossy: non-numeric characters are dropped and a value with
no digits at all becomes ``0``.
"""

import math
import re
from typing import Union

MACRO_UNITS = {
    "protein": "g",
    "carbs": "g",
    "fats": "g",
    "calories": "kcal",
}

_PLAIN_NUMBER = re.compile(r"\d+(?:\.\d+)?")


def canonical_macro_pattern(unit: str) -> re.Pattern:
    """Regex a normalized macro string must fully match."""
    return re.compile(rf"^\d+(?:\.\d+)?{re.escape(unit)}$")


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    # Plain decimal notation, never scientific (1e-07 would break the pattern)
    return f"{value:.6f}".rstrip("0").rstrip(".")


def _best_effort_number(text: str) -> str:
    digits = re.sub(r"[^\d.]", "", text)
    if _PLAIN_NUMBER.fullmatch(digits):
        return digits
    match = _PLAIN_NUMBER.search(digits)
    return match.group() if match else "0"


def normalize_macro_value(value: Union[str, int, float], unit: str) -> str:
    """Normalize a macro value to ``"<number><unit>"``.

    Rules, in order:
    1. Finite non-negative numbers are formatted and suffixed with the unit.
    2. Strings containing the unit have trailing repeats collapsed to one and
       the whitespace between number and unit removed.
    3. Strings that are a plain number get the unit appended.
    4. Anything else keeps only digits and dots, then appends the unit.

    Args:
        value: Raw macro value from the model reply.
        unit: ``"g"`` or ``"kcal"``.

    Returns:
        Canonical macro string; never raises.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if math.isfinite(value) and value >= 0:
            return f"{_format_number(value)}{unit}"
        value = str(value)

    text = str(value).strip()

    if unit in text:
        collapsed = re.sub(rf"(?:\s*{re.escape(unit)})+\s*$", "", text).strip()
        if _PLAIN_NUMBER.fullmatch(collapsed):
            return f"{collapsed}{unit}"
        return f"{_best_effort_number(collapsed)}{unit}"

    if _PLAIN_NUMBER.fullmatch(text):
        return f"{text}{unit}"

    return f"{_best_effort_number(text)}{unit}"
