"""Recipe generation client for the Gemini API.

One call to generate() is one outbound request:

1. Reject blank input (EmptyInputError, no network call)
2. Build the user prompt and call Gemini with the static system instructions
3. Strip code-fence markers from the reply and parse it as JSON
4. Validate the shape and normalize macros into a GenerationResult

Failures are raised as typed GenerationError subclasses. Nothing is retried or
cached here: retry policy belongs to the caller.
"""

import asyncio
import json
import re
from typing import Any, Optional

from google import genai
from google.genai import types

from src.models.errors import EmptyInputError, MalformedResponseError, UpstreamError
from src.models.models import GenerationResult
from src.prompts.prompts import PROMPT_VERSION, SYSTEM_INSTRUCTIONS, build_prompt
from src.utils.config import config
from src.utils.logger import logger
from src.validation.validator import validate_generation_result

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(raw_text: str) -> str:
    """Remove surrounding whitespace and every ``` / ```json marker."""
    return _CODE_FENCE.sub("", raw_text.strip()).strip()


def parse_model_reply(raw_text: Optional[str]) -> Any:
    """Parse a raw Gemini reply into an untrusted JSON value.

    Args:
        raw_text: Reply text, possibly wrapped in a fenced code block.

    Returns:
        Whatever json.loads produces; the shape is not checked here.

    Raises:
        MalformedResponseError: If the reply is empty or not valid JSON.
    """
    if not raw_text or not raw_text.strip():
        raise MalformedResponseError("Gemini returned an empty response", raw_text)

    cleaned = strip_code_fences(raw_text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse JSON from Gemini response: {e}")
        raise MalformedResponseError(f"The AI generated an invalid response format: {e}", raw_text) from e


def create_gemini_client(api_key: Optional[str] = None) -> genai.Client:
    """Create a Gemini SDK client from configuration.

    Raises:
        ValueError: If configuration is invalid (e.g. GEMINI_API_KEY missing).
    """
    if api_key is None:
        config.validate()
        api_key = config.GEMINI_API_KEY
    return genai.Client(api_key=api_key)


class GeminiRecipeClient:
    """Generate validated recipes with a Gemini model.

    The SDK client is injected so sessions can share one handle and tests can
    substitute a mock.
    """

    def __init__(
        self,
        client: genai.Client,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> None:
        self.client = client
        self.model = model or config.GEMINI_MODEL
        self.temperature = config.TEMPERATURE if temperature is None else temperature
        self.max_output_tokens = max_output_tokens or config.MAX_OUTPUT_TOKENS

    def _generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTIONS,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )

    async def _request(self, prompt: str) -> Optional[str]:
        try:
            # Sync SDK call runs in a worker thread; no timeout, the caller owns cancellation
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=prompt,
                config=self._generation_config(),
            )
            # .text raises on blocked or candidate-less responses
            return response.text
        except Exception as e:
            logger.error(f"Gemini request failed ({type(e).__name__}): {e}")
            raise UpstreamError(e) from e

    async def generate(
        self,
        user_input: str,
        diet_filter: str = "none",
        meal_type: Optional[str] = None,
    ) -> GenerationResult:
        """Generate one recipe for the user's request.

        Args:
            user_input: Ingredients or recipe request; must not be blank.
            diet_filter: Diet modifier ("none"/"any" disables it).
            meal_type: Optional meal type.

        Returns:
            Validated GenerationResult with canonical macros.

        Raises:
            EmptyInputError: Blank user_input; no request is made.
            UpstreamError: The Gemini call failed.
            MalformedResponseError: The reply is not JSON.
            InvalidRecipeShapeError: The JSON is not a complete recipe.
        """
        if not user_input or not user_input.strip():
            raise EmptyInputError()

        prompt = build_prompt(user_input, diet_filter, meal_type)
        logger.info(f"Requesting recipe from {self.model} (prompt v{PROMPT_VERSION}, {len(prompt)} chars)")
        logger.debug(f"Prompt: {prompt}")

        raw_text = await self._request(prompt)
        parsed = parse_model_reply(raw_text)
        result = validate_generation_result(parsed)

        logger.info(f"Generated recipe: {result.recipe.name}")
        return result
