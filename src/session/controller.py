"""Recipe generation session.

RecipeSession owns all session state (input, current recipe, status, error,
history) and is the only thing that mutates it. Callers read state through
properties and change it through three operations: submit(),
select_from_history() and remove_from_history().

State machine::

    IDLE -> GENERATING -> SUCCEEDED | FAILED
    SUCCEEDED | FAILED -> GENERATING   (next accepted submit)

At most one generation is in flight per session. A submit while GENERATING is
rejected with a notice, so a stale reply can never overwrite a newer one.
Every accepted submit ends in SUCCEEDED or FAILED, including a generator that
raises an unexpected exception and a submit task that is cancelled (the
cancellation is re-raised after the session moves to FAILED).
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Tuple

from pydantic import ValidationError

from src.clients.gemini import GeminiRecipeClient, create_gemini_client
from src.models.errors import GenerationError, UpstreamError
from src.models.models import (
    Err,
    ErrorKind,
    GenerationResult,
    HistoryEntry,
    Ok,
    Outcome,
    Recipe,
    RecipeRequest,
    SessionStatus,
)
from src.session.history import RecipeHistory
from src.utils.config import config
from src.utils.logger import logger

EMPTY_INPUT_NOTICE = "Please enter ingredients or a recipe request."
IN_FLIGHT_NOTICE = "A recipe is already being generated. Please wait for it to finish."
CANCELLED_NOTICE = "Recipe generation was cancelled. Please try again."


class RecipeGenerator(Protocol):
    """Anything that turns a request into a GenerationResult (or raises GenerationError)."""

    async def generate(
        self, user_input: str, diet_filter: str = "none", meal_type: Optional[str] = None
    ) -> GenerationResult: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecipeSession:
    """In-memory recipe generation session for one user."""

    def __init__(
        self,
        generator: RecipeGenerator,
        history_limit: Optional[int] = None,
        clock: Callable[[], datetime] = _utc_now,
        session_id: Optional[str] = None,
    ) -> None:
        self._generator = generator
        self._clock = clock
        self.session_id = session_id or uuid.uuid4().hex[:8]

        self._input = ""
        self._diet_filter = config.DEFAULT_DIET_FILTER
        self._meal_type: Optional[str] = None
        self._status = SessionStatus.IDLE
        self._current: Optional[Recipe] = None
        self._rationale: Optional[str] = None
        self._error: Optional[ErrorKind] = None
        self._error_message: Optional[str] = None
        self._notice: Optional[str] = None
        self._history = RecipeHistory(limit=config.HISTORY_LIMIT if history_limit is None else history_limit)
        self._in_flight = False

    # Read-only state

    @property
    def input(self) -> str:
        return self._input

    @property
    def diet_filter(self) -> str:
        return self._diet_filter

    @property
    def meal_type(self) -> Optional[str]:
        return self._meal_type

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def current(self) -> Optional[Recipe]:
        return self._current

    @property
    def rationale(self) -> Optional[str]:
        """Advisory explanation for the latest generated recipe, if the model gave one."""
        return self._rationale

    @property
    def error(self) -> Optional[ErrorKind]:
        return self._error

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    @property
    def notice(self) -> Optional[str]:
        """User-facing message for the last rejected submit."""
        return self._notice

    @property
    def history(self) -> Tuple[HistoryEntry, ...]:
        return self._history.entries

    @property
    def is_generating(self) -> bool:
        return self._in_flight

    # Operations

    async def submit(
        self,
        user_input: str,
        diet_filter: Optional[str] = None,
        meal_type: Optional[str] = None,
    ) -> SessionStatus:
        """Generate a recipe for user_input and commit the outcome.

        Blank input and submits while a generation is in flight are rejected:
        ``notice`` is set, no request is made and the status does not change.

        Args:
            user_input: Ingredients or recipe request.
            diet_filter: Diet modifier; defaults to DEFAULT_DIET_FILTER.
            meal_type: Optional meal type (breakfast, lunch, dinner, snack, soup).

        Returns:
            Session status after the submit.
        """
        if self._in_flight:
            logger.warning("Submit rejected: generation already in flight", extra=self._log_context())
            self._notice = IN_FLIGHT_NOTICE
            return self._status

        if not user_input or not user_input.strip():
            logger.info("Submit rejected: empty input", extra=self._log_context())
            self._notice = EMPTY_INPUT_NOTICE
            return self._status

        try:
            request = RecipeRequest(
                message=user_input,
                diet_filter=config.DEFAULT_DIET_FILTER if diet_filter is None else diet_filter,
                meal_type=meal_type,
            )
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            logger.info(f"Submit rejected: invalid {field}: {first['msg']}", extra=self._log_context())
            self._notice = f"Invalid {field.replace('_', ' ')}: {first['msg']}"
            return self._status

        self._in_flight = True
        self._input = request.message
        self._diet_filter = request.diet_filter
        self._meal_type = request.meal_type
        self._error = None
        self._error_message = None
        self._notice = None
        self._transition(SessionStatus.GENERATING)

        try:
            outcome = await self._run_generation(request)
        except asyncio.CancelledError as e:
            self._commit_failure(UpstreamError(e), user_message=CANCELLED_NOTICE)
            raise
        finally:
            self._in_flight = False

        if isinstance(outcome, Ok):
            self._commit_success(outcome.value)
        else:
            self._commit_failure(outcome.error)
        return self._status

    def select_from_history(self, index: int) -> Recipe:
        """Make a history entry the current recipe without regenerating.

        Raises:
            IndexError: If index is out of range.
        """
        entry = self._history[index]
        self._current = entry.recipe
        self._rationale = None
        logger.debug(f"Selected '{entry.recipe.name}' from history", extra=self._log_context())
        return entry.recipe

    def remove_from_history(self, index: int) -> HistoryEntry:
        """Remove one history entry; the remaining entries keep their order.

        Raises:
            IndexError: If index is out of range.
        """
        entry = self._history.remove(index)
        logger.debug(f"Removed '{entry.recipe.name}' from history", extra=self._log_context())
        return entry

    # Internals

    async def _run_generation(self, request: RecipeRequest) -> Outcome:
        try:
            result = await self._generator.generate(request.message, request.diet_filter, request.meal_type)
        except GenerationError as e:
            return Err(e)
        except Exception as e:
            logger.error(
                f"Unexpected error from recipe generator: {type(e).__name__}: {e}",
                exc_info=True,
                extra=self._log_context(),
            )
            return Err(UpstreamError(e))
        return Ok(result)

    def _commit_success(self, result: GenerationResult) -> None:
        recipe = result.recipe
        self._current = recipe
        self._rationale = result.rationale
        inserted = self._history.add(recipe, self._clock())
        if not inserted:
            logger.debug(f"'{recipe.name}' already in history, not re-added", extra=self._log_context())
        self._transition(SessionStatus.SUCCEEDED)

    def _commit_failure(self, error: GenerationError, user_message: Optional[str] = None) -> None:
        self._error = error.kind
        self._error_message = user_message or error.user_message
        logger.warning(
            f"Recipe generation failed: {error}",
            extra={**self._log_context(), "error_kind": error.kind.value},
        )
        self._transition(SessionStatus.FAILED)

    def _transition(self, status: SessionStatus) -> None:
        logger.debug(f"Session {self._status.value} -> {status.value}", extra=self._log_context())
        self._status = status

    def _log_context(self) -> dict:
        return {"session_id": self.session_id, "status": self._status.value}


def initialize_recipe_session(client=None, history_limit: Optional[int] = None) -> RecipeSession:
    """Build a RecipeSession backed by Gemini.

    Args:
        client: Optional genai.Client to share between sessions. Created from
            GEMINI_API_KEY when omitted.
        history_limit: Optional override for HISTORY_LIMIT.

    Raises:
        ValueError: If a client must be created and configuration is invalid.
    """
    generator = GeminiRecipeClient(client or create_gemini_client())
    return RecipeSession(generator, history_limit=history_limit)
