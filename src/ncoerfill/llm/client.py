"""
Resilient generation client.

Wraps a provider chat client with bounded retries. Each retryable failure
waits for a backoff that depends on its classification before the next
attempt; non-retryable failures propagate immediately and an exhausted
retry budget surfaces as a ``max_retries`` error.
"""

import asyncio
from typing import Awaitable, Callable, Optional
from loguru import logger
from tenacity import AsyncRetrying, RetryCallState, RetryError, retry_if_exception, stop_after_attempt

from ncoerfill.llm.base import BaseChatClient
from ncoerfill.llm.errors import LLMError, LLMErrorKind

SleepFn = Callable[[float], Awaitable[None]]

DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_SECONDS = 1.0


def backoff_seconds(error: BaseException, attempt: int) -> float:
    """Delay before retrying after ``error`` on the zero-based ``attempt``."""
    if not isinstance(error, LLMError):
        return DEFAULT_BACKOFF_SECONDS
    match error.kind:
        case LLMErrorKind.RATE_LIMITED:
            return float(2 ** (attempt + 1))
        case LLMErrorKind.SERVER_ERROR:
            return float(2 * (attempt + 1))
        case _:
            return DEFAULT_BACKOFF_SECONDS


def _is_retryable(error: BaseException) -> bool:
    return isinstance(error, LLMError) and error.retryable


class LLMClient:
    """Single-prompt generation with retry, backoff and error classification"""

    def __init__(
        self,
        chat_client: BaseChatClient,
        max_retries: int = DEFAULT_MAX_RETRIES,
        sleep: SleepFn = asyncio.sleep,
        model: Optional[str] = None,
    ):
        """
        Args:
            chat_client: Provider client issuing the actual request
            max_retries: Retries allowed after the first attempt
            sleep: Awaitable sleep used between attempts
            model: Model override passed to every request
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.chat_client = chat_client
        self.max_retries = max_retries
        self.model = model
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def _wait(self, retry_state: RetryCallState) -> float:
        return backoff_seconds(retry_state.outcome.exception(), retry_state.attempt_number - 1)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        kind = error.kind.value if isinstance(error, LLMError) else type(error).__name__
        logger.info(
            f"  {kind} on attempt {retry_state.attempt_number}/{self.max_attempts}, "
            f"waiting {retry_state.next_action.sleep:g}s..."
        )

    async def _attempt(self, prompt: str, system_prompt: str, max_tokens: int) -> str:
        response = await self.chat_client.create_message(
            prompt=prompt,
            system_prompt=system_prompt,
            max_tokens=max_tokens,
            model=self.model,
        )
        text = response.first_text()
        if text is None:
            raise LLMError(LLMErrorKind.EMPTY_RESPONSE, "Empty response from API")
        return text

    async def generate(self, prompt: str, system_prompt: str, max_tokens: int = 500) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Rendered user prompt
            system_prompt: System instructions
            max_tokens: Token budget for the completion

        Returns:
            str: Text of the first text-bearing response segment

        Raises:
            LLMError: ``auth`` immediately, or ``max_retries`` once the budget is spent
        """
        retrying = AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=retry_if_exception(_is_retryable),
            before_sleep=self._log_retry,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.debug(f"  Retry attempt {attempt.retry_state.attempt_number - 1}/{self.max_retries}...")
                    return await self._attempt(prompt, system_prompt, max_tokens)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            raise LLMError(
                LLMErrorKind.MAX_RETRIES,
                f"Failed after {self.max_attempts} attempts: {last_error}",
            ) from last_error
