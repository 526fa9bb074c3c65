"""Classified LLM errors."""

from enum import StrEnum
from typing import Optional


class LLMErrorKind(StrEnum):
    AUTH = "auth"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    EMPTY_RESPONSE = "empty_response"
    TRANSIENT = "transient"
    MAX_RETRIES = "max_retries"


RETRYABLE_KINDS = frozenset({
    LLMErrorKind.RATE_LIMITED,
    LLMErrorKind.SERVER_ERROR,
    LLMErrorKind.EMPTY_RESPONSE,
    LLMErrorKind.TRANSIENT,
})


class LLMError(Exception):
    """
    Error raised by the LLM layer.

    ``kind`` is the classification callers dispatch on; ``retryable`` follows
    from it and tells the retry loop whether another attempt is allowed.
    """

    def __init__(self, kind: LLMErrorKind | str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = LLMErrorKind(kind)
        self.message = message
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    @property
    def aborts_run(self) -> bool:
        """Configuration-class failure that would repeat for every remaining field."""
        return not self.retryable and self.kind != LLMErrorKind.MAX_RETRIES

    def __repr__(self) -> str:
        return f"LLMError(kind={self.kind.value!r}, retryable={self.retryable}, message={self.message!r})"


def classify_status(status_code: Optional[int], message: str) -> LLMError:
    """Map an HTTP status from a provider SDK error onto an LLMError."""
    match status_code:
        case 401:
            return LLMError(LLMErrorKind.AUTH, f"Invalid API key: {message}", status_code)
        case 429:
            return LLMError(LLMErrorKind.RATE_LIMITED, f"Rate limited: {message}", status_code)
        case int() if status_code >= 500:
            return LLMError(LLMErrorKind.SERVER_ERROR, f"Server error ({status_code}): {message}", status_code)
        case _:
            return LLMError(LLMErrorKind.TRANSIENT, message, status_code)
