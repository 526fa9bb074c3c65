"""Test doubles for the provider client and backoff sleep."""

from typing import Any, Dict, List, Optional

from ncoerfill.llm import BaseChatClient, ChatResponse, ContentSegment, LLMError, LLMErrorKind


class ScriptedChatClient(BaseChatClient):
    """Provider client that replays a fixed list of outcomes; the last one repeats."""

    def __init__(self, outcomes: List[Any]):
        super().__init__(api_key="test-key")
        self.outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    async def create_message(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> ChatResponse:
        self.calls.append(
            {"prompt": prompt, "system_prompt": system_prompt, "max_tokens": max_tokens, "model": model}
        )
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, ChatResponse):
            return outcome
        return ChatResponse(segments=[ContentSegment(type="text", text=outcome)])

    def _get_model(self, model: Optional[str] = None) -> str:
        return model or "scripted-model"


class SleepRecorder:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(float(seconds))


def llm_error(kind: LLMErrorKind, message: str = "boom") -> LLMError:
    return LLMError(kind, message)
