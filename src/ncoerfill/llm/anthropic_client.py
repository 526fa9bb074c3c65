from typing import Any, Dict, Optional
from loguru import logger
import anthropic
from anthropic import AsyncAnthropic

from ncoerfill.utils.settings.core import AnthropicSettings
from ncoerfill.utils.settings.factory import settings_factory
from ncoerfill.llm.base import BaseChatClient, ChatResponse, ContentSegment
from ncoerfill.llm.errors import LLMError, LLMErrorKind, classify_status


class AnthropicChatClient(BaseChatClient):
    """Claude messages client with optional extended thinking"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        use_thinking: Optional[bool] = None,
        anthropic_settings: Optional[AnthropicSettings] = None,
        async_client: Optional[AsyncAnthropic] = None,
    ):
        """
        Initialize Anthropic client

        Args:
            api_key: Anthropic API key (uses settings if not provided)
            model: Default model to use (uses settings if not provided)
            use_thinking: Enable extended thinking on Opus models (uses settings if not provided)
            anthropic_settings: Anthropic settings object (creates from factory if not provided)
            async_client: Pre-built SDK client, mainly for tests
        """
        settings = anthropic_settings or settings_factory.create_anthropic_settings()

        super().__init__(api_key=api_key or settings.api_key)
        self.default_model = model or settings.model
        self.use_thinking = settings.use_thinking if use_thinking is None else use_thinking
        self.thinking_budget = settings.thinking_budget
        self.thinking_max_tokens = settings.thinking_max_tokens

        if not self.api_key and async_client is None:
            raise LLMError(LLMErrorKind.AUTH, "Anthropic API key is required.")

        self._async_client = async_client or AsyncAnthropic(api_key=self.api_key)

    def _get_model(self, model: Optional[str] = None) -> str:
        """Get model name, using default if not specified"""
        return model or self.default_model

    def _thinking_enabled(self, model: str) -> bool:
        return self.use_thinking and "opus" in model

    def _build_params(self, prompt: str, system_prompt: str, max_tokens: int, model: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self._thinking_enabled(model):
            # thinking requests carry the system prompt inside the user turn
            params["max_tokens"] = self.thinking_max_tokens
            params["thinking"] = {"type": "enabled", "budget_tokens": self.thinking_budget}
            params["messages"][0]["content"] = f"{system_prompt}\n\n{prompt}"
        else:
            params["system"] = system_prompt
        return params

    def _create_response(self, response: Any) -> ChatResponse:
        """Convert an SDK message to the standardized format"""
        usage = getattr(response, "usage", None)
        return ChatResponse(
            segments=[
                ContentSegment(type=block.type, text=getattr(block, "text", None))
                for block in (response.content or [])
            ],
            model=getattr(response, "model", None),
            stop_reason=getattr(response, "stop_reason", None),
            usage={
                "input_tokens": usage.input_tokens if usage else 0,
                "output_tokens": usage.output_tokens if usage else 0,
            },
        )

    async def create_message(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> ChatResponse:
        params = self._build_params(prompt, system_prompt, self._get_max_tokens(max_tokens), self._get_model(model))
        try:
            response = await self._async_client.messages.create(**params)
        except anthropic.APIStatusError as e:
            logger.debug(f"Anthropic API status error {e.status_code}: {e.message}")
            raise classify_status(e.status_code, e.message) from e
        except anthropic.APIError as e:
            logger.debug(f"Anthropic API error: {e}")
            raise LLMError(LLMErrorKind.TRANSIENT, str(e)) from e

        return self._create_response(response)
