from typing import Any, Optional
from loguru import logger
import openai
from openai import AsyncOpenAI

from ncoerfill.utils.settings.core import OpenAISettings
from ncoerfill.utils.settings.factory import settings_factory
from ncoerfill.llm.base import BaseChatClient, ChatResponse, ContentSegment
from ncoerfill.llm.errors import LLMError, LLMErrorKind, classify_status


class OpenAIChatClient(BaseChatClient):
    """OpenAI chat completion client"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        openai_settings: Optional[OpenAISettings] = None,
        async_client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize OpenAI client

        Args:
            api_key: OpenAI API key (uses settings if not provided)
            model: Default model to use (uses settings if not provided)
            openai_settings: OpenAI settings object (creates from factory if not provided)
            async_client: Pre-built SDK client, mainly for tests
        """
        settings = openai_settings or settings_factory.create_openai_settings()

        super().__init__(api_key=api_key or settings.api_key)
        self.default_model = model or settings.model

        if not self.api_key and async_client is None:
            raise LLMError(LLMErrorKind.AUTH, "OpenAI API key is required.")

        client_config = {"api_key": self.api_key}
        if settings.base_url:
            client_config["base_url"] = settings.base_url

        self._async_client = async_client or AsyncOpenAI(**client_config)

    def _get_model(self, model: Optional[str] = None) -> str:
        """Get model name, using default if not specified"""
        return model or self.default_model

    def _create_response(self, response: Any) -> ChatResponse:
        segments = []
        if response.choices:
            message = response.choices[0].message
            reasoning = getattr(message, "reasoning_content", None)
            if reasoning:
                segments.append(ContentSegment(type="reasoning", text=reasoning))
            if message.content is not None:
                segments.append(ContentSegment(type="text", text=message.content))

        usage = response.usage
        return ChatResponse(
            segments=segments,
            model=response.model,
            stop_reason=response.choices[0].finish_reason if response.choices else None,
            usage={
                "input_tokens": usage.prompt_tokens if usage else 0,
                "output_tokens": usage.completion_tokens if usage else 0,
            },
        )

    async def create_message(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> ChatResponse:
        try:
            response = await self._async_client.chat.completions.create(
                model=self._get_model(model),
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                max_completion_tokens=self._get_max_tokens(max_tokens),
            )
        except openai.APIStatusError as e:
            logger.debug(f"OpenAI API status error {e.status_code}: {e.message}")
            raise classify_status(e.status_code, e.message) from e
        except openai.APIError as e:
            logger.debug(f"OpenAI API error: {e}")
            raise LLMError(LLMErrorKind.TRANSIENT, str(e)) from e

        return self._create_response(response)
