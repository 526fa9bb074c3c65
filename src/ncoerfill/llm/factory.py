import asyncio
from typing import Literal, Optional, get_args
from loguru import logger

from ncoerfill.utils.settings.core import AppSettings
from ncoerfill.utils.settings.factory import settings_factory
from ncoerfill.llm.base import BaseChatClient
from ncoerfill.llm.anthropic_client import AnthropicChatClient
from ncoerfill.llm.openai_client import OpenAIChatClient
from ncoerfill.llm.client import LLMClient, SleepFn
from ncoerfill.llm.credentials import resolve_api_key

ProviderType = Literal["anthropic", "openai"]
PROVIDERS = get_args(ProviderType)


class LLMClientFactory:
    """
    Factory for the resilient generation client.

    Resolves credentials, builds the provider chat client and wraps it in an
    ``LLMClient`` configured from app settings.
    """

    def __init__(self, provider: ProviderType = "anthropic", app_settings: Optional[AppSettings] = None):
        provider = provider.lower()  # type: ignore[assignment]
        if provider not in PROVIDERS:
            raise ValueError(f"Unknown provider: {provider}. Use one of: {', '.join(PROVIDERS)}")
        self.provider = provider
        self.app_settings = app_settings or settings_factory.create_app_settings()

    @classmethod
    def create_from_default(cls, provider: Optional[str] = None) -> "LLMClientFactory":
        """Create a factory for ``provider`` or, when omitted, APP_LLM_PROVIDER."""
        app_settings = settings_factory.create_app_settings()
        return cls(provider=provider or app_settings.llm_provider, app_settings=app_settings)  # type: ignore[arg-type]

    def create_chat_client(self, api_key: Optional[str] = None, model: Optional[str] = None) -> BaseChatClient:
        key = resolve_api_key(api_key, self.provider, self.app_settings.llm_config_file)
        logger.debug(f"Creating {self.provider} chat client")
        match self.provider:
            case "anthropic":
                return AnthropicChatClient(api_key=key, model=model)
            case "openai":
                return OpenAIChatClient(api_key=key, model=model)
            case _:
                raise ValueError(f"Unknown provider: {self.provider}")

    def create_client(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> LLMClient:
        return LLMClient(
            self.create_chat_client(api_key=api_key, model=model),
            max_retries=self.app_settings.max_retries,
            sleep=sleep,
        )
