"""LLM clients with retry, backoff and error classification"""

from ncoerfill.llm.base import BaseClient, BaseChatClient, ChatResponse, ContentSegment
from ncoerfill.llm.errors import LLMError, LLMErrorKind, classify_status
from ncoerfill.llm.anthropic_client import AnthropicChatClient
from ncoerfill.llm.openai_client import OpenAIChatClient
from ncoerfill.llm.credentials import resolve_api_key
from ncoerfill.llm.client import LLMClient, backoff_seconds
from ncoerfill.llm.factory import LLMClientFactory, ProviderType, PROVIDERS

__all__ = [
    "BaseClient",
    "BaseChatClient",
    "ChatResponse",
    "ContentSegment",
    "LLMError",
    "LLMErrorKind",
    "classify_status",
    "AnthropicChatClient",
    "OpenAIChatClient",
    "resolve_api_key",
    "LLMClient",
    "backoff_seconds",
    "LLMClientFactory",
    "ProviderType",
    "PROVIDERS",
]
