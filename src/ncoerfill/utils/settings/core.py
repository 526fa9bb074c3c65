from pydantic import Field
from .base import ABCBaseSettings


class AnthropicSettings(ABCBaseSettings):
    """Anthropic API settings"""
    api_key: str | None = Field(default=None, description="Anthropic API key")
    model: str = Field(default="claude-sonnet-4-20250514", description="Default Claude model")
    use_thinking: bool = Field(default=True, description="Enable extended thinking on models that support it")
    thinking_budget: int = Field(default=5000, description="Token budget for extended thinking")
    thinking_max_tokens: int = Field(default=16000, description="Max tokens for a request with thinking enabled")

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "ANTHROPIC_"


class OpenAISettings(ABCBaseSettings):
    """OpenAI API settings"""
    api_key: str | None = Field(default=None, description="OpenAI API key")
    model: str = Field(default="gpt-5-mini", description="Default OpenAI model")
    base_url: str | None = Field(default=None, description="Custom OpenAI API base URL")

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "OPENAI_"


class AppSettings(ABCBaseSettings):
    """Application settings"""
    app_name: str = Field(default="ncoerfill", description="Application name")
    llm_provider: str = Field(default="anthropic", description="Default LLM provider: 'anthropic' or 'openai'")
    max_retries: int = Field(default=3, description="Retries after the first attempt of a generation call")
    llm_config_file: str = Field(default="llm-config.json", description="Local JSON file holding an apiKey property")

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "APP_"
