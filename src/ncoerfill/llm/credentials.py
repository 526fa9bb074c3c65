"""API key resolution: explicit value, then environment, then a local JSON config file."""

from pathlib import Path
from typing import Optional
from loguru import logger

from ncoerfill.llm.errors import LLMError, LLMErrorKind
from ncoerfill.utils.file_utils import read_json_safe
from ncoerfill.utils.settings.factory import settings_factory

ENV_VARS = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


def _env_api_key(provider: str) -> Optional[str]:
    if provider == "anthropic":
        return settings_factory.create_anthropic_settings().api_key
    if provider == "openai":
        return settings_factory.create_openai_settings().api_key
    raise ValueError(f"Unknown provider: {provider}. Use 'anthropic' or 'openai'")


def _config_file_api_key(config_path: Path) -> Optional[str]:
    if not config_path.is_file():
        return None
    data = read_json_safe(config_path)
    if isinstance(data, dict) and data.get("apiKey"):
        return str(data["apiKey"])
    return None


def resolve_api_key(
    api_key: Optional[str] = None,
    provider: str = "anthropic",
    config_path: Optional[str | Path] = None,
) -> str:
    """
    Resolve the provider API key.

    Args:
        api_key: Key supplied by the caller, e.g. from ``--api-key``
        provider: 'anthropic' or 'openai', selects the environment variable
        config_path: JSON file with an ``apiKey`` property (defaults to the app setting)

    Returns:
        str: The first key found

    Raises:
        LLMError: ``auth`` kind naming every location that was checked
    """
    if api_key:
        return api_key

    env_key = _env_api_key(provider)
    if env_key:
        logger.debug(f"Using API key from {ENV_VARS[provider]}")
        return env_key

    path = Path(config_path or settings_factory.create_app_settings().llm_config_file)
    file_key = _config_file_api_key(path)
    if file_key:
        logger.debug(f"Using API key from {path}")
        return file_key

    raise LLMError(
        LLMErrorKind.AUTH,
        f"No API key found. Pass --api-key, set the {ENV_VARS[provider]} environment "
        f"variable, or add an apiKey property to {path}",
    )
