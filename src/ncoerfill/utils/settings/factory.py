"""
Settings Factory

Builds fresh settings objects on every call so environment changes made
between runs (or between tests) are always seen.
"""

from pathlib import Path
from typing import Optional

from ncoerfill.utils.settings.core import (
    AnthropicSettings,
    OpenAISettings,
    AppSettings,
)


class SettingsFactory:
    """Factory for creating settings instances, optionally pinned to one env file"""

    def __init__(self, env_file: Optional[Path] = None):
        self.env_file = env_file

    def create_anthropic_settings(self) -> AnthropicSettings:
        """Create Anthropic settings instance"""
        return AnthropicSettings.load(self.env_file)

    def create_openai_settings(self) -> OpenAISettings:
        """Create OpenAI settings instance"""
        return OpenAISettings.load(self.env_file)

    def create_app_settings(self) -> AppSettings:
        """Create app settings instance"""
        return AppSettings.load(self.env_file)


settings_factory = SettingsFactory()
