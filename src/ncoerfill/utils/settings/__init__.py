"""Application settings loaded from the environment"""

from ncoerfill.utils.settings.core import AnthropicSettings, OpenAISettings, AppSettings
from ncoerfill.utils.settings.factory import SettingsFactory, settings_factory

__all__ = [
    "AnthropicSettings",
    "OpenAISettings",
    "AppSettings",
    "SettingsFactory",
    "settings_factory",
]
