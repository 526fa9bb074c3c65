"""Prompt templates for NCOER field generation"""

from ncoerfill.prompts.templates import (
    NCOER_SYSTEM_PROMPT,
    PROMPT_TEMPLATES,
    PromptSection,
    PromptTemplate,
)
from ncoerfill.prompts.registry import (
    PromptRegistry,
    UnknownPromptKeyError,
    default_registry,
    lookup,
    list_prompt_keys,
)

__all__ = [
    "NCOER_SYSTEM_PROMPT",
    "PROMPT_TEMPLATES",
    "PromptSection",
    "PromptTemplate",
    "PromptRegistry",
    "UnknownPromptKeyError",
    "default_registry",
    "lookup",
    "list_prompt_keys",
]
