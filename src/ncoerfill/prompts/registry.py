"""Prompt template lookup by symbolic key."""

from typing import Dict, Iterable, List

from ncoerfill.prompts.templates import PROMPT_TEMPLATES, PromptTemplate


class UnknownPromptKeyError(LookupError):
    """Raised when a prompt key is not registered."""

    def __init__(self, key: str, available: Iterable[str]):
        self.key = key
        self.available = list(available)
        super().__init__(
            f"Unknown prompt key: {key}. Available keys: {', '.join(self.available)}"
        )


class PromptRegistry:
    """Maps prompt keys to templates, preserving registration order."""

    def __init__(self, templates: Iterable[PromptTemplate] = PROMPT_TEMPLATES):
        self._templates: Dict[str, PromptTemplate] = {}
        for template in templates:
            if template.key in self._templates:
                raise ValueError(f"Duplicate prompt key: {template.key}")
            self._templates[template.key] = template

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def keys(self) -> List[str]:
        return list(self._templates)

    def lookup(self, key: str) -> PromptTemplate:
        try:
            return self._templates[key]
        except KeyError:
            raise UnknownPromptKeyError(key, self._templates) from None

    def list_prompt_keys(self) -> List[Dict[str, str]]:
        """Return ``{key, description}`` pairs for help and discovery output."""
        return [
            {"key": template.key, "description": template.description}
            for template in self._templates.values()
        ]


default_registry = PromptRegistry()


def lookup(key: str) -> PromptTemplate:
    return default_registry.lookup(key)


def list_prompt_keys() -> List[Dict[str, str]]:
    return default_registry.list_prompt_keys()
