"""
Domain models for field enrichment.

- Form fields and their static/LLM descriptors
- Read-only context sources (PreviousDocument, UnitConfig)
"""

from ncoerfill.models.field import (
    FieldType,
    StaticSource,
    LLMDirective,
    FormField,
    fields_to_json,
)

from ncoerfill.models.context import (
    PreviousDocument,
    UnitConfig,
)

__all__ = [
    "FieldType",
    "StaticSource",
    "LLMDirective",
    "FormField",
    "fields_to_json",
    "PreviousDocument",
    "UnitConfig",
]
