"""
Form field models.

A form field is the unit of document content that enrichment fills in.
Fields arrive as JSON objects using camelCase keys and leave the same way;
keys this package does not know about (page geometry, labels, selectors)
are preserved so the enriched output can be handed to the PDF writer,
Word exporter or browser filler unchanged.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, StrictBool
from pydantic.alias_generators import to_camel


class FieldType(StrEnum):
    """Kinds of form field. Only text fields are eligible for generation."""
    TEXT = "text"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    RADIO = "radio"


class CamelModel(BaseModel):
    """Base model reading and writing camelCase JSON keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class StaticSource(CamelModel):
    """Static value descriptor: a dot path into the unit configuration."""
    config_key: str = Field(..., description="Dot path into the unit configuration, e.g. 'ratedNCO.name'")


class LLMDirective(CamelModel):
    """Generation descriptor, also carrying the outcome markers of the last run."""
    generate: bool = Field(default=False, description="Whether the field is generated by the LLM")
    prompt_key: Optional[str] = Field(default=None, description="Prompt template key")
    max_tokens: Optional[int] = Field(default=None, description="Token budget override for this field")
    fallback_value: Optional[Union[StrictBool, str]] = Field(default=None, description="Value used when generation fails")
    required: Optional[bool] = Field(default=None, description="Set to False to let the run continue when generation fails")
    additional_context: Optional[Dict[str, Any]] = Field(default=None, description="Caller supplied prompt context overrides")
    generated_at: Optional[datetime] = Field(default=None, description="Timestamp of a successful generation")
    error: Optional[str] = Field(default=None, description="Error message when the fallback was used")
    used_fallback: Optional[bool] = Field(default=None, description="True when the fallback value was assigned")

    @property
    def has_fallback(self) -> bool:
        return self.fallback_value is not None

    @property
    def is_required(self) -> bool:
        return self.required is not False


class FormField(CamelModel):
    """A named unit of document content."""
    name: str = Field(..., description="Field identifier, unique within a collection")
    type: FieldType = Field(default=FieldType.TEXT, description="Field kind")
    value: Optional[Union[StrictBool, str]] = Field(default=None, description="Current content, text or a checkbox state")
    static: Optional[StaticSource] = Field(default=None, description="Static configuration source")
    llm: Optional[LLMDirective] = Field(default=None, description="LLM generation directive")

    @property
    def wants_generation(self) -> bool:
        return self.llm is not None and self.llm.generate is True

    @property
    def config_key(self) -> Optional[str]:
        return self.static.config_key if self.static else None

    def with_value(self, value: Union[bool, str, None], **llm_updates: Any) -> "FormField":
        """Return a copy carrying a new value and, optionally, updated llm markers."""
        update: Dict[str, Any] = {"value": value}
        if llm_updates and self.llm is not None:
            update["llm"] = self.llm.model_copy(update=llm_updates)
        return self.model_copy(update=update)

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape, omitting unset values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_json_list(cls, data: Any) -> List["FormField"]:
        """Parse a JSON array of field objects.

        Raises:
            ValueError: If ``data`` is not a list
        """
        if not isinstance(data, list):
            raise ValueError("Fields must be a JSON array")
        return [cls.model_validate(item) for item in data]


def fields_to_json(fields: List[FormField]) -> List[Dict[str, Any]]:
    return [field.to_json_dict() for field in fields]
