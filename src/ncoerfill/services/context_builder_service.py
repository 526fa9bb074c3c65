"""
Prompt context assembly.

Context for a field is merged from four sources, later sources winning on
key collisions:

1. previous-document values selected for the field's prompt key (CONTEXT_SOURCES)
2. curated supplemental context from the previous document
3. current unit and rated NCO data from the unit configuration
4. the field's own ``llm.additionalContext``
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from ncoerfill.models import FormField, PreviousDocument, UnitConfig

PromptContext = Dict[str, str]

# prompt key -> {context key: (previous document section, sub-field)}
CONTEXT_SOURCES: Dict[str, Dict[str, Tuple[str, str]]] = {
    "part3_daily_duties": {"previousDuties": ("part3", "dailyDuties")},
    "part3_special_emphasis": {"previousEmphasis": ("part3", "specialEmphasis")},
    "part3_appointed_duties": {"previousAppointed": ("part3", "appointedDuties")},
    "part4_pt": {"previousPT": ("part4", "ptComments")},
    "part4_character": {"previousCharacter": ("part4", "cComments")},
    "part4_presence": {"previousPresence": ("part4", "dComments")},
    "part4_intellect": {"previousIntellect": ("part4", "eComments")},
    "part4_leads": {"previousLeads": ("part4", "fComments")},
    "part4_develops": {"previousDevelops": ("part4", "gComments")},
    "part4_achieves": {"previousAchieves": ("part4", "hComments")},
    "part4_overall": {"previousOverall": ("part4", "jComments")},
    "part5_rater": {"previousRater": ("part5", "a")},
    "part5_sr_potential": {"previousSR": ("part5", "b")},
    "part5_sr_comments": {"previousSRComments": ("part5", "c")},
}

# Unit and position in the supplemental section go stale between evaluations;
# only accomplishments carry forward.
SUPPLEMENTAL_KEYS: Tuple[str, ...] = ("keyAccomplishments",)


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(item) for item in value if item is not None)
    text = str(value)
    return text if text.strip() else None


def _put(context: PromptContext, key: str, value: Any) -> None:
    text = _as_text(value)
    if text is not None:
        context[key] = text


class ContextBuilder:
    """Builds the per-field prompt context."""

    def __init__(
        self,
        sources: Mapping[str, Mapping[str, Tuple[str, str]]] = CONTEXT_SOURCES,
        supplemental_keys: Tuple[str, ...] = SUPPLEMENTAL_KEYS,
    ):
        self.sources = sources
        self.supplemental_keys = supplemental_keys

    def context_keys_for(self, prompt_key: str) -> Tuple[str, ...]:
        return tuple(self.sources.get(prompt_key, {}))

    def build(
        self,
        field: FormField,
        previous_document: Optional[PreviousDocument],
        unit_config: Optional[UnitConfig],
    ) -> PromptContext:
        context: PromptContext = {}

        if previous_document is None and unit_config is None:
            return context

        prompt_key = field.llm.prompt_key if field.llm else None

        if previous_document is not None:
            for context_key, (section, sub_field) in self.sources.get(prompt_key or "", {}).items():
                _put(context, context_key, previous_document.value(section, sub_field))

            for key in self.supplemental_keys:
                _put(context, key, previous_document.value("supplementalContext", key))

        if unit_config is not None:
            unit = unit_config.section("unit")
            _put(context, "unit", unit.get("fullDesignation") or unit.get("name"))
            _put(context, "unitShortName", unit.get("shortName"))

            rated_nco = unit_config.section("ratedNCO")
            _put(context, "position", rated_nco.get("position"))
            _put(context, "rank", rated_nco.get("rank"))

            for key, value in unit_config.section("unitContext").items():
                _put(context, key, value)

        if field.llm is not None:
            for key, value in (field.llm.additional_context or {}).items():
                _put(context, key, value)

        return context
