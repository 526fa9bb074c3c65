"""
Read-only context sources for enrichment.

- PreviousDocument: sections of a prior evaluation, as produced by the PDF extractor
- UnitConfig: nested unit/organization configuration with dot-path lookup
"""

from typing import Any, Dict, Mapping, Optional, Sequence
from pydantic import BaseModel, ConfigDict, Field


class PreviousDocument(BaseModel):
    """
    Snapshot of a prior version of the same evaluation.

    Organized into named sections (``part3``, ``part4``, ``part5``,
    ``supplementalContext`` and the extractor's ``metadata``), each a flat
    mapping of sub-field name to value.
    """
    model_config = ConfigDict(frozen=True)

    sections: Dict[str, Dict[str, Any]] = Field(default_factory=dict, description="Section name to sub-field values")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PreviousDocument":
        """Build from extractor JSON, keeping only mapping-valued sections."""
        sections = {
            name: dict(section)
            for name, section in data.items()
            if isinstance(section, Mapping)
        }
        return cls(sections=sections)

    def value(self, section: str, key: str) -> Optional[str]:
        """Return a sub-field value as text, or None when it is missing or blank."""
        raw = self.sections.get(section, {}).get(key)
        if raw is None:
            return None
        text = str(raw)
        return text if text.strip() else None


class UnitConfig(BaseModel):
    """Unit configuration with arbitrary nested keys (``unit``, ``ratedNCO``, ``unitContext``...)."""
    model_config = ConfigDict(frozen=True)

    data: Dict[str, Any] = Field(default_factory=dict, description="Raw configuration tree")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UnitConfig":
        return cls(data=dict(data))

    def resolve(self, dot_path: str) -> Any:
        """
        Resolve a dot path such as ``ratedNCO.name``; None when any segment is missing.

        Integer segments index into lists, so ``unitContext.focusAreas.0`` is the first focus area.
        """
        if not dot_path:
            return None
        node: Any = self.data
        for part in dot_path.split("."):
            if isinstance(node, Mapping):
                if part not in node:
                    return None
                node = node[part]
            elif isinstance(node, Sequence) and not isinstance(node, str) and part.isdigit():
                index = int(part)
                if index >= len(node):
                    return None
                node = node[index]
            else:
                return None
        return node

    def section(self, name: str) -> Dict[str, Any]:
        node = self.data.get(name)
        return dict(node) if isinstance(node, Mapping) else {}
