"""Pre-flight validation of field generation metadata."""

from dataclasses import dataclass, field
from typing import Iterable, List
from loguru import logger

from ncoerfill.models import FieldType, FormField
from ncoerfill.prompts import PromptRegistry, default_registry


@dataclass
class ValidationReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


class FieldValidationError(ValueError):
    """Raised when field configuration errors block generation."""

    def __init__(self, report: ValidationReport):
        self.report = report
        lines = "\n".join(f"  - {error}" for error in report.errors)
        super().__init__(f"Field configuration errors:\n{lines}")


class FieldValidationService:
    """
    Checks fields before any generation happens.

    Errors (missing or unknown prompt keys, duplicate names) block the run;
    warnings (generation requested on a non-text field) are reported only.
    """

    def __init__(self, registry: PromptRegistry = default_registry):
        self.registry = registry

    def validate(self, fields: Iterable[FormField]) -> ValidationReport:
        report = ValidationReport()
        seen = set()

        for form_field in fields:
            if form_field.name in seen:
                report.errors.append(f'Field "{form_field.name}": duplicate field name')
            seen.add(form_field.name)

            if not form_field.wants_generation:
                continue

            prompt_key = form_field.llm.prompt_key
            if not prompt_key:
                report.errors.append(f'Field "{form_field.name}": missing llm.promptKey')
            elif prompt_key not in self.registry:
                report.errors.append(
                    f'Field "{form_field.name}": unknown llm.promptKey "{prompt_key}". '
                    f"Available keys: {', '.join(self.registry.keys())}"
                )

            if form_field.type != FieldType.TEXT:
                report.warnings.append(
                    f'Field "{form_field.name}": LLM generation on non-text field (type: {form_field.type.value})'
                )

        return report

    def ensure_valid(self, fields: Iterable[FormField]) -> ValidationReport:
        """Validate, log warnings and raise FieldValidationError on any error."""
        report = self.validate(fields)
        for warning in report.warnings:
            logger.warning(warning)
        if not report.valid:
            for error in report.errors:
                logger.error(error)
            raise FieldValidationError(report)
        return report


def validate_fields(fields: Iterable[FormField], registry: PromptRegistry = default_registry) -> ValidationReport:
    return FieldValidationService(registry).validate(fields)
