"""Services package for field enrichment."""

from ncoerfill.services.context_builder_service import (
    CONTEXT_SOURCES,
    SUPPLEMENTAL_KEYS,
    ContextBuilder,
    PromptContext,
)
from ncoerfill.services.field_validation_service import (
    FieldValidationError,
    FieldValidationService,
    ValidationReport,
    validate_fields,
)
from ncoerfill.services.field_enrichment_service import (
    EnrichmentOptions,
    FieldEnrichmentService,
    FieldEnrichmentServiceFactory,
    PromptPreview,
)

__all__ = [
    "CONTEXT_SOURCES",
    "SUPPLEMENTAL_KEYS",
    "ContextBuilder",
    "PromptContext",
    "FieldValidationError",
    "FieldValidationService",
    "ValidationReport",
    "validate_fields",
    "EnrichmentOptions",
    "FieldEnrichmentService",
    "FieldEnrichmentServiceFactory",
    "PromptPreview",
]
