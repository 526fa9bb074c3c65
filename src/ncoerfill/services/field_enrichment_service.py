"""
Field Enrichment Service.

Fills a field collection from two sources: static values resolved from the
unit configuration, and LLM-generated content for fields that request it.
Fields are generated one at a time in collection order so that a fatal
error stops the run before any later field is attempted.
"""

import asyncio
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple
from loguru import logger
from neopipe import Result, Ok, Err

from ncoerfill.llm import LLMClient, LLMClientFactory, LLMError
from ncoerfill.models import FormField, PreviousDocument, UnitConfig, fields_to_json
from ncoerfill.prompts import PromptRegistry, default_registry
from ncoerfill.services.context_builder_service import ContextBuilder
from ncoerfill.services.field_validation_service import FieldValidationService
from ncoerfill.utils.file_utils import write_json


@dataclass
class EnrichmentOptions:
    """Per-run options for enrichment."""
    api_key: Optional[str] = None
    model: Optional[str] = None
    provider: Optional[str] = None
    verbose: bool = False
    dry_run: bool = False
    unit_config: Optional[UnitConfig] = None
    checkpoint_path: Optional[Path] = None


@dataclass(frozen=True)
class PromptPreview:
    """What a dry run would have sent for one field."""
    field_name: str
    prompt_key: str
    description: str
    max_tokens: int
    context_keys: Tuple[str, ...]
    prompt: str


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


class FieldEnrichmentService:
    """
    Orchestrates static resolution, validation and sequential generation.

    The input collection is never modified; every pass builds a new list.
    """

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        client_factory: Optional[LLMClientFactory] = None,
        registry: PromptRegistry = default_registry,
        context_builder: Optional[ContextBuilder] = None,
        validator: Optional[FieldValidationService] = None,
    ):
        """
        Initialize enrichment service.

        Args:
            client: Generation client; built from ``client_factory`` on first live run when omitted
            client_factory: Factory used when no client is given (defaults to APP_LLM_PROVIDER)
            registry: Prompt template registry
            context_builder: Prompt context builder
            validator: Pre-flight field validator
        """
        self.client = client
        self.client_factory = client_factory
        self.registry = registry
        self.context_builder = context_builder or ContextBuilder()
        self.validator = validator or FieldValidationService(registry)
        self.previews: List[PromptPreview] = []
        self.failed_field: Optional[str] = None

    @staticmethod
    def _narrate(options: EnrichmentOptions, message: str) -> None:
        logger.log("INFO" if options.verbose else "DEBUG", message)

    def _get_client(self, options: EnrichmentOptions) -> LLMClient:
        if self.client is not None:
            return self.client
        factory = self.client_factory or LLMClientFactory.create_from_default(options.provider)
        return factory.create_client(api_key=options.api_key, model=options.model)

    def resolve_static(
        self,
        fields: Sequence[FormField],
        unit_config: Optional[UnitConfig],
        options: Optional[EnrichmentOptions] = None,
    ) -> List[FormField]:
        """Assign static values from the unit configuration; missing keys leave fields unset."""
        options = options or EnrichmentOptions()
        static_count = sum(1 for f in fields if f.config_key)
        if static_count:
            self._narrate(options, f"Found {static_count} static fields to populate from config")

        resolved: List[FormField] = []
        for form_field in fields:
            value = unit_config.resolve(form_field.config_key) if (form_field.config_key and unit_config) else None
            if value is None:
                resolved.append(form_field)
                continue
            text = _stringify(value)
            if options.dry_run:
                self._narrate(options, f'  Static (dry run): {form_field.name} = "{text}"')
                resolved.append(form_field)
            else:
                self._narrate(options, f'  Static: {form_field.name} = "{text}"')
                resolved.append(form_field.with_value(text))
        return resolved

    def _checkpoint(self, options: EnrichmentOptions, fields: List[FormField]) -> None:
        if options.checkpoint_path is None:
            return
        write_json(options.checkpoint_path, fields_to_json(fields))
        logger.warning(f"Partial results written to {options.checkpoint_path}")

    def _preview(self, form_field: FormField, template, context, prompt: str, max_tokens: int) -> None:
        preview = PromptPreview(
            field_name=form_field.name,
            prompt_key=template.key,
            description=template.description,
            max_tokens=max_tokens,
            context_keys=tuple(context),
            prompt=prompt,
        )
        self.previews.append(preview)
        logger.info(
            f"DRY RUN: {preview.field_name} | prompt key: {preview.prompt_key} | "
            f"max tokens: {preview.max_tokens} | context keys: {', '.join(preview.context_keys) or '(none)'}"
        )

    async def enrich(
        self,
        fields: Sequence[FormField],
        previous_document: Optional[PreviousDocument] = None,
        options: Optional[EnrichmentOptions] = None,
    ) -> List[FormField]:
        """
        Enrich a field collection.

        Args:
            fields: Input fields, left untouched
            previous_document: Prior evaluation used as generation context
            options: Run options (credentials, model, verbose, dry run, unit config)

        Returns:
            List[FormField]: New collection with values and generation markers set

        Raises:
            FieldValidationError: Before any generation when field metadata is invalid
            LLMError: Run-aborting client errors (auth), and failures on required fields without fallback
        """
        options = options or EnrichmentOptions()
        self.previews = []
        self.failed_field = None

        working = self.resolve_static(
            [f.model_copy(deep=True) for f in fields],
            options.unit_config,
            options,
        )
        self.validator.ensure_valid(working)

        llm_count = sum(1 for f in working if f.wants_generation)
        if llm_count == 0:
            self._narrate(options, "No fields marked for LLM generation")
            return working
        self._narrate(options, f"Found {llm_count} fields to generate with LLM")

        client = None if options.dry_run else self._get_client(options)

        enriched: List[FormField] = []
        for index, form_field in enumerate(working):
            if not form_field.wants_generation:
                enriched.append(form_field)
                continue

            template = self.registry.lookup(form_field.llm.prompt_key)
            context = self.context_builder.build(form_field, previous_document, options.unit_config)
            prompt = template.render(context)
            max_tokens = form_field.llm.max_tokens or template.max_tokens

            self._narrate(options, f"Generating: {form_field.name} ({template.description})")

            if options.dry_run:
                self._preview(form_field, template, context, prompt, max_tokens)
                enriched.append(form_field)
                continue

            try:
                generated = await client.generate(prompt, template.system_prompt, max_tokens)
            except Exception as error:
                if isinstance(error, LLMError) and error.aborts_run:
                    self.failed_field = form_field.name
                    logger.error(f"Aborting enrichment at field {form_field.name}: {error}")
                    self._checkpoint(options, enriched + working[index:])
                    raise

                logger.warning(f"Error generating content for {form_field.name}: {error}")

                if form_field.llm.has_fallback:
                    enriched.append(
                        form_field.with_value(
                            form_field.llm.fallback_value,
                            error=str(error),
                            used_fallback=True,
                        )
                    )
                    self._narrate(options, "  Using fallback value")
                elif form_field.llm.is_required:
                    self.failed_field = form_field.name
                    logger.error(f"Required field {form_field.name} failed without a fallback: {error}")
                    self._checkpoint(options, enriched + working[index:])
                    raise
                else:
                    self._narrate(options, f"  Leaving optional field {form_field.name} unset")
                    enriched.append(form_field)
                continue

            enriched.append(
                form_field.with_value(
                    generated.strip(),
                    generated_at=datetime.now(timezone.utc),
                    error=None,
                    used_fallback=None,
                )
            )
            self._narrate(options, f"  Generated {len(generated)} characters")

        return enriched

    def execute(
        self,
        fields: Sequence[FormField],
        previous_document: Optional[PreviousDocument] = None,
        options: Optional[EnrichmentOptions] = None,
    ) -> Result[List[FormField], str]:
        """
        Execute the enrichment service and return Result type.

        Returns:
            Result[List[FormField], str]: Ok with enriched fields or Err with error message
        """
        try:
            return Ok(asyncio.run(self.enrich(fields, previous_document, options)))
        except Exception as e:
            error_msg = f"{self.failed_field}: {e}" if self.failed_field else str(e)
            logger.debug(f"Enrichment failed: {error_msg}")
            return Err(error_msg)

    def __call__(
        self,
        fields: Sequence[FormField],
        previous_document: Optional[PreviousDocument] = None,
        options: Optional[EnrichmentOptions] = None,
    ) -> Result[List[FormField], str]:
        """Make the service callable like a function."""
        return self.execute(fields, previous_document, options)


class FieldEnrichmentServiceFactory:
    """Factory for creating FieldEnrichmentService instances"""

    @staticmethod
    def create_default(provider: Optional[str] = None) -> FieldEnrichmentService:
        """
        Create a service whose client is built lazily from app settings.

        Args:
            provider: 'anthropic' or 'openai'; APP_LLM_PROVIDER when omitted
        """
        return FieldEnrichmentService(client_factory=LLMClientFactory.create_from_default(provider))
