"""Static resolution, sequential generation, fallback policy and dry runs."""

import asyncio
import json
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from ncoerfill.llm import LLMClient, LLMError, LLMErrorKind
from ncoerfill.models import FormField, PreviousDocument, UnitConfig
from ncoerfill.prompts import PromptRegistry, PromptTemplate, default_registry
from ncoerfill.services import (
    EnrichmentOptions,
    FieldEnrichmentService,
    FieldValidationError,
)
from tests.helpers import ScriptedChatClient, SleepRecorder, llm_error


def parse(*raw):
    return [FormField.model_validate(item) for item in raw]


def scripted_service(outcomes, registry=default_registry, sleep=None):
    chat = ScriptedChatClient(outcomes)
    client = LLMClient(chat, max_retries=3, sleep=sleep or SleepRecorder())
    return FieldEnrichmentService(client=client, registry=registry), chat


def enrich(service, fields, previous=None, **options):
    return asyncio.run(service.enrich(fields, previous, EnrichmentOptions(**options)))


class TestStaticPass:
    def test_resolves_and_stringifies_config_values(self, unit_config_data):
        fields = parse(
            {"name": "name", "static": {"configKey": "ratedNCO.name"}},
            {"name": "pmosc", "static": {"configKey": "ratedNCO.pmosc"}},
            {"name": "missing", "static": {"configKey": "ratedNCO.nickname"}},
        )
        service = FieldEnrichmentService(client=MagicMock())

        result = enrich(service, fields, unit_config=UnitConfig.from_dict(unit_config_data))

        assert [f.value for f in result] == ["DOE, JOHN A", "19", None]

    def test_booleans_stringify_in_lowercase(self):
        fields = parse({"name": "flag", "static": {"configKey": "flags.airborne"}})
        service = FieldEnrichmentService(client=MagicMock())

        result = enrich(service, fields, unit_config=UnitConfig.from_dict({"flags": {"airborne": True}}))

        assert result[0].value == "true"

    def test_no_unit_config_leaves_static_fields_unset(self):
        service = FieldEnrichmentService(client=MagicMock())

        result = enrich(service, parse({"name": "a", "static": {"configKey": "unit.name"}}))

        assert result[0].value is None


class TestGeneration:
    def test_sets_trimmed_value_and_timestamp(self, unit_config_data, previous_document_data):
        service, chat = scripted_service(["  - Led 9 Soldiers through gunnery.\n"])
        fields = parse({"name": "duties", "llm": {"generate": True, "promptKey": "part3_daily_duties"}})

        result = enrich(
            service,
            fields,
            PreviousDocument.from_dict(previous_document_data),
            unit_config=UnitConfig.from_dict(unit_config_data),
        )

        assert result[0].value == "- Led 9 Soldiers through gunnery."
        assert isinstance(result[0].llm.generated_at, datetime)
        assert result[0].llm.generated_at.tzinfo is not None
        assert chat.calls[0]["max_tokens"] == 400
        assert "Squad Leader responsible for 9 Soldiers." in chat.calls[0]["prompt"]
        assert "Unit: 1st Squadron, 1st Cavalry Regiment" in chat.calls[0]["prompt"]

    def test_field_token_budget_overrides_template(self):
        service, chat = scripted_service(["ok"])
        fields = parse({"name": "pt", "llm": {"generate": True, "promptKey": "part4_pt", "maxTokens": 120}})

        enrich(service, fields)

        assert chat.calls[0]["max_tokens"] == 120

    def test_generates_sequentially_in_collection_order(self):
        service, chat = scripted_service(["first", "second"])
        fields = parse(
            {"name": "c", "llm": {"generate": True, "promptKey": "part4_character"}},
            {"name": "skip"},
            {"name": "p", "llm": {"generate": True, "promptKey": "part4_presence"}},
        )

        result = enrich(service, fields)

        assert [f.value for f in result] == ["first", None, "second"]
        assert "Part 4c Character" in chat.calls[0]["prompt"]
        assert "Part 4d Presence" in chat.calls[1]["prompt"]

    def test_input_collection_is_not_mutated(self):
        service, _ = scripted_service(["generated"])
        fields = parse({"name": "c", "llm": {"generate": True, "promptKey": "part4_character"}})

        result = enrich(service, fields)

        assert fields[0].value is None
        assert fields[0].llm.generated_at is None
        assert result[0] is not fields[0]

    def test_llm_value_overwrites_static_seed(self):
        service, _ = scripted_service(["generated"])
        fields = parse({
            "name": "both",
            "static": {"configKey": "unit.name"},
            "llm": {"generate": True, "promptKey": "part4_leads"},
        })

        result = enrich(service, fields, unit_config=UnitConfig.from_dict({"unit": {"name": "1-1 CAV"}}))

        assert result[0].value == "generated"

    def test_success_clears_markers_from_an_earlier_run(self):
        service, _ = scripted_service(["fresh"])
        fields = parse({
            "name": "c",
            "value": "N/A",
            "llm": {"generate": True, "promptKey": "part4_character", "usedFallback": True, "error": "old"},
        })

        result = enrich(service, fields)

        assert result[0].llm.used_fallback is None
        assert result[0].llm.error is None


class TestFailurePolicy:
    def test_end_to_end_fallback_with_always_failing_client(self):
        registry = PromptRegistry([
            PromptTemplate(key="x", description="X", heading="Write X.", instructions="", max_tokens=50),
        ])
        sleep = SleepRecorder()
        service, chat = scripted_service([llm_error(LLMErrorKind.SERVER_ERROR, "overloaded")], registry, sleep)
        fields = parse(
            {"name": "a", "static": {"configKey": "unit.name"}},
            {"name": "b", "llm": {"generate": True, "promptKey": "x", "fallbackValue": "N/A"}},
        )

        result = enrich(service, fields, unit_config=UnitConfig.from_dict({"unit": {"name": "1-1 CAV"}}))

        assert result[0].name == "a"
        assert result[0].value == "1-1 CAV"
        assert result[1].name == "b"
        assert result[1].value == "N/A"
        assert result[1].llm.used_fallback is True
        assert "overloaded" in result[1].llm.error
        assert len(chat.calls) == 4
        assert len(sleep.delays) == 3

    def test_auth_error_aborts_remaining_fields(self, isolated_environment):
        service, chat = scripted_service(["first", llm_error(LLMErrorKind.AUTH, "Invalid API key")])
        fields = parse(
            {"name": "c", "llm": {"generate": True, "promptKey": "part4_character"}},
            {"name": "p", "llm": {"generate": True, "promptKey": "part4_presence", "fallbackValue": "N/A"}},
            {"name": "i", "llm": {"generate": True, "promptKey": "part4_intellect"}},
        )
        checkpoint = isolated_environment / "out.partial.json"

        with pytest.raises(LLMError) as exc_info:
            enrich(service, fields, checkpoint_path=checkpoint)

        assert exc_info.value.kind == LLMErrorKind.AUTH
        assert len(chat.calls) == 2
        assert service.failed_field == "p"
        saved = json.loads(checkpoint.read_text(encoding="utf-8"))
        assert [item.get("value") for item in saved] == ["first", None, None]

    def test_required_field_without_fallback_aborts(self):
        service, chat = scripted_service([llm_error(LLMErrorKind.RATE_LIMITED)])
        fields = parse(
            {"name": "c", "llm": {"generate": True, "promptKey": "part4_character"}},
            {"name": "p", "llm": {"generate": True, "promptKey": "part4_presence"}},
        )

        with pytest.raises(LLMError) as exc_info:
            enrich(service, fields)

        assert exc_info.value.kind == LLMErrorKind.MAX_RETRIES
        assert len(chat.calls) == 4

    def test_optional_field_is_left_unset(self):
        service, _ = scripted_service([llm_error(LLMErrorKind.SERVER_ERROR), "second"])
        service.client.max_retries = 0
        fields = parse(
            {"name": "c", "llm": {"generate": True, "promptKey": "part4_character", "required": False}},
            {"name": "p", "llm": {"generate": True, "promptKey": "part4_presence"}},
        )

        result = enrich(service, fields)

        assert result[0].value is None
        assert result[0].llm.used_fallback is None
        assert result[1].value == "second"

    def test_optional_field_keeps_static_seed_on_failure(self):
        service, _ = scripted_service([llm_error(LLMErrorKind.SERVER_ERROR)])
        service.client.max_retries = 0
        fields = parse({
            "name": "both",
            "static": {"configKey": "unit.name"},
            "llm": {"generate": True, "promptKey": "part4_leads", "required": False},
        })

        result = enrich(service, fields, unit_config=UnitConfig.from_dict({"unit": {"name": "1-1 CAV"}}))

        assert result[0].value == "1-1 CAV"

    def test_checkbox_failure_falls_back_to_false(self):
        service, _ = scripted_service([llm_error(LLMErrorKind.SERVER_ERROR)])
        service.client.max_retries = 0
        fields = parse({
            "name": "cb",
            "type": "checkbox",
            "llm": {"generate": True, "promptKey": "part4_pt", "fallbackValue": False},
        })

        result = enrich(service, fields)

        assert result[0].value is False
        assert result[0].llm.used_fallback is True
        assert result[0].to_json_dict()["value"] is False

    def test_unexpected_errors_use_the_fallback(self):
        client = MagicMock()
        client.generate = AsyncMock(side_effect=RuntimeError("socket closed"))
        service = FieldEnrichmentService(client=client)
        fields = parse({"name": "c", "llm": {"generate": True, "promptKey": "part4_character", "fallbackValue": ""}})

        result = enrich(service, fields)

        assert result[0].value == ""
        assert result[0].llm.error == "socket closed"


class TestValidationAndDryRun:
    def test_missing_prompt_key_blocks_before_any_call(self):
        client = MagicMock()
        client.generate = AsyncMock(return_value="never")
        service = FieldEnrichmentService(client=client)
        fields = parse(
            {"name": "ok", "llm": {"generate": True, "promptKey": "part4_pt"}},
            {"name": "bad", "llm": {"generate": True}},
        )

        with pytest.raises(FieldValidationError):
            enrich(service, fields)

        client.generate.assert_not_called()

    def test_dry_run_never_builds_or_calls_a_client(self, unit_config_data):
        factory = MagicMock()
        service = FieldEnrichmentService(client_factory=factory)
        fields = parse(
            {"name": "a", "static": {"configKey": "unit.name"}},
            {"name": "pt", "llm": {"generate": True, "promptKey": "part4_pt"}},
        )

        result = enrich(service, fields, dry_run=True, unit_config=UnitConfig.from_dict(unit_config_data))

        factory.create_client.assert_not_called()
        assert [f.value for f in result] == [None, None]
        assert len(service.previews) == 1
        preview = service.previews[0]
        assert preview.field_name == "pt"
        assert preview.max_tokens == 200
        assert "unit" in preview.context_keys
        assert preview.prompt.startswith("Generate NCOER Part 4 Physical Training/ACFT comments.")

    def test_no_generation_fields_skips_client_creation(self):
        factory = MagicMock()
        service = FieldEnrichmentService(client_factory=factory)

        result = enrich(service, parse({"name": "a"}))

        assert [f.name for f in result] == ["a"]
        factory.create_client.assert_not_called()

    def test_client_built_from_factory_with_options(self):
        client = MagicMock()
        client.generate = AsyncMock(return_value="text")
        factory = MagicMock()
        factory.create_client.return_value = client
        service = FieldEnrichmentService(client_factory=factory)

        enrich(service, parse({"name": "pt", "llm": {"generate": True, "promptKey": "part4_pt"}}), api_key="k", model="m")

        factory.create_client.assert_called_once_with(api_key="k", model="m")


class TestExecute:
    def test_ok_result(self):
        service, _ = scripted_service(["text"])

        result = service(parse({"name": "pt", "llm": {"generate": True, "promptKey": "part4_pt"}}))

        assert result.is_ok()
        assert result.unwrap()[0].value == "text"

    def test_err_result_names_the_failed_field(self):
        service, _ = scripted_service([llm_error(LLMErrorKind.AUTH, "Invalid API key")])

        result = service.execute(parse({"name": "pt", "llm": {"generate": True, "promptKey": "part4_pt"}}))

        assert result.is_err()
        assert result.unwrap_err() == "pt: Invalid API key"
