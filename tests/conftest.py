"""Shared fixtures: isolated environment and sample configuration data."""

from typing import Any, Dict

import pytest

from tests.helpers import SleepRecorder


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep real credentials and local config files out of every test."""
    for name in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "APP_LLM_PROVIDER", "APP_MAX_RETRIES", "APP_LLM_CONFIG_FILE", "NCOERFILL_ENV_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def unit_config_data() -> Dict[str, Any]:
    return {
        "unit": {
            "name": "1-1 CAV",
            "fullDesignation": "1st Squadron, 1st Cavalry Regiment",
            "shortName": "1-1 CAV",
            "uic": "WABC12",
        },
        "ratedNCO": {
            "name": "DOE, JOHN A",
            "rank": "SSG",
            "position": "Squad Leader",
            "pmosc": 19,
        },
        "unitContext": {
            "keyDuties": "Leads a 9-Soldier scout squad",
            "focusAreas": ["Gunnery", "Maintenance"],
        },
    }


@pytest.fixture
def previous_document_data() -> Dict[str, Any]:
    return {
        "metadata": {"sourceFile": "old.pdf", "fieldCount": 42},
        "part3": {
            "dailyDuties": "Squad Leader responsible for 9 Soldiers.",
            "specialEmphasis": "",
            "appointedDuties": "Unit Safety NCO",
        },
        "part4": {"ptComments": "- scored 560 on the ACFT", "cComments": ""},
        "part5": {"a": "Promote now", "b": "", "c": ""},
        "supplementalContext": {
            "position": "Team Leader",
            "unit": "2-7 IN",
            "keyAccomplishments": "Led squad to first place in gunnery",
        },
    }
