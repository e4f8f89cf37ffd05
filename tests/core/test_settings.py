"""Tests for core.settings module.

Covers:
- ModelSettings defaults
- MODELSPINE_ environment variable overrides
- log_level validation
- configure_logging_from_settings()
"""

import json
import logging

import pytest
from pydantic import ValidationError

from modelspine.core.logging import get_logger
from modelspine.core.settings import ModelSettings, configure_logging_from_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in ("MODELSPINE_LOG_LEVEL", "MODELSPINE_JSON_LOGS", "MODELSPINE_SERVICE_NAME"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestModelSettingsDefaults:
    def test_default_log_level(self):
        assert ModelSettings().log_level == "INFO"

    def test_default_json_logs_is_auto(self):
        assert ModelSettings().json_logs is None

    def test_default_service_name(self):
        assert ModelSettings().service_name == "modelspine"


class TestModelSettingsEnvOverride:
    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("MODELSPINE_LOG_LEVEL", "debug")
        assert ModelSettings().log_level == "DEBUG"

    def test_json_logs_from_env(self, monkeypatch):
        monkeypatch.setenv("MODELSPINE_JSON_LOGS", "true")
        assert ModelSettings().json_logs is True

    def test_service_name_from_env(self, monkeypatch):
        monkeypatch.setenv("MODELSPINE_SERVICE_NAME", "inventory")
        assert ModelSettings().service_name == "inventory"

    def test_unprefixed_env_is_ignored(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert ModelSettings().log_level == "INFO"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("MODELSPINE_LOG_LEVEL=warning\n")
        assert ModelSettings().log_level == "WARNING"


class TestValidation:
    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            ModelSettings(log_level="LOUD")


class TestConfigureFromSettings:
    def test_applies_settings(self, caplog):
        caplog.set_level(logging.DEBUG)
        settings = ModelSettings(log_level="DEBUG", json_logs=True, service_name="inventory")

        applied = configure_logging_from_settings(settings)
        get_logger("modelspine.tests").debug("schema_built")

        assert applied is settings
        data = json.loads(caplog.records[-1].getMessage())
        assert data["service.name"] == "inventory"
        assert data["level"] == "debug"

    def test_reads_environment_when_omitted(self, monkeypatch):
        monkeypatch.setenv("MODELSPINE_SERVICE_NAME", "from-env")
        assert configure_logging_from_settings().service_name == "from-env"
