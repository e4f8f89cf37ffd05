"""Environment-driven settings for modelspine.

``ModelSettings`` carries the few knobs an application embedding the engine
usually wants to flip without code changes: log level, log format and the
service name stamped on every log line.

Examples:
    >>> from modelspine.core.settings import ModelSettings
    >>> ModelSettings().log_level
    'INFO'

    MODELSPINE_LOG_LEVEL=DEBUG MODELSPINE_JSON_LOGS=true python app.py

Tags:
    settings, configuration, pydantic, environment, modelspine

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from modelspine.core.logging import configure_logging

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ModelSettings(BaseSettings):
    """Settings shared by every process embedding modelspine.

    Fields
    ──────
    log_level    : Structlog log level
    json_logs    : JSON renderer when true, console when false, auto when unset
    service_name : Value of ``service.name`` on every log line
    """

    model_config = SettingsConfigDict(
        env_prefix="MODELSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None
    service_name: str = Field(
        default="modelspine",
        description="Service name attached to structured logs",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LEVELS)}, got {value!r}")
        return level


def configure_logging_from_settings(settings: ModelSettings | None = None) -> ModelSettings:
    """Apply ``settings`` (or a fresh ``ModelSettings()``) to structlog."""
    settings = settings or ModelSettings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.json_logs,
        service=settings.service_name,
    )
    return settings


__all__ = ["ModelSettings", "configure_logging_from_settings"]
