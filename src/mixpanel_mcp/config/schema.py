"""Pydantic models for mixpanel-mcp configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class MixpanelConfig(BaseModel):
    """Service-account credentials and project defaults."""

    username: str | None = None
    password: str | None = None
    project_id: str | None = None
    region: str = "us"

    @field_validator("project_id", mode="before")
    @classmethod
    def _coerce_project_id(cls, value: object) -> object:
        # TOML users tend to write project ids as bare integers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("region")
    @classmethod
    def _normalise_region(cls, value: str) -> str:
        return value.strip().lower() or "us"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            msg = f"Unknown log level '{value}'; expected one of {', '.join(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level


class ServerConfig(BaseModel):
    """Top-level configuration for mixpanel-mcp."""

    mixpanel: MixpanelConfig = Field(default_factory=MixpanelConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
