"""
Configuration — typed, validated harness settings loaded from environment/.env.

Uses pydantic-settings so a CI job can tune the harness without code changes:
  - PKIEXT_LOG_LEVEL=DEBUG                   → log_level
  - PKIEXT_USERAGENT__VERSION=1.15.0         → useragent.version
  - PKIEXT_USERAGENT__PROJECT_URL=https://…  → useragent.project_url

Only HarnessSettings is a BaseSettings instance; UserAgentSettings is a plain
BaseModel populated through env_nested_delimiter="__".
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the .env file at the project root (three directories above this file),
# so settings load the same way regardless of where pytest is started.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


def _default_runtime() -> str:
    return f"python{platform.python_version()}"


class UserAgentSettings(BaseModel):
    """Inputs to the user-agent string: `<product>/<version> (+<project_url>; <runtime>)`."""

    product: str = Field(default="Vault", min_length=1)
    project_url: str = Field(default="https://www.vaultproject.io/")
    version: str = Field(default="0.0.0", min_length=1)
    runtime: str = Field(default_factory=_default_runtime, min_length=1)

    @field_validator("product")
    @classmethod
    def validate_product(cls, value: str) -> str:
        """A product token may not contain whitespace or '/'."""
        if any(ch.isspace() for ch in value) or "/" in value:
            raise ValueError(f"Product token must not contain whitespace or '/': {value!r}")
        return value

    @field_validator("project_url")
    @classmethod
    def validate_project_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Project URL must be an http(s) URL, got {value!r}")
        return value


class HarnessSettings(BaseSettings):
    """
    Root harness settings.

    Load order (highest priority first):
      1. Environment variables (PKIEXT_*)
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="PKIEXT_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = Field(default="WARNING")
    useragent: UserAgentSettings = Field(default_factory=lambda: UserAgentSettings())

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level
