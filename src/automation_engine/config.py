"""Configuration for the automation engine.

Configuration is loaded from:
- environment variables (prefixed with `AUTOMATION_`)
- and a local `.env` file (if present)

The engine itself takes plain arguments; these settings are read by the CLI
and by embedders that want env-driven defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Settings for the automation engine.

    Environment variables:
    - AUTOMATION_LOG_LEVEL           (optional)
    - AUTOMATION_LOG_FORMAT          (optional, `json` or `text`)
    - AUTOMATION_EVENT_CATALOG_PATH  (optional)
    - AUTOMATION_WORKFLOWS_PATH      (optional)
    - AUTOMATION_VALIDATE_STEPS      (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `EngineSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        description="Root logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    event_catalog_path: Path | None = Field(
        default=None,
        description="JSON file mapping event group -> event name -> event id",
    )
    workflows_path: Path | None = Field(
        default=None,
        description="Directory of serialized workflow JSON files",
    )

    validate_steps: bool = Field(
        default=True,
        description="Require step actions to be registered when steps are assigned",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTOMATION_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level
