"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from automation_engine.config import EngineSettings

_ENV_VARS = (
    "AUTOMATION_LOG_LEVEL",
    "AUTOMATION_LOG_FORMAT",
    "AUTOMATION_EVENT_CATALOG_PATH",
    "AUTOMATION_WORKFLOWS_PATH",
    "AUTOMATION_VALIDATE_STEPS",
)


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_settings_defaults() -> None:
    settings = EngineSettings()

    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
    assert settings.event_catalog_path is None
    assert settings.workflows_path is None
    assert settings.validate_steps is True


def test_settings_loads_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "AUTOMATION_LOG_LEVEL=debug",
                "AUTOMATION_LOG_FORMAT=text",
                "AUTOMATION_EVENT_CATALOG_PATH=events.json",
                "AUTOMATION_VALIDATE_STEPS=false",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = EngineSettings()

    assert settings.log_level == "DEBUG"
    assert settings.log_format == "text"
    assert settings.event_catalog_path == Path("events.json")
    assert settings.validate_steps is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTOMATION_WORKFLOWS_PATH", "flows")
    assert EngineSettings().workflows_path == Path("flows")


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValidationError):
        EngineSettings(log_level="chatty")
