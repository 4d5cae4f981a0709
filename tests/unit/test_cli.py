"""Unit tests for the `automation-engine` CLI."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from automation_engine.main import main


@pytest.fixture
def catalog_file(tmp_path: Path, catalog: dict[str, dict[str, str]]) -> Path:
    path = tmp_path / "events.json"
    path.write_text(json.dumps(catalog), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("AUTOMATION_EVENT_CATALOG_PATH", "AUTOMATION_WORKFLOWS_PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AUTOMATION_LOG_LEVEL", "WARNING")
    monkeypatch.chdir(tmp_path)

    # `main` reconfigures the root logger.
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def _write(path: Path, obj: object) -> Path:
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


def test_events_lists_catalog(catalog_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["events", "--catalog", str(catalog_file)]) == 0
    out = capsys.readouterr().out
    assert "tickets.created\tticket_created" in out
    assert "users.signed_up\tuser_signed_up" in out


def test_check_accepts_valid_workflows(
    tmp_path: Path, catalog_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    wf = _write(
        tmp_path / "assign.json",
        {
            "id": "assign",
            "name": "Assign",
            "steps": [{"id": "A", "action": "helpdesk.assign", "data": {}}],
            "trigger": "ticket_created",
        },
    )

    assert main(["check", "--catalog", str(catalog_file), str(wf)]) == 0
    assert "OK      Assign (1 steps) on ticket_created" in capsys.readouterr().out


def test_check_reports_unknown_trigger_and_bad_steps(
    tmp_path: Path, catalog_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    wf = _write(
        tmp_path / "batch.json",
        [
            {"id": "lost", "steps": [], "trigger": "nope"},
            {
                "id": "dupes",
                "steps": [{"id": "A", "action": "x"}, {"id": "A", "action": "y"}],
                "trigger": "ticket_created",
            },
            {"id": "fine", "steps": [], "trigger": "ticket_closed"},
        ],
    )

    assert main(["check", "--catalog", str(catalog_file), str(wf)]) == 1
    out = capsys.readouterr().out
    assert "SKIPPED lost" in out
    assert "INVALID batch.json" in out
    assert "OK      fine" in out


def test_check_reports_duplicate_workflow_id(
    tmp_path: Path, catalog_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    wf = _write(
        tmp_path / "same.json",
        [
            {"id": "same", "steps": [], "trigger": "ticket_created"},
            {"id": "same", "name": "Again", "steps": [], "trigger": "ticket_closed"},
        ],
    )

    assert main(["check", "--catalog", str(catalog_file), str(wf)]) == 1
    out = capsys.readouterr().out
    assert "SKIPPED Again: workflow id 'same' already registered" in out
    assert "no event" not in out


def test_check_uses_workflows_path_setting(
    tmp_path: Path,
    catalog_file: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    flows = tmp_path / "flows"
    flows.mkdir()
    _write(flows / "a.json", {"id": "a", "steps": [], "trigger": "user_signed_up"})
    monkeypatch.setenv("AUTOMATION_WORKFLOWS_PATH", str(flows))
    monkeypatch.setenv("AUTOMATION_EVENT_CATALOG_PATH", str(catalog_file))

    assert main(["check"]) == 0
    assert "OK      a" in capsys.readouterr().out


def test_missing_catalog_is_a_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["events"]) == 2
    assert "No event catalog" in capsys.readouterr().err
