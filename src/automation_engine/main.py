"""CLI entrypoint for inspecting automation definitions.

The engine is meant to be embedded; this CLI only checks an event catalog and
serialized workflows against each other without running any actions.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from automation_engine import __version__
from automation_engine.config import EngineSettings
from automation_engine.engine import ConfigurationError, Manager, load_event_catalog
from automation_engine.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="automation-engine",
        description="Check event catalogs and workflow definitions",
    )
    parser.add_argument(
        "--version", action="version", version=f"automation-engine {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    events = subparsers.add_parser("events", help="List the event ids declared in a catalog")
    events.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Event catalog JSON file (defaults to AUTOMATION_EVENT_CATALOG_PATH)",
    )

    check = subparsers.add_parser(
        "check",
        help="Report which workflows would be registered against a catalog",
    )
    check.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Event catalog JSON file (defaults to AUTOMATION_EVENT_CATALOG_PATH)",
    )
    check.add_argument(
        "workflows",
        nargs="*",
        type=Path,
        help="Workflow JSON files (defaults to *.json under AUTOMATION_WORKFLOWS_PATH)",
    )

    return parser


def _workflow_files(paths: list[Path], settings: EngineSettings) -> list[Path]:
    if paths:
        return paths
    if settings.workflows_path is None:
        return []
    return sorted(settings.workflows_path.glob("*.json"), key=lambda p: p.name)


def _read_workflows(path: Path) -> list[dict[str, Any]]:
    """A workflow file holds one serialized workflow or a list of them."""

    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, list):
        return raw
    return [raw]


def _check(manager: Manager, files: list[Path]) -> int:
    problems = 0
    for path in files:
        for raw in _read_workflows(path):
            try:
                workflow = manager.create_workflow(raw, validate_steps=False)
            except (ValidationError, ConfigurationError) as e:
                problems += 1
                print(f"INVALID {path.name}: {e}")
                continue

            if manager.workflows.get(workflow.id) is workflow:
                print(
                    f"OK      {workflow.label} ({len(workflow.steps)} steps) "
                    f"on {workflow.trigger_event}"
                )
            elif not manager.has_event(workflow.trigger_event):
                problems += 1
                print(f"SKIPPED {workflow.label}: no event {workflow.trigger_event!r}")
            else:
                problems += 1
                print(f"SKIPPED {workflow.label}: workflow id {workflow.id!r} already registered")
    return problems


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EngineSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, settings.log_format)

    catalog_path = args.catalog or settings.event_catalog_path
    if catalog_path is None:
        print("No event catalog given (use --catalog)", file=sys.stderr)
        return 2

    try:
        catalog = load_event_catalog(catalog_path)

        if args.command == "events":
            for group, events in catalog.items():
                for name, event_id in events.items():
                    print(f"{group}.{name}\t{event_id}")
            return 0

        if args.command == "check":
            files = _workflow_files(args.workflows, settings)
            if not files:
                print("No workflow files to check", file=sys.stderr)
                return 2
            manager = Manager(catalog, validate_steps=False)
            return 1 if _check(manager, files) else 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
