#!/usr/bin/env python3
"""Programmatic usage example.

This demonstrates embedding the engine directly:

* declare an event catalog
* register an integration with two actions
* wire a workflow whose second step reads the first step's output
* fire the event and print the results
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Any, Sequence

from automation_engine.config import EngineSettings
from automation_engine.engine import FunctionAction, Manager, SimpleIntegration, Workflow
from automation_engine.logging import configure_logging

EVENTS = {"tickets": {"created": "ticket_created"}}


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a two-step workflow (programmatic example).")
    parser.add_argument("--ticket", type=int, default=42, help="Ticket id carried by the event")
    parser.add_argument("--assignee", default="alice", help="Who the ticket gets assigned to")
    return parser.parse_args(argv)


def _build_manager(assignee: str) -> Manager:
    async def assign(data: dict[str, Any]) -> dict[str, Any]:
        return {"ticket": data["ticket"], "assignedTo": assignee}

    async def notify(data: dict[str, Any]) -> dict[str, Any]:
        return {"message": data["text"]}

    manager = Manager(EVENTS)
    manager.add_integration(
        SimpleIntegration(
            id="helpdesk",
            name="Helpdesk",
            actions={
                "assign": FunctionAction(id="helpdesk.assign", func=assign),
                "notify": FunctionAction(id="helpdesk.notify", func=notify),
            },
        )
    )
    return manager


async def _run(args: argparse.Namespace) -> int:
    manager = _build_manager(args.assignee)
    workflow = Workflow(
        manager,
        "ticket_created",
        name="Assign and notify",
        steps=[
            {
                "id": "assign",
                "action": "helpdesk.assign",
                "data": {"ticket": "<<ticket_created.id>>"},
            },
            {
                "id": "notify",
                "action": "helpdesk.notify",
                "data": {"text": "Hi <<assign.assignedTo>>! Ticket #<<assign.ticket>> is yours."},
            },
        ],
    )

    def show(results: list[Any]) -> None:
        for result in results:
            print(f"{result.step}: {result.output}")

    workflow.on_workflow_run.add(show)
    await manager.trigger_event("ticket_created", {"id": args.ticket})
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = EngineSettings()
    configure_logging(settings.log_level, settings.log_format)

    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
