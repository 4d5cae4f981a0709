"""Test configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from automation_engine.engine import FunctionAction, Manager, SimpleIntegration
from tests.mocks import Recorder

CATALOG: dict[str, dict[str, str]] = {
    "tickets": {
        "created": "ticket_created",
        "closed": "ticket_closed",
    },
    "users": {
        "signed_up": "user_signed_up",
    },
}


@pytest.fixture
def catalog() -> dict[str, dict[str, str]]:
    """Provide a test event catalog."""
    return CATALOG


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def helpdesk(recorder: Recorder) -> SimpleIntegration:
    """Provide an integration whose actions record their input."""

    async def assign(data: dict[str, Any]) -> dict[str, Any]:
        recorder.calls.append(("assign", data))
        return {"assignedTo": "alice", "team": {"name": "support", "size": 3}}

    async def notify(data: dict[str, Any]) -> dict[str, Any]:
        recorder.calls.append(("notify", data))
        return {"sent": True, "text": data.get("text")}

    def echo(data: dict[str, Any]) -> dict[str, Any]:
        recorder.calls.append(("echo", data))
        return dict(data)

    return SimpleIntegration(
        id="helpdesk",
        name="Helpdesk",
        actions={
            "assign": FunctionAction(id="assign", func=assign, returns=["assignedTo", "team"]),
            "notify": FunctionAction(id="notify", func=notify, returns=["sent", "text"]),
            "echo": FunctionAction(id="echo", func=echo),
        },
    )


@pytest.fixture
def manager(catalog: dict[str, dict[str, str]], helpdesk: SimpleIntegration) -> Manager:
    """Provide a manager with the helpdesk integration registered."""
    m = Manager(catalog)
    m.add_integration(helpdesk)
    return m
