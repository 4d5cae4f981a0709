"""Unit tests for the integration/action contract helpers."""

from __future__ import annotations

from typing import Any

from automation_engine.engine import (
    Action,
    ActionField,
    FunctionAction,
    Integration,
    SimpleIntegration,
)


class PlainAction:
    """Satisfies the action protocol without any engine base class."""

    id = "plain"
    enabled = True

    def run(self, data: dict[str, Any]) -> dict[str, Any]:
        return {"got": data}


async def test_function_action_wraps_sync_and_async_callables() -> None:
    async def coro(data: dict[str, Any]) -> dict[str, Any]:
        return {"n": data["n"] + 1}

    assert await FunctionAction(id="sync", func=lambda d: {"n": d["n"] * 2}).run({"n": 2}) == {
        "n": 4
    }
    assert await FunctionAction(id="async", func=coro).run({"n": 2}) == {"n": 3}


def test_protocols_are_structural() -> None:
    integration = SimpleIntegration(id="plain", actions={"plain": PlainAction()})

    assert isinstance(PlainAction(), Action)
    assert isinstance(FunctionAction(id="f", func=dict), Action)
    assert isinstance(integration, Integration)


def test_get_action_by_id() -> None:
    action = FunctionAction(
        id="helpdesk.assign",
        func=dict,
        name="Assign ticket",
        fields=[ActionField(name="ticket", label="Ticket", required=True)],
    )
    integration = SimpleIntegration(id="helpdesk", actions={"assign": action})

    assert integration.get_action("helpdesk.assign") is action
    assert integration.get_action("assign") is None


async def test_setup_stores_config() -> None:
    integration = SimpleIntegration(id="helpdesk")
    await integration.setup({"token": "t"})
    assert integration.config == {"token": "t"}


async def test_manager_runs_plain_protocol_actions(catalog: dict[str, dict[str, str]]) -> None:
    from automation_engine.engine import Manager, Workflow

    manager = Manager(catalog)
    manager.add_integration(SimpleIntegration(id="plain", actions={"plain": PlainAction()}))
    workflow = Workflow(
        manager, "ticket_created", steps=[{"id": "p", "action": "plain", "data": {"x": 1}}]
    )

    results = await workflow.run()
    assert results[-1].output == {"got": {"x": 1}}
