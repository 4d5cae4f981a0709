"""Registry binding integrations, actions, events and workflows together."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .errors import ConfigurationError, EventNotFoundError
from .events import EventBus, EventCatalog, iter_event_ids, load_event_catalog
from .integration import Action, Integration
from .steps import WorkflowResult
from .workflow import RawWorkflow, Workflow

if TYPE_CHECKING:
    from automation_engine.config import EngineSettings

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]
Dispatcher = Callable[[Payload | None], Awaitable[list[WorkflowResult]]]


class Manager:
    """Owns the event slots and wires workflows to them.

    Event slots are created once from `events` and cannot be added later.
    """

    def __init__(self, events: EventCatalog, *, validate_steps: bool = True) -> None:
        self.validate_steps = validate_steps
        self.integrations: dict[str, Integration] = {}
        self.actions: dict[str, Action] = {}
        self.workflows: dict[str, Workflow] = {}

        self._events: dict[str, EventBus[Payload]] = {
            event_id: EventBus(event_id) for event_id in iter_event_ids(events)
        }
        self._dispatchers: dict[str, Dispatcher] = {}

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> Manager:
        """Build a manager from the configured event catalog file."""

        if settings.event_catalog_path is None:
            raise ConfigurationError(
                "No event catalog configured", {"setting": "event_catalog_path"}
            )
        return cls(
            load_event_catalog(settings.event_catalog_path),
            validate_steps=settings.validate_steps,
        )

    @property
    def event_ids(self) -> list[str]:
        return list(self._events)

    def has_event(self, event_id: str) -> bool:
        return event_id in self._events

    def add_integration(self, *integrations: Integration) -> None:
        for integration in integrations:
            if integration.id in self.integrations:
                continue
            self.integrations[integration.id] = integration
            logger.debug(
                "Integration added",
                extra={"integration": integration.id, "actions": len(integration.actions)},
            )

    def remove_integration(self, integration_id: str) -> None:
        self.integrations.pop(integration_id, None)

    def add_action(self, *actions: Action) -> None:
        """Register actions that do not belong to any integration."""

        for action in actions:
            if action.id not in self.actions:
                self.actions[action.id] = action

    def remove_action(self, action_id: str) -> None:
        self.actions.pop(action_id, None)

    def get_action(self, action_id: str) -> Action | None:
        """Find an action by id.

        Standalone actions are searched first, then each integration in
        registration order. The first match wins.
        """

        action = self.actions.get(action_id)
        if action is not None:
            return action
        for integration in self.integrations.values():
            for candidate in integration.actions.values():
                if candidate.id == action_id:
                    return candidate
        return None

    def _register_dispatcher(self, workflow: Workflow) -> Dispatcher:
        async def dispatch(data: Payload | None) -> list[WorkflowResult]:
            return await workflow.run(data)

        self._dispatchers[workflow.id] = dispatch
        return dispatch

    def add_workflow(self, *workflows: Workflow) -> list[Workflow]:
        """Register workflows and subscribe them to their trigger events.

        A workflow whose trigger event is unknown is skipped with a warning;
        the rest of the batch is still registered. Returns the workflows that
        were newly registered.
        """

        added: list[Workflow] = []
        for workflow in workflows:
            event = self._events.get(workflow.trigger_event)
            if event is None:
                logger.warning(
                    "There are no registered events that can run workflow %s",
                    workflow.label,
                    extra={"workflow": workflow.id, "trigger": workflow.trigger_event},
                )
                continue
            if workflow.id in self.workflows:
                continue

            self.workflows[workflow.id] = workflow
            event.add(self._register_dispatcher(workflow))
            added.append(workflow)
            logger.debug(
                "Workflow subscribed",
                extra={"workflow": workflow.id, "trigger": workflow.trigger_event},
            )
        return added

    def remove_workflow(self, workflow_id: str) -> None:
        workflow = self.workflows.get(workflow_id)
        if workflow is None:
            return

        # Unsubscribe first, then forget the workflow.
        dispatcher = self._dispatchers.pop(workflow_id, None)
        event = self._events.get(workflow.trigger_event)
        if event is not None and dispatcher is not None:
            event.remove(dispatcher)
        del self.workflows[workflow_id]

    def create_workflow(
        self, raw: RawWorkflow | Mapping[str, Any], *, validate_steps: bool | None = None
    ) -> Workflow:
        """Build a workflow from its serialized form; it registers itself."""

        return Workflow.from_raw(self, raw, validate_steps=validate_steps)

    def load_workflows(
        self,
        raws: Iterable[RawWorkflow | Mapping[str, Any]],
        *,
        validate_steps: bool | None = None,
    ) -> list[Workflow]:
        workflows = [self.create_workflow(raw, validate_steps=validate_steps) for raw in raws]
        return [w for w in workflows if self.workflows.get(w.id) is w]

    def export_workflows(self) -> list[dict[str, Any]]:
        return [workflow.to_raw() for workflow in self.workflows.values()]

    async def trigger_workflow(
        self, workflow_id: str, data: Payload | None = None
    ) -> list[WorkflowResult] | None:
        """Run a workflow directly, bypassing its trigger event."""

        workflow = self.workflows.get(workflow_id)
        if workflow is None:
            return None
        return await workflow.run(data)

    async def trigger_event(self, event_id: str, data: Payload | None = None) -> None:
        """Fire an event, running every workflow subscribed to it in turn."""

        event = self._events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        logger.info(
            "Event triggered", extra={"event": event_id, "subscribers": len(event)}
        )
        await event.trigger(data)
