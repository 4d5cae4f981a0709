from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from .errors import ActionDisabledError, ActionNotFoundError, ConfigurationError, StepNotFoundError
from .events import EventBus
from .run_state import RunContext, RunSnapshot, RunState
from .steps import StepLike, WorkflowResult, WorkflowStep, build_steps
from .templating import resolve_template

if TYPE_CHECKING:
    from .manager import Manager

logger = logging.getLogger(__name__)


class RawWorkflow(BaseModel):
    """Serializable form of a workflow: `{id, name?, steps, trigger}`."""

    id: str
    name: str | None = None
    steps: list[WorkflowStep] = Field(default_factory=list)
    trigger: str


class Workflow:
    """An ordered chain of steps started by one trigger event.

    Creating a workflow registers it with `manager`. Registration is skipped
    (with a warning) when the manager has no event slot for `trigger_event`.

    Every run works on its own `RunContext`, so overlapping runs never share
    results and nothing is left over from a previous run, including one that
    failed. A step may fire the workflow's own trigger event; the nested run
    proceeds independently of the outer one.
    """

    def __init__(
        self,
        manager: Manager,
        trigger_event: str,
        *,
        id: str | None = None,
        name: str | None = None,
        steps: Iterable[StepLike] | None = None,
        validate_steps: bool | None = None,
    ) -> None:
        self._manager = manager
        self.id: str = id or str(uuid.uuid4())
        self.name = name
        self.trigger_event = trigger_event
        self.on_workflow_run: EventBus[list[WorkflowResult]] = EventBus(f"workflow:{self.id}")
        self.last_run: RunSnapshot | None = None

        self._steps: list[WorkflowStep] = []
        self._active: list[RunContext] = []

        if steps is not None:
            self.set_steps(steps, validate=validate_steps)

        manager.add_workflow(self)

    def __repr__(self) -> str:
        return f"Workflow(id={self.id!r}, name={self.name!r}, trigger={self.trigger_event!r})"

    @property
    def label(self) -> str:
        return self.name or self.id

    @property
    def steps(self) -> list[WorkflowStep]:
        return list(self._steps)

    @steps.setter
    def steps(self, steps: Iterable[StepLike]) -> None:
        self.set_steps(steps)

    def set_steps(self, steps: Iterable[StepLike], *, validate: bool | None = None) -> None:
        """Replace all steps at once.

        Step ids must be unique. With validation on (the manager's default unless
        `validate` says otherwise) each step's action must already be registered.
        """

        if validate is None:
            validate = self._manager.validate_steps
        self._steps = build_steps(
            self.id,
            steps,
            trigger_event=self.trigger_event,
            manager=self._manager if validate else None,
        )

    def get_step(self, step_id: str) -> WorkflowStep:
        for step in self._steps:
            if step.id == step_id:
                return step
        raise StepNotFoundError(self.id, step_id)

    @property
    def state(self) -> RunState:
        return RunState.RUNNING if self._active else RunState.IDLE

    @property
    def cursor(self) -> int:
        """Index of the next step of the latest run in progress; 0 when idle."""

        return self._active[-1].cursor if self._active else 0

    @property
    def raw(self) -> dict[str, Any]:
        return self.to_raw()

    def to_raw(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "steps": [step.to_raw() for step in self._steps],
            "trigger": self.trigger_event,
        }

    @classmethod
    def from_raw(
        cls,
        manager: Manager,
        raw: RawWorkflow | Mapping[str, Any],
        *,
        validate_steps: bool | None = None,
    ) -> Workflow:
        data = raw if isinstance(raw, RawWorkflow) else RawWorkflow.model_validate(raw)
        return cls(
            manager,
            data.trigger,
            id=data.id,
            name=data.name,
            steps=data.steps,
            validate_steps=validate_steps,
        )

    def load_raw(self, raw: RawWorkflow | Mapping[str, Any]) -> None:
        """Re-initialise id, name and steps from a serialized workflow.

        The trigger event is fixed at construction and must match.
        """

        data = raw if isinstance(raw, RawWorkflow) else RawWorkflow.model_validate(raw)
        if data.trigger != self.trigger_event:
            raise ConfigurationError(
                f"Workflow {self.id!r} is triggered by {self.trigger_event!r}, "
                f"not {data.trigger!r}",
                {"workflow": self.id, "trigger": data.trigger},
            )

        self.set_steps(data.steps)
        self.name = data.name
        if data.id != self.id:
            registered = self._manager.workflows.get(self.id) is self
            if registered:
                self._manager.remove_workflow(self.id)
            self.id = data.id
            if registered:
                self._manager.add_workflow(self)

    async def run(self, data: Mapping[str, Any] | None = None) -> list[WorkflowResult]:
        """Execute every step in order and return the results.

        The first result is the trigger payload keyed by the trigger event id,
        followed by one result per step in declaration order. The same list is
        delivered to `on_workflow_run` listeners.
        """

        context = RunContext(self.id)
        self._active.append(context)
        try:
            results = await self._execute(context, data)
        finally:
            self._active.remove(context)
            self.last_run = context.snapshot

        await self.on_workflow_run.trigger(list(results))
        return results

    async def _execute(
        self, context: RunContext, data: Mapping[str, Any] | None
    ) -> list[WorkflowResult]:
        context.start()
        context.results.append(
            WorkflowResult(step=self.trigger_event, output=data if data is not None else {})
        )
        steps = list(self._steps)
        logger.info(
            "Workflow run started", extra={"workflow": self.id, "steps": len(steps)}
        )

        try:
            while context.cursor < len(steps):
                step = steps[context.cursor]
                output = await self._run_step(step, context.results)
                context.results.append(WorkflowResult(step=step.id, output=output))
                context.advance()
        except asyncio.CancelledError as e:
            context.fail(e)
            logger.warning(
                "Workflow run cancelled",
                extra={"workflow": self.id, "step": steps[context.cursor].id},
            )
            raise
        except Exception as e:
            context.fail(e)
            logger.exception(
                "Workflow run failed",
                extra={"workflow": self.id, "step": steps[context.cursor].id},
            )
            raise

        context.complete()
        logger.info("Workflow run completed", extra={"workflow": self.id})
        return list(context.results)

    async def run_step(
        self, step_id: str, results: Iterable[WorkflowResult] = ()
    ) -> Any:
        """Run a single step against previously recorded results."""

        return await self._run_step(self.get_step(step_id), list(results))

    async def _run_step(self, step: WorkflowStep, results: list[WorkflowResult]) -> Any:
        action = self._manager.get_action(step.action)
        if action is None:
            raise ActionNotFoundError(step.action, step_id=step.id)
        if not action.enabled:
            raise ActionDisabledError(step.action, step_id=step.id)

        input_data = resolve_template(step.data, results)
        logger.debug(
            "Running step", extra={"workflow": self.id, "step": step.id, "action": step.action}
        )
        output = action.run(input_data)
        if inspect.isawaitable(output):
            output = await output
        return {} if output is None else output
