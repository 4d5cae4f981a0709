from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import ActionNotFoundError, DuplicateStepError

if TYPE_CHECKING:
    from .manager import Manager


class WorkflowStep(BaseModel):
    """One action invocation inside a workflow.

    `data` is a template: any nested structure of mappings, lists and scalars whose
    strings may contain `<<stepId.field>>` markers.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    action: str
    data: Any = Field(default_factory=dict)

    def to_raw(self) -> dict[str, Any]:
        return {"id": self.id, "action": self.action, "data": self.data}


class WorkflowResult(BaseModel):
    step: str
    output: Any = Field(default_factory=dict)


StepLike = WorkflowStep | Mapping[str, Any]


def build_steps(
    workflow_id: str,
    steps: Iterable[StepLike],
    *,
    trigger_event: str | None = None,
    manager: Manager | None = None,
) -> list[WorkflowStep]:
    """Validate raw step definitions for a workflow.

    Step ids must be unique and must not reuse `trigger_event`, whose payload
    is recorded under that id ahead of the steps. When `manager` is given every
    step's action must already be registered with it.
    """

    built: list[WorkflowStep] = []
    seen: set[str] = {trigger_event} if trigger_event is not None else set()
    for raw in steps:
        step = raw if isinstance(raw, WorkflowStep) else WorkflowStep.model_validate(raw)
        if step.id in seen:
            raise DuplicateStepError(workflow_id, step.id)
        seen.add(step.id)
        if manager is not None and manager.get_action(step.action) is None:
            raise ActionNotFoundError(step.action, step_id=step.id)
        built.append(step)
    return built
