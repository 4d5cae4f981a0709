"""Exception types raised by the automation engine.

Registration problems are `ConfigurationError`s. Anything that aborts a
running workflow derives from `WorkflowRunError`.
"""

from __future__ import annotations


class AutomationError(Exception):
    """Base error for all automation engine exceptions."""

    code = "AUTOMATION_ERROR"

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(AutomationError):
    """A workflow or catalog definition cannot be wired up."""

    code = "CONFIGURATION"


class DuplicateStepError(ConfigurationError):
    code = "DUPLICATE_STEP"

    def __init__(self, workflow_id: str, step_id: str) -> None:
        super().__init__(
            f"Step id {step_id!r} is already taken in workflow {workflow_id!r}",
            {"workflow": workflow_id, "step": step_id},
        )
        self.workflow_id = workflow_id
        self.step_id = step_id


class EventNotFoundError(AutomationError, LookupError):
    """No event slot exists for the requested event id."""

    code = "EVENT_NOT_FOUND"

    def __init__(self, event_id: str) -> None:
        super().__init__(f"There is no event with id {event_id!r}", {"event": event_id})
        self.event_id = event_id


class WorkflowRunError(AutomationError):
    """Base error for failures that abort a workflow run."""

    code = "WORKFLOW_RUN"


class StepNotFoundError(WorkflowRunError):
    code = "STEP_NOT_FOUND"

    def __init__(self, workflow_id: str, step_id: str) -> None:
        super().__init__(
            f"Step {step_id!r} wasn't found in workflow {workflow_id!r}",
            {"workflow": workflow_id, "step": step_id},
        )
        self.workflow_id = workflow_id
        self.step_id = step_id


class ActionNotFoundError(WorkflowRunError):
    code = "ACTION_NOT_FOUND"

    def __init__(self, action_id: str, step_id: str | None = None) -> None:
        super().__init__(
            f"Action {action_id!r} wasn't found in the registered integrations",
            {"action": action_id, "step": step_id},
        )
        self.action_id = action_id
        self.step_id = step_id


class ActionDisabledError(WorkflowRunError):
    code = "ACTION_DISABLED"

    def __init__(self, action_id: str, step_id: str | None = None) -> None:
        super().__init__(
            f"Action {action_id!r} is not available to run",
            {"action": action_id, "step": step_id},
        )
        self.action_id = action_id
        self.step_id = step_id
