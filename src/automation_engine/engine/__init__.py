"""Event-driven workflow engine.

This package provides first-class types for:
- Event slots that external code fires (`EventBus`)
- The registry wiring events to workflows (`Manager`)
- Workflows: ordered chains of action steps with `<<step.field>>` data references
"""

from .errors import (
    ActionDisabledError,
    ActionNotFoundError,
    AutomationError,
    ConfigurationError,
    DuplicateStepError,
    EventNotFoundError,
    StepNotFoundError,
    WorkflowRunError,
)
from .events import EventBus, EventCatalog, iter_event_ids, load_event_catalog
from .integration import Action, ActionField, FunctionAction, Integration, SimpleIntegration
from .manager import Manager
from .run_state import IllegalTransitionError, RunSnapshot, RunState
from .steps import WorkflowResult, WorkflowStep
from .templating import resolve_template
from .workflow import RawWorkflow, Workflow

__all__ = [
    "Action",
    "ActionDisabledError",
    "ActionField",
    "ActionNotFoundError",
    "AutomationError",
    "ConfigurationError",
    "DuplicateStepError",
    "EventBus",
    "EventCatalog",
    "EventNotFoundError",
    "FunctionAction",
    "IllegalTransitionError",
    "Integration",
    "Manager",
    "RawWorkflow",
    "RunSnapshot",
    "RunState",
    "SimpleIntegration",
    "StepNotFoundError",
    "Workflow",
    "WorkflowResult",
    "WorkflowRunError",
    "WorkflowStep",
    "iter_event_ids",
    "load_event_catalog",
    "resolve_template",
]
