"""Capability contract between the engine and its integrations.

The engine only needs `id`, `enabled` and `run` from an action, and `id` and
`actions` from an integration. Anything that has those attributes can be
registered; no base class is required.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, runtime_checkable

ActionOutput = Mapping[str, Any]


@runtime_checkable
class Action(Protocol):
    """A unit of work. `run` may be a coroutine function or a plain function."""

    id: str
    enabled: bool

    def run(self, data: dict[str, Any]) -> Awaitable[ActionOutput] | ActionOutput: ...


@runtime_checkable
class Integration(Protocol):
    """A named bundle of related actions, keyed by action name."""

    id: str
    actions: Mapping[str, Action]


@dataclass(frozen=True, slots=True)
class ActionField:
    """Describes one input an action expects.

    Used by builder surfaces only; the engine never reads it.
    """

    name: str
    label: str
    type: Literal["select", "text", "checkbox"] = "text"
    required: bool = False
    description: str | None = None
    options: list[str] | None = None


@dataclass(slots=True)
class FunctionAction:
    """An action backed by a callable."""

    id: str
    func: Callable[[dict[str, Any]], Awaitable[ActionOutput] | ActionOutput]
    name: str | None = None
    enabled: bool = True
    returns: list[str] = field(default_factory=list)
    fields: list[ActionField] = field(default_factory=list)

    async def run(self, data: dict[str, Any]) -> ActionOutput:
        result = self.func(data)
        if inspect.isawaitable(result):
            result = await result
        return result


@dataclass(slots=True)
class SimpleIntegration:
    id: str
    name: str | None = None
    enabled: bool = True
    actions: dict[str, Action] = field(default_factory=dict)
    config: dict[str, Any] | None = None

    async def setup(self, config: dict[str, Any]) -> None:
        self.config = config

    def get_action(self, action_id: str) -> Action | None:
        """Find an action by its id rather than by its name in `actions`."""

        return next((a for a in self.actions.values() if a.id == action_id), None)
