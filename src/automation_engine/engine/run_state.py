from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


ALLOWED_TRANSITIONS: dict[RunState, set[RunState]] = {
    RunState.IDLE: {RunState.RUNNING},
    RunState.RUNNING: {RunState.COMPLETED, RunState.FAILED},
    RunState.COMPLETED: {RunState.IDLE},
    RunState.FAILED: {RunState.IDLE},
}


class IllegalTransitionError(ValueError):
    pass


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class RunSnapshot:
    """An immutable view of one workflow run.

    `cursor` is the index of the next step to execute, 0..N.
    """

    state: RunState = RunState.IDLE
    cursor: int = 0
    started_at: datetime | None = None
    finished_at: datetime | None = None
    error: str | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {"state": self.state.value, "cursor": self.cursor}
        if self.started_at is not None:
            out["started_at"] = self.started_at.isoformat()
        if self.finished_at is not None:
            out["finished_at"] = self.finished_at.isoformat()
        if self.error is not None:
            out["error"] = self.error
        return out


def transition(*, current: RunSnapshot, to: RunState, **changes: Any) -> RunSnapshot:
    allowed = ALLOWED_TRANSITIONS.get(current.state, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.state.value} -> {to.value}")
    return replace(current, state=to, **changes)


@dataclass(slots=True, eq=False)
class RunContext:
    """Mutable state owned by exactly one run.

    A new context is created for every `Workflow.run` call and dropped when the
    run ends, whichever way it ends.
    """

    workflow_id: str
    results: list[Any] = field(default_factory=list)
    snapshot: RunSnapshot = field(default_factory=RunSnapshot)

    @property
    def cursor(self) -> int:
        return self.snapshot.cursor

    def start(self) -> None:
        self.snapshot = transition(
            current=self.snapshot, to=RunState.RUNNING, cursor=0, started_at=_utc_now()
        )

    def advance(self) -> None:
        self.snapshot = replace(self.snapshot, cursor=self.snapshot.cursor + 1)

    def complete(self) -> None:
        self.snapshot = transition(
            current=self.snapshot, to=RunState.COMPLETED, finished_at=_utc_now()
        )

    def fail(self, error: BaseException) -> None:
        self.snapshot = transition(
            current=self.snapshot,
            to=RunState.FAILED,
            finished_at=_utc_now(),
            error=f"{type(error).__name__}: {error}",
        )
