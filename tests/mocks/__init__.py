"""Shared test doubles."""

from __future__ import annotations

from typing import Any


class Recorder:
    """Records the input every action received, in call order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def inputs(self, action_id: str) -> list[Any]:
        return [data for called, data in self.calls if called == action_id]


__all__ = ["Recorder"]
