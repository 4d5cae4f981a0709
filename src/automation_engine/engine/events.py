from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")

Handler = Callable[[T], Any]

# group name -> event name -> event id
EventCatalog = Mapping[str, Mapping[str, str]]

_CATALOG_ADAPTER: TypeAdapter[dict[str, dict[str, str]]] = TypeAdapter(dict[str, dict[str, str]])


class EventBus(Generic[T]):
    """A named trigger point holding an ordered list of subscribers.

    Handlers may be plain callables or coroutine functions. `trigger` awaits
    each handler in turn, so a handler only starts once the previous one
    has finished.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._handlers: list[Handler[T]] = []

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, handler: object) -> bool:
        return any(h is handler for h in self._handlers)

    @property
    def handlers(self) -> tuple[Handler[T], ...]:
        return tuple(self._handlers)

    def add(self, handler: Handler[T]) -> None:
        self._handlers.append(handler)

    def remove(self, handler: Handler[T]) -> None:
        # Identity, not equality.
        self._handlers = [h for h in self._handlers if h is not handler]

    def reset(self) -> None:
        self._handlers.clear()

    async def trigger(self, payload: T | None = None) -> None:
        """Deliver `payload` to every handler registered when the call starts.

        A failing handler does not prevent later handlers from running. Once the
        pass is over the failure is re-raised; several failures are raised
        together as an `ExceptionGroup`.
        """

        handlers = list(self._handlers)
        errors: list[Exception] = []
        for handler in handlers:
            try:
                result = handler(payload)  # type: ignore[arg-type]
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.exception(
                    "Event handler failed",
                    extra={"event": self.name, "handler": _describe(handler)},
                )
                errors.append(e)

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise ExceptionGroup(f"{len(errors)} handlers failed for event {self.name!r}", errors)


def _describe(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


def iter_event_ids(catalog: EventCatalog) -> Iterator[str]:
    """Yield every event id declared in a catalog, group by group."""

    for events in catalog.values():
        yield from events.values()


def load_event_catalog(path: Path) -> dict[str, dict[str, str]]:
    """Read a JSON event catalog of the form `{group: {name: id}}`."""

    return _CATALOG_ADAPTER.validate_json(path.read_text(encoding="utf-8"))
