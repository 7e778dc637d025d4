"""
Mutation events and the publish/subscribe bus that carries them.

The bus is an explicit object handed to the RecordStore rather than a module
global. Dispatch is synchronous from the publisher's point of view: `publish`
awaits every handler for the event, in subscription order, before returning.

Handler failures are isolated by default: the failure is logged, passed to any
error listeners, and the remaining handlers still run. With `strict=True` the
first failure propagates out of `publish` (and so out of the mutation that
published it).
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, DefaultDict, Iterable, List

from vault.domain.models import Record
from vault.utils.logging import get_logger

log = get_logger(__name__)


class EventKind(str, Enum):
    RECORD_ADDED = "recordAdded"
    RECORD_UPDATED = "recordUpdated"
    RECORD_DELETED = "recordDeleted"


MUTATION_EVENTS = (EventKind.RECORD_ADDED, EventKind.RECORD_UPDATED, EventKind.RECORD_DELETED)


@dataclass(frozen=True)
class MutationEvent:
    kind: EventKind
    record: Record


Handler = Callable[[MutationEvent], Awaitable[None]]


@dataclass(frozen=True)
class HandlerFailure:
    """A handler that raised while an event was being dispatched."""

    event: MutationEvent
    handler: Handler
    error: Exception

    @property
    def handler_name(self) -> str:
        return getattr(self.handler, "__qualname__", repr(self.handler))

    def describe(self) -> str:
        return f"{self.event.kind.value} handler {self.handler_name} failed: {self.error}"


ErrorListener = Callable[[HandlerFailure], None]


class EventBus:
    """Awaitable pub/sub keyed by EventKind."""

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict
        self._subscribers: DefaultDict[EventKind, List[Handler]] = defaultdict(list)
        self._error_listeners: List[ErrorListener] = []

    def subscribe(self, kind: EventKind, handler: Handler) -> None:
        self._subscribers[EventKind(kind)].append(handler)

    def subscribe_many(self, kinds: Iterable[EventKind], handler: Handler) -> None:
        for kind in kinds:
            self.subscribe(kind, handler)

    def on_error(self, listener: ErrorListener) -> None:
        """Register a listener for handler failures (non-strict mode only)."""
        self._error_listeners.append(listener)

    def handlers(self, kind: EventKind) -> List[Handler]:
        return list(self._subscribers.get(EventKind(kind), []))

    async def publish(self, kind: EventKind, record: Record) -> List[HandlerFailure]:
        """
        Deliver an event to its handlers and wait for all of them.

        Returns
        -------
        List[HandlerFailure]
            Failures collected in non-strict mode; always empty in strict mode,
            where the first failure is re-raised instead.
        """
        event = MutationEvent(kind=EventKind(kind), record=record)
        failures: List[HandlerFailure] = []
        for handler in self.handlers(event.kind):
            try:
                await handler(event)
            except Exception as exc:
                if self.strict:
                    raise
                failure = HandlerFailure(event=event, handler=handler, error=exc)
                log.exception(
                    "Event handler failed",
                    extra={
                        "event": event.kind.value,
                        "record_id": record.id,
                        "handler": failure.handler_name,
                    },
                )
                self._notify(failure)
                failures.append(failure)
        return failures

    def _notify(self, failure: HandlerFailure) -> None:
        for listener in self._error_listeners:
            listener(failure)


__all__ = [
    "EventBus",
    "EventKind",
    "HandlerFailure",
    "MUTATION_EVENTS",
    "MutationEvent",
]
