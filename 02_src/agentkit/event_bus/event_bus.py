"""EventBus implementation for state change notifications."""

import uuid
from typing import Callable, Protocol

from ..logging_config import get_logger
from ..models import EventKind, StoreEvent, utc_now

logger = get_logger(__name__)


EventHandler = Callable[[StoreEvent], None]


class IEventBus(Protocol):
    """In-memory pub/sub for exchanging StoreEvents."""

    def subscribe(self, kind: EventKind, handler: EventHandler) -> None:
        """Subscribe a handler to an event kind."""
        ...

    def unsubscribe(self, kind: EventKind, handler: EventHandler) -> None:
        """Remove a previously subscribed handler."""
        ...

    def publish(self, kind: EventKind, payload: dict, source: str) -> StoreEvent:
        """Build a StoreEvent and deliver it to current subscribers."""
        ...


class EventBus:
    """In-memory pub/sub event bus.

    Delivery is synchronous: handlers subscribed at the time of emission are
    called in subscription order before ``publish`` returns.
    """

    def __init__(self):
        self._subscribers: dict[EventKind, list[EventHandler]] = {
            kind: [] for kind in EventKind
        }

    def subscribe(self, kind: EventKind, handler: EventHandler) -> None:
        """Subscribe a handler to an event kind."""
        self._subscribers[kind].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe a handler to every event kind."""
        for kind in EventKind:
            self.subscribe(kind, handler)

    def unsubscribe(self, kind: EventKind, handler: EventHandler) -> None:
        """Remove a previously subscribed handler (no-op if absent)."""
        handlers = self._subscribers[kind]
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, kind: EventKind, payload: dict, source: str) -> StoreEvent:
        """Build a StoreEvent and deliver it to current subscribers."""
        event = StoreEvent(
            id=str(uuid.uuid4()),
            kind=kind,
            payload=payload,
            source=source,
            timestamp=utc_now(),
        )

        # Snapshot so handlers may (un)subscribe during delivery
        handlers = list(self._subscribers[kind])
        for i, handler in enumerate(handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Error in handler %s for %s", i, kind.value)

        return event
