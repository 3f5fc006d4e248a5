"""Tracker implementation for creating TraceEvents."""

import asyncio
import uuid
from typing import Protocol

from ..event_bus import IEventBus
from ..logging_config import get_logger
from ..models import EventKind, StoreEvent, TraceEvent, utc_now
from ..storage import IStorage

logger = get_logger(__name__)

PAYLOAD_SUMMARY_LENGTH = 100


class ITracker(Protocol):
    """Creating TraceEvents. Two channels: EventBus subscription + direct calls."""

    async def track(self, event_type: str, actor: str, data: dict) -> None:
        """Create TraceEvent and save to Storage."""
        ...

    async def flush(self) -> None:
        """Wait for pending saves."""
        ...

    async def stop(self) -> None:
        """Stop tracker and wait for pending saves."""
        ...


class Tracker:
    """Creates TraceEvents via EventBus subscription and direct track() calls.

    EventBus delivery is synchronous, so each event is saved by a scheduled
    task. Agent state changes are recorded only when the status changes;
    streamed output updates are not traced.
    """

    def __init__(self, event_bus: IEventBus, storage: IStorage):
        self._event_bus = event_bus
        self._storage = storage
        self._pending: set[asyncio.Task] = set()
        self._last_status: dict[str, str] = {}
        self._started = False

    async def start(self) -> None:
        """Subscribe to all EventBus event kinds."""
        for kind in EventKind:
            self._event_bus.subscribe(kind, self._handle_event)
        self._started = True

    def _handle_event(self, event: StoreEvent) -> None:
        """Handle incoming StoreEvent from EventBus."""
        data = self._summarize(event)
        if data is None:
            return

        task = asyncio.get_running_loop().create_task(
            self.track(event_type=event.kind.value, actor=event.source, data=data)
        )
        self._pending.add(task)
        task.add_done_callback(self._track_done)

    def _summarize(self, event: StoreEvent) -> dict | None:
        payload = event.payload
        if event.kind == EventKind.AGENT_STATE_CHANGED:
            state = payload["state"]
            if self._last_status.get(payload["role"]) == state["status"]:
                return None
            self._last_status[payload["role"]] = state["status"]
            return {
                "role": payload["role"],
                "status": state["status"],
                "retry_count": state["retry_count"],
                "error": state["error"],
                "output_length": len(state["output"]),
            }
        if event.kind == EventKind.ALL_AGENT_STATES_RESET:
            self._last_status.clear()
        elif event.kind == EventKind.AGENT_STATE_CLEARED:
            self._last_status.pop(payload["role"], None)
        elif event.kind == EventKind.ACCOUNTING_CHANGED:
            return {
                "total_tokens": payload["total_tokens"],
                "total_cost": payload["total_cost"],
                "daily_tokens": payload["daily_tokens"],
                "session_count": payload["session_count"],
            }
        elif event.kind == EventKind.WORKFLOW_STATE_CHANGED:
            return {"workflow_id": payload["workflow_id"], **payload["state"]}

        summary = str(payload)
        if len(summary) > PAYLOAD_SUMMARY_LENGTH:
            return {"payload_summary": summary[:PAYLOAD_SUMMARY_LENGTH]}
        return dict(payload)

    def _track_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Failed to save trace event: %s", task.exception())

    async def track(self, event_type: str, actor: str, data: dict) -> None:
        """Create TraceEvent and save to Storage."""
        trace_event = TraceEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            actor=actor,
            data=data,
            timestamp=utc_now(),
        )
        await self._storage.save_trace_event(trace_event)

    async def flush(self) -> None:
        """Wait for scheduled saves to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def stop(self) -> None:
        """Unsubscribe and wait for pending saves."""
        if self._started:
            for kind in EventKind:
                self._event_bus.unsubscribe(kind, self._handle_event)
            self._started = False
        await self.flush()
