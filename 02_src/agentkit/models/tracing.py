"""Tracing and observability data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TraceEvent:
    """A persisted observability record derived from a StoreEvent."""

    id: str
    event_type: str  # StoreEvent kind, e.g. "agent_state_changed"
    actor: str  # publishing component
    data: dict  # summarized payload
    timestamp: datetime
