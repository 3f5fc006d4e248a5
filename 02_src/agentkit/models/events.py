"""Change notification data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class EventKind(str, Enum):
    """EventBus event kinds."""

    AGENT_STATE_CHANGED = "agent_state_changed"
    AGENT_STATE_CLEARED = "agent_state_cleared"
    ALL_AGENT_STATES_RESET = "all_agent_states_reset"
    WORKFLOW_STATE_CHANGED = "workflow_state_changed"
    WORKFLOW_STATE_CLEARED = "workflow_state_cleared"
    ACCOUNTING_CHANGED = "accounting_changed"
    BUDGET_WARNING = "budget_warning"
    BUDGET_EXCEEDED = "budget_exceeded"
    CONVERSATION_UPDATED = "conversation_updated"
    CONVERSATION_CLEARED = "conversation_cleared"
    ALL_CONVERSATIONS_CLEARED = "all_conversations_cleared"


@dataclass
class StoreEvent:
    """A change notification published through the EventBus."""

    id: str
    kind: EventKind
    payload: dict  # JSON-compatible, varies by kind
    source: str  # component that published
    timestamp: datetime
