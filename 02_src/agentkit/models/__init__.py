"""Core data models for agentkit."""

from .accounting import AccountingSnapshot, Budget, TokenUsage
from .agents import (
    AgentExecutionState,
    AgentProfile,
    AgentRole,
    AgentStatus,
    ModelTier,
    ResponseMode,
    RunResult,
)
from .conversations import ConversationMessage, ConversationSession
from .events import EventKind, StoreEvent
from .timestamps import utc_now
from .tracing import TraceEvent
from .workflows import (
    WorkflowDefinition,
    WorkflowExecutionState,
    WorkflowPattern,
    WorkflowStatus,
    WorkflowStep,
)

__all__ = [
    # Accounting
    "AccountingSnapshot",
    "Budget",
    "TokenUsage",
    # Agents
    "AgentExecutionState",
    "AgentProfile",
    "AgentRole",
    "AgentStatus",
    "ModelTier",
    "ResponseMode",
    "RunResult",
    # Conversations
    "ConversationMessage",
    "ConversationSession",
    # Events
    "EventKind",
    "StoreEvent",
    "TraceEvent",
    # Workflows
    "WorkflowDefinition",
    "WorkflowExecutionState",
    "WorkflowPattern",
    "WorkflowStatus",
    "WorkflowStep",
    "utc_now",
]
