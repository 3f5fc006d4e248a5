"""agentkit: agent workflow orchestration engine."""

from .accounting import AccountingStore, IAccountingPersistence
from .app import Application, IApplication
from .config import Settings
from .event_bus import EventBus, IEventBus
from .models import (
    AccountingSnapshot,
    AgentExecutionState,
    AgentProfile,
    AgentRole,
    AgentStatus,
    Budget,
    ConversationSession,
    EventKind,
    ModelTier,
    ResponseMode,
    RunResult,
    StoreEvent,
    TokenUsage,
    TraceEvent,
    WorkflowDefinition,
    WorkflowExecutionState,
    WorkflowPattern,
    WorkflowStatus,
    WorkflowStep,
)
from .prompts import PromptBuilder
from .registry import AgentRegistry, IAgentRegistry
from .runner import AgentTaskRunner
from .state import ConversationStore, IStateStore, StateStore
from .storage import IStorage, Storage
from .tracker import ITracker, Tracker
from .workers import AnthropicWorker, CliWorker, IWorker
from .workflows import (
    WORKFLOW_TEMPLATES,
    WorkflowCallbacks,
    WorkflowExecutionError,
    WorkflowExecutor,
)

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "AccountingSnapshot",
    "AgentExecutionState",
    "AgentProfile",
    "AgentRole",
    "AgentStatus",
    "Budget",
    "ConversationSession",
    "EventKind",
    "ModelTier",
    "ResponseMode",
    "RunResult",
    "StoreEvent",
    "TokenUsage",
    "TraceEvent",
    "WorkflowDefinition",
    "WorkflowExecutionState",
    "WorkflowPattern",
    "WorkflowStatus",
    "WorkflowStep",
    # Components
    "AccountingStore",
    "AgentRegistry",
    "AgentTaskRunner",
    "AnthropicWorker",
    "CliWorker",
    "ConversationStore",
    "EventBus",
    "IAccountingPersistence",
    "IAgentRegistry",
    "IEventBus",
    "IStateStore",
    "IStorage",
    "ITracker",
    "IWorker",
    "PromptBuilder",
    "StateStore",
    "Storage",
    "Tracker",
    "WORKFLOW_TEMPLATES",
    "WorkflowCallbacks",
    "WorkflowExecutionError",
    "WorkflowExecutor",
]
