"""Agent-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .accounting import TokenUsage
from .timestamps import from_iso, to_iso


class AgentRole(str, Enum):
    """Worker profile identifiers."""

    PLANNER = "planner"
    SCOUT = "scout"
    RESEARCHER = "researcher"
    IMPLEMENTER = "implementer"
    CODE_REVIEWER = "code-reviewer"
    SECURITY_AUDITOR = "security-auditor"
    UI_UX_DESIGNER = "ui-ux-designer"
    DATABASE_ADMIN = "database-admin"
    TESTER = "tester"
    DOCUMENTER = "documenter"
    DEBUGGER = "debugger"
    OPTIMIZER = "optimizer"
    DEVOPS = "devops"
    BRAINSTORMER = "brainstormer"
    AGGREGATOR = "aggregator"


class AgentStatus(str, Enum):
    """Execution status of an agent."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"
    STOPPED = "stopped"


class ModelTier(str, Enum):
    """Cost/capability tier hint for model selection."""

    FAST = "fast"
    BALANCED = "balanced"
    POWERFUL = "powerful"


class ResponseMode(str, Enum):
    """Response verbosity hint."""

    CONCISE = "concise"
    BALANCED = "balanced"
    DETAILED = "detailed"


@dataclass(frozen=True)
class AgentProfile:
    """Immutable descriptor of how to invoke one agent role."""

    role: AgentRole
    name: str
    instructions: str
    capabilities: tuple[str, ...] = ()
    description: str = ""
    icon: str = ""
    model: str | None = None  # explicit model id, wins over the tier
    model_tier: ModelTier | None = None
    response_mode: ResponseMode | None = None
    max_output_tokens: int | None = None
    source: str = "builtin"


@dataclass
class RunResult:
    """Outcome of one worker invocation or of a whole runner execution."""

    success: bool
    output: str = ""
    error: str | None = None
    exit_code: int | None = None
    token_usage: TokenUsage | None = None
    session_id: str | None = None  # continuation id


@dataclass
class AgentExecutionState:
    """Live execution record for one role."""

    role: AgentRole
    status: AgentStatus = AgentStatus.IDLE
    output: str = ""
    error: str | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    retry_count: int = 0
    token_usage: TokenUsage | None = field(default=None)

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "status": self.status.value,
            "output": self.output,
            "error": self.error,
            "started_at": to_iso(self.started_at),
            "ended_at": to_iso(self.ended_at),
            "retry_count": self.retry_count,
            "token_usage": self.token_usage.to_dict() if self.token_usage else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AgentExecutionState":
        usage = data.get("token_usage")
        return cls(
            role=AgentRole(data["role"]),
            status=AgentStatus(data.get("status", AgentStatus.IDLE.value)),
            output=data.get("output", ""),
            error=data.get("error"),
            started_at=from_iso(data.get("started_at")),
            ended_at=from_iso(data.get("ended_at")),
            retry_count=int(data.get("retry_count", 0)),
            token_usage=TokenUsage.from_dict(usage) if usage else None,
        )
