"""Workflow-related data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .agents import AgentRole
from .timestamps import from_iso, to_iso


class WorkflowPattern(str, Enum):
    """Supported execution topologies."""

    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    FAN_OUT = "fan-out"


class WorkflowStatus(str, Enum):
    """Lifecycle status of a workflow execution."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class WorkflowStep:
    """One agent invocation within a workflow."""

    role: AgentRole
    input: str | None = None  # explicit prompt, overrides the initial prompt


@dataclass(frozen=True)
class WorkflowDefinition:
    """Static workflow template."""

    id: str
    name: str
    pattern: WorkflowPattern
    steps: tuple[WorkflowStep, ...]


@dataclass
class WorkflowExecutionState:
    """Execution record for one workflow id."""

    workflow_id: str
    status: WorkflowStatus = WorkflowStatus.IDLE
    current_step: int = 0
    started_at: datetime | None = None
    ended_at: datetime | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "workflow_id": self.workflow_id,
            "status": self.status.value,
            "current_step": self.current_step,
            "started_at": to_iso(self.started_at),
            "ended_at": to_iso(self.ended_at),
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkflowExecutionState":
        return cls(
            workflow_id=data["workflow_id"],
            status=WorkflowStatus(data.get("status", WorkflowStatus.IDLE.value)),
            current_step=int(data.get("current_step", 0)),
            started_at=from_iso(data.get("started_at")),
            ended_at=from_iso(data.get("ended_at")),
            error=data.get("error"),
        )
