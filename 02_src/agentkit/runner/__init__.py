"""Per-agent execution."""

from .task_runner import STOPPED_ERROR, AgentTaskRunner

__all__ = ["AgentTaskRunner", "STOPPED_ERROR"]
