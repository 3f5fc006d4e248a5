"""Workflow execution."""

from .executor import WorkflowCallbacks, WorkflowExecutionError, WorkflowExecutor
from .templates import WORKFLOW_TEMPLATES, get_template

__all__ = [
    "WORKFLOW_TEMPLATES",
    "WorkflowCallbacks",
    "WorkflowExecutionError",
    "WorkflowExecutor",
    "get_template",
]
