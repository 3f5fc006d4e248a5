"""Worker implementations."""

from .anthropic_worker import AnthropicWorker
from .base import IWorker, PartialOutputHandler
from .cli_worker import CliWorker

__all__ = ["AnthropicWorker", "CliWorker", "IWorker", "PartialOutputHandler"]
