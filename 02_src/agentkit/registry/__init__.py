"""Agent profile registry."""

from .builtin import BUILTIN_PROFILES
from .loader import load_agent_files, parse_agent_markdown
from .registry import AgentRegistry, IAgentRegistry

__all__ = [
    "AgentRegistry",
    "BUILTIN_PROFILES",
    "IAgentRegistry",
    "load_agent_files",
    "parse_agent_markdown",
]
