"""Conversation session data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from .accounting import TokenUsage
from .agents import AgentRole
from .timestamps import to_iso


@dataclass
class ConversationMessage:
    """A single exchange entry in a conversation."""

    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime
    token_usage: TokenUsage | None = None

    def to_dict(self) -> dict:
        return {
            "role": self.role,
            "content": self.content,
            "timestamp": to_iso(self.timestamp),
            "token_usage": self.token_usage.to_dict() if self.token_usage else None,
        }


@dataclass
class ConversationSession:
    """Worker-side context that a role can resume."""

    role: AgentRole
    session_id: str
    created_at: datetime
    last_updated_at: datetime
    messages: list[ConversationMessage] = field(default_factory=list)
    total_tokens: int = 0
    total_cost: float = 0.0

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "session_id": self.session_id,
            "created_at": to_iso(self.created_at),
            "last_updated_at": to_iso(self.last_updated_at),
            "messages": [message.to_dict() for message in self.messages],
            "total_tokens": self.total_tokens,
            "total_cost": self.total_cost,
        }
