"""ConversationStore implementation."""

from ..event_bus import IEventBus
from ..models import (
    AgentRole,
    ConversationMessage,
    ConversationSession,
    EventKind,
    TokenUsage,
    utc_now,
)


class ConversationStore:
    """Continuation sessions per role, used to resume worker-side context."""

    SOURCE = "conversation_store"

    def __init__(self, event_bus: IEventBus):
        self._event_bus = event_bus
        self._sessions: dict[AgentRole, ConversationSession] = {}

    def get(self, role: AgentRole) -> ConversationSession | None:
        """Get the conversation of a role."""
        return self._sessions.get(role)

    def list_sessions(self) -> list[ConversationSession]:
        """Get all conversations."""
        return list(self._sessions.values())

    def get_session_id(self, role: AgentRole) -> str | None:
        """Get the continuation id a role can resume, if any."""
        session = self._sessions.get(role)
        return session.session_id if session else None

    def has_active(self, role: AgentRole) -> bool:
        """Check whether a role has a resumable conversation."""
        session = self._sessions.get(role)
        return bool(session and session.session_id and session.messages)

    def add_exchange(
        self,
        role: AgentRole,
        session_id: str,
        prompt: str,
        response: str,
        token_usage: TokenUsage | None = None,
    ) -> ConversationSession:
        """Append a user prompt and assistant response; create the session if needed."""
        now = utc_now()
        session = self._sessions.get(role)
        if session is None:
            session = ConversationSession(
                role=role,
                session_id=session_id,
                created_at=now,
                last_updated_at=now,
            )
            self._sessions[role] = session

        session.session_id = session_id
        session.last_updated_at = now
        session.messages.append(
            ConversationMessage(role="user", content=prompt, timestamp=now)
        )
        session.messages.append(
            ConversationMessage(
                role="assistant",
                content=response,
                timestamp=now,
                token_usage=token_usage,
            )
        )
        if token_usage:
            session.total_tokens += token_usage.total_tokens
            session.total_cost += token_usage.cost or 0.0

        self._event_bus.publish(
            EventKind.CONVERSATION_UPDATED,
            {
                "role": role.value,
                "session_id": session_id,
                "message_count": len(session.messages),
            },
            self.SOURCE,
        )
        return session

    def clear(self, role: AgentRole) -> None:
        """Forget a role's conversation so the next run starts fresh."""
        self._sessions.pop(role, None)
        self._event_bus.publish(
            EventKind.CONVERSATION_CLEARED, {"role": role.value}, self.SOURCE
        )

    def clear_all(self) -> None:
        """Forget every conversation."""
        self._sessions.clear()
        self._event_bus.publish(EventKind.ALL_CONVERSATIONS_CLEARED, {}, self.SOURCE)
