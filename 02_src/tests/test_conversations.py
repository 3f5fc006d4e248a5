"""Tests for ConversationStore."""

from agentkit.models import AgentRole, EventKind, TokenUsage


class TestConversationStore:
    """Tests for conversation sessions."""

    def test_add_exchange_creates_session(self, conversations, events):
        """Test that the first exchange creates a session with two messages."""
        session = conversations.add_exchange(
            AgentRole.PLANNER,
            "sess-1",
            "plan it",
            "the plan",
            TokenUsage(input_tokens=5, output_tokens=10, total_tokens=15, cost=0.01),
        )

        assert session.session_id == "sess-1"
        assert [m.role for m in session.messages] == ["user", "assistant"]
        assert session.messages[1].content == "the plan"
        assert session.total_tokens == 15
        assert session.total_cost == 0.01
        assert events[-1].kind == EventKind.CONVERSATION_UPDATED
        assert events[-1].payload["message_count"] == 2

    def test_add_exchange_appends(self, conversations):
        """Test that later exchanges extend the same session."""
        conversations.add_exchange(AgentRole.PLANNER, "sess-1", "a", "b")
        session = conversations.add_exchange(AgentRole.PLANNER, "sess-2", "c", "d")

        assert len(session.messages) == 4
        assert session.session_id == "sess-2"
        assert len(conversations.list_sessions()) == 1

    def test_session_lookup(self, conversations):
        """Test session id and active checks."""
        assert conversations.get_session_id(AgentRole.SCOUT) is None
        assert conversations.has_active(AgentRole.SCOUT) is False

        conversations.add_exchange(AgentRole.SCOUT, "sess-9", "a", "b")

        assert conversations.get_session_id(AgentRole.SCOUT) == "sess-9"
        assert conversations.has_active(AgentRole.SCOUT) is True

    def test_clear(self, conversations, events):
        """Test clearing one role."""
        conversations.add_exchange(AgentRole.SCOUT, "s", "a", "b")
        conversations.add_exchange(AgentRole.TESTER, "t", "a", "b")

        conversations.clear(AgentRole.SCOUT)

        assert conversations.get(AgentRole.SCOUT) is None
        assert conversations.get(AgentRole.TESTER) is not None
        assert events[-1].kind == EventKind.CONVERSATION_CLEARED

    def test_clear_all(self, conversations, events):
        """Test clearing every role."""
        conversations.add_exchange(AgentRole.SCOUT, "s", "a", "b")
        conversations.clear_all()

        assert conversations.list_sessions() == []
        assert events[-1].kind == EventKind.ALL_CONVERSATIONS_CLEARED
