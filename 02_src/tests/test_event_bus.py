"""Tests for EventBus."""

from agentkit.models import EventKind, StoreEvent


class TestEventBusSubscribe:
    """Tests for EventBus subscription."""

    def test_subscribe_single_handler(self, event_bus):
        """Test subscribing a single handler."""
        event_bus.subscribe(EventKind.AGENT_STATE_CHANGED, lambda event: None)

        assert len(event_bus._subscribers[EventKind.AGENT_STATE_CHANGED]) == 1

    def test_subscribe_all_covers_every_kind(self, event_bus):
        """Test that subscribe_all registers the handler for each kind."""
        handler = lambda event: None  # noqa: E731
        event_bus.subscribe_all(handler)

        for kind in EventKind:
            assert handler in event_bus._subscribers[kind]

    def test_unsubscribe_removes_handler(self, event_bus):
        """Test that unsubscribe stops delivery."""
        calls = []
        event_bus.subscribe(EventKind.BUDGET_WARNING, calls.append)
        event_bus.unsubscribe(EventKind.BUDGET_WARNING, calls.append)

        event_bus.publish(EventKind.BUDGET_WARNING, {}, "test")

        assert calls == []

    def test_unsubscribe_unknown_handler_is_noop(self, event_bus):
        """Test that unsubscribing a handler never subscribed does nothing."""
        event_bus.unsubscribe(EventKind.BUDGET_WARNING, lambda event: None)


class TestEventBusPublish:
    """Tests for EventBus publishing."""

    def test_publish_returns_event(self, event_bus):
        """Test that publish builds a StoreEvent."""
        event = event_bus.publish(EventKind.ACCOUNTING_CHANGED, {"a": 1}, "accounting_store")

        assert isinstance(event, StoreEvent)
        assert event.kind == EventKind.ACCOUNTING_CHANGED
        assert event.payload == {"a": 1}
        assert event.source == "accounting_store"
        assert event.id
        assert event.timestamp.tzinfo is not None

    def test_publish_delivers_synchronously_in_order(self, event_bus):
        """Test that handlers run in subscription order before publish returns."""
        order = []
        event_bus.subscribe(EventKind.AGENT_STATE_CHANGED, lambda e: order.append("first"))
        event_bus.subscribe(EventKind.AGENT_STATE_CHANGED, lambda e: order.append("second"))

        event_bus.publish(EventKind.AGENT_STATE_CHANGED, {}, "test")

        assert order == ["first", "second"]

    def test_publish_only_to_matching_kind(self, event_bus):
        """Test that handlers of other kinds are not called."""
        calls = []
        event_bus.subscribe(EventKind.BUDGET_EXCEEDED, calls.append)

        event_bus.publish(EventKind.BUDGET_WARNING, {}, "test")

        assert calls == []

    def test_handler_error_does_not_block_others(self, event_bus):
        """Test that a failing handler does not prevent delivery to the rest."""
        calls = []

        def failing(event):
            raise ValueError("handler failed")

        event_bus.subscribe(EventKind.WORKFLOW_STATE_CHANGED, failing)
        event_bus.subscribe(EventKind.WORKFLOW_STATE_CHANGED, calls.append)

        event_bus.publish(EventKind.WORKFLOW_STATE_CHANGED, {}, "test")

        assert len(calls) == 1

    def test_handler_may_unsubscribe_during_delivery(self, event_bus):
        """Test that unsubscribing inside a handler keeps the current delivery intact."""
        calls = []

        def once(event):
            calls.append("once")
            event_bus.unsubscribe(EventKind.CONVERSATION_UPDATED, once)

        event_bus.subscribe(EventKind.CONVERSATION_UPDATED, once)
        event_bus.subscribe(EventKind.CONVERSATION_UPDATED, lambda e: calls.append("other"))

        event_bus.publish(EventKind.CONVERSATION_UPDATED, {}, "test")
        event_bus.publish(EventKind.CONVERSATION_UPDATED, {}, "test")

        assert calls == ["once", "other", "other"]
