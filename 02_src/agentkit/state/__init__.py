"""State module."""

from .conversations import ConversationStore
from .state_store import CancelHandle, IStateStore, StateStore

__all__ = ["CancelHandle", "ConversationStore", "IStateStore", "StateStore"]
