"""StateStore implementation."""

import json
from typing import Callable, Protocol

from ..event_bus import IEventBus
from ..logging_config import get_logger
from ..models import (
    AgentExecutionState,
    AgentRole,
    AgentStatus,
    EventKind,
    WorkflowExecutionState,
    utc_now,
)

logger = get_logger(__name__)


CancelHandle = Callable[[], None]


class IStateStore(Protocol):
    """Observable record of agent and workflow execution state."""

    def get_agent_state(self, role: AgentRole) -> AgentExecutionState | None:
        """Get the current state of a role."""
        ...

    def update_agent_state(self, role: AgentRole, state: AgentExecutionState) -> None:
        """Replace a role's state and notify subscribers."""
        ...

    def register_cancel_handle(self, role: AgentRole, handle: CancelHandle) -> None:
        """Register the abort handle of a role's in-flight invocation."""
        ...

    def release_cancel_handle(self, role: AgentRole, handle: CancelHandle) -> None:
        """Drop a role's abort handle if it is still the registered one."""
        ...

    def stop(self, role: AgentRole) -> bool:
        """Cancel a running role and mark it stopped."""
        ...

    def update_workflow_state(self, workflow_id: str, state: WorkflowExecutionState) -> None:
        """Replace a workflow's state and notify subscribers."""
        ...


class StateStore:
    """In-memory, observable store of execution state.

    Every mutation publishes an event on the EventBus. All methods are
    synchronous and must be called from the event loop thread.
    """

    SOURCE = "state_store"

    def __init__(self, event_bus: IEventBus):
        self._event_bus = event_bus
        self._agent_states: dict[AgentRole, AgentExecutionState] = {}
        self._workflow_states: dict[str, WorkflowExecutionState] = {}
        self._cancel_handles: dict[AgentRole, CancelHandle] = {}

    # Agent state

    def get_agent_state(self, role: AgentRole) -> AgentExecutionState | None:
        """Get the current state of a role."""
        return self._agent_states.get(role)

    def list_agent_states(self) -> list[AgentExecutionState]:
        """Get all agent states."""
        return list(self._agent_states.values())

    def running_agents(self) -> list[AgentExecutionState]:
        """Get states of roles currently running."""
        return [
            state
            for state in self._agent_states.values()
            if state.status == AgentStatus.RUNNING
        ]

    def update_agent_state(self, role: AgentRole, state: AgentExecutionState) -> None:
        """Replace a role's state and notify subscribers."""
        self._agent_states[role] = state
        self._event_bus.publish(
            EventKind.AGENT_STATE_CHANGED,
            {"role": role.value, "state": state.to_dict()},
            self.SOURCE,
        )

    def clear_agent_state(self, role: AgentRole) -> None:
        """Remove a role's state."""
        self._agent_states.pop(role, None)
        self._event_bus.publish(
            EventKind.AGENT_STATE_CLEARED, {"role": role.value}, self.SOURCE
        )

    def reset_all_agent_states(self) -> None:
        """Remove every agent state."""
        self._agent_states.clear()
        self._event_bus.publish(EventKind.ALL_AGENT_STATES_RESET, {}, self.SOURCE)

    # Cancellation

    def register_cancel_handle(self, role: AgentRole, handle: CancelHandle) -> None:
        """Register the abort handle of a role's in-flight invocation."""
        self._cancel_handles[role] = handle

    def release_cancel_handle(self, role: AgentRole, handle: CancelHandle) -> None:
        """Drop a role's abort handle if it is still the registered one."""
        if self._cancel_handles.get(role) is handle:
            del self._cancel_handles[role]

    def has_cancel_handle(self, role: AgentRole) -> bool:
        return role in self._cancel_handles

    def stop(self, role: AgentRole) -> bool:
        """Cancel a running role and mark it stopped.

        Returns False (and does nothing) when the role is not running.
        """
        state = self._agent_states.get(role)
        if state is None or state.status != AgentStatus.RUNNING:
            return False

        handle = self._cancel_handles.pop(role, None)
        if handle is not None:
            handle()

        state.status = AgentStatus.STOPPED
        state.ended_at = utc_now()
        self.update_agent_state(role, state)
        logger.info("Stopped agent %s", role.value)
        return True

    def stop_all(self) -> list[AgentRole]:
        """Stop every running role; return the roles stopped."""
        stopped = []
        for state in self.running_agents():
            if self.stop(state.role):
                stopped.append(state.role)
        return stopped

    # Workflow state

    def get_workflow_state(self, workflow_id: str) -> WorkflowExecutionState | None:
        """Get the state of a workflow."""
        return self._workflow_states.get(workflow_id)

    def list_workflow_states(self) -> list[WorkflowExecutionState]:
        """Get all workflow states."""
        return list(self._workflow_states.values())

    def update_workflow_state(self, workflow_id: str, state: WorkflowExecutionState) -> None:
        """Replace a workflow's state and notify subscribers."""
        self._workflow_states[workflow_id] = state
        self._event_bus.publish(
            EventKind.WORKFLOW_STATE_CHANGED,
            {"workflow_id": workflow_id, "state": state.to_dict()},
            self.SOURCE,
        )

    def clear_workflow_state(self, workflow_id: str) -> None:
        """Remove a workflow's state."""
        self._workflow_states.pop(workflow_id, None)
        self._event_bus.publish(
            EventKind.WORKFLOW_STATE_CLEARED,
            {"workflow_id": workflow_id},
            self.SOURCE,
        )

    # Serialization

    def serialize(self) -> str:
        """Export agent and workflow states as a JSON document."""
        return json.dumps(
            {
                "agents": {
                    role.value: state.to_dict()
                    for role, state in self._agent_states.items()
                },
                "workflows": {
                    workflow_id: state.to_dict()
                    for workflow_id, state in self._workflow_states.items()
                },
            }
        )

    def deserialize(self, raw: str) -> bool:
        """Import states from ``serialize`` output.

        The document is parsed completely before anything is replaced; on
        failure the error is logged and the store keeps its prior contents.
        """
        try:
            data = json.loads(raw)
            agents = None
            workflows = None
            if data.get("agents") is not None:
                agents = {
                    AgentRole(role): AgentExecutionState.from_dict(state)
                    for role, state in data["agents"].items()
                }
            if data.get("workflows") is not None:
                workflows = {
                    workflow_id: WorkflowExecutionState.from_dict(state)
                    for workflow_id, state in data["workflows"].items()
                }
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Failed to deserialize state: %s", e)
            return False

        if agents is not None:
            self._agent_states = agents
        if workflows is not None:
            self._workflow_states = workflows
        return True
