"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from agentkit.models import RunResult, TokenUsage  # noqa: E402


class ScriptedWorker:
    """Fake worker returning scripted results per role.

    Each role has a queue of outcomes; the last one repeats once the others
    are used up. An outcome is a RunResult or an exception to raise.
    Successful outputs are streamed as one partial chunk.
    """

    def __init__(self, default: RunResult | None = None):
        self.calls: list[dict] = []
        self._scripts: dict = {}
        self._default = default or RunResult(success=True, output="ok")

    def script(self, role, *outcomes) -> None:
        self._scripts[role] = list(outcomes)

    def calls_for(self, role) -> list[dict]:
        return [call for call in self.calls if call["role"] == role]

    async def invoke(self, profile, prompt, on_partial=None, session_id=None, model=None):
        self.calls.append(
            {
                "role": profile.role,
                "prompt": prompt,
                "session_id": session_id,
                "model": model,
            }
        )
        queue = self._scripts.get(profile.role)
        if queue:
            outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        else:
            outcome = self._default

        if isinstance(outcome, BaseException):
            raise outcome
        if outcome.success and outcome.output and on_partial is not None:
            on_partial(outcome.output)
        return outcome


def ok(output: str, tokens: tuple[int, int] | None = None, session_id: str | None = None):
    """Successful RunResult."""
    usage = None
    if tokens is not None:
        usage = TokenUsage(
            input_tokens=tokens[0], output_tokens=tokens[1], total_tokens=sum(tokens)
        )
    return RunResult(
        success=True, output=output, exit_code=0, token_usage=usage, session_id=session_id
    )


def fail(error: str = "boom"):
    """Failed RunResult."""
    return RunResult(success=False, error=error, exit_code=1)


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from agentkit.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def event_bus():
    """Create EventBus."""
    from agentkit.event_bus import EventBus

    return EventBus()


@pytest.fixture
def events(event_bus):
    """Collect every published StoreEvent."""
    collected = []
    event_bus.subscribe_all(collected.append)
    return collected


@pytest.fixture
def state_store(event_bus):
    """Create StateStore."""
    from agentkit.state import StateStore

    return StateStore(event_bus)


@pytest.fixture
def conversations(event_bus):
    """Create ConversationStore."""
    from agentkit.state import ConversationStore

    return ConversationStore(event_bus)


@pytest.fixture
def accounting(event_bus):
    """Create AccountingStore without persistence."""
    from agentkit.accounting import AccountingStore

    return AccountingStore(event_bus)


@pytest.fixture
def registry():
    """Create AgentRegistry with built-in profiles only."""
    from agentkit.registry import AgentRegistry

    return AgentRegistry()


@pytest.fixture
def worker():
    """Create scripted fake worker."""
    return ScriptedWorker()


@pytest.fixture
def runner(registry, worker, state_store, accounting, conversations):
    """Create AgentTaskRunner over the fake worker."""
    from agentkit.runner import AgentTaskRunner

    return AgentTaskRunner(
        registry=registry,
        worker=worker,
        state_store=state_store,
        accounting=accounting,
        conversations=conversations,
        max_retries=3,
    )


@pytest.fixture
def executor(runner, state_store, registry):
    """Create WorkflowExecutor."""
    from agentkit.workflows import WorkflowExecutor

    return WorkflowExecutor(runner=runner, state_store=state_store, registry=registry)


@pytest.fixture
def tracker(storage, event_bus):
    """Create Tracker with storage and event bus."""
    from agentkit.tracker import Tracker

    return Tracker(event_bus=event_bus, storage=storage)
