"""Tests for AgentTaskRunner."""

import asyncio

import pytest
from conftest import fail, ok

from agentkit.models import AgentProfile, AgentRole, AgentStatus, ModelTier, TokenUsage
from agentkit.registry import BUILTIN_PROFILES, AgentRegistry
from agentkit.runner import STOPPED_ERROR, AgentTaskRunner


class BlockingWorker:
    """Worker that streams one chunk and then waits until released."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls = 0

    async def invoke(self, profile, prompt, on_partial=None, session_id=None, model=None):
        self.calls += 1
        if on_partial is not None:
            on_partial("thinking")
        self.started.set()
        await self.release.wait()
        return ok("finished")


@pytest.fixture
def blocking_worker():
    return BlockingWorker()


@pytest.fixture
def blocking_runner(registry, blocking_worker, state_store, accounting):
    return AgentTaskRunner(
        registry=registry,
        worker=blocking_worker,
        state_store=state_store,
        accounting=accounting,
    )


class TestExecute:
    """Tests for single successful and failed runs."""

    async def test_success_updates_state(self, runner, worker, state_store):
        """Test that a successful run completes the role's state."""
        worker.script(AgentRole.SCOUT, ok("found 3 files"))

        result = await runner.execute(AgentRole.SCOUT, "find files")

        assert result.success is True
        assert result.output == "found 3 files"
        state = state_store.get_agent_state(AgentRole.SCOUT)
        assert state.status == AgentStatus.COMPLETED
        assert state.output == "found 3 files"
        assert state.retry_count == 0
        assert state.started_at is not None
        assert state.ended_at >= state.started_at

    async def test_prompt_wraps_profile(self, runner, worker):
        """Test that the worker receives the full profile prompt."""
        await runner.execute(AgentRole.PLANNER, "plan the feature")

        prompt = worker.calls[0]["prompt"]
        assert prompt.startswith("# You are: Planner")
        assert prompt.endswith("**User Request:**\nplan the feature")

    async def test_partial_output_forwarded(self, runner, worker):
        """Test that streamed chunks reach the caller."""
        worker.script(AgentRole.SCOUT, ok("chunk"))
        chunks = []

        await runner.execute(AgentRole.SCOUT, "x", chunks.append)

        assert chunks == ["chunk"]

    async def test_missing_profile(self, worker, state_store, accounting):
        """Test that an unknown role fails without touching state."""
        runner = AgentTaskRunner(
            registry=AgentRegistry(builtin=BUILTIN_PROFILES[:2]),
            worker=worker,
            state_store=state_store,
            accounting=accounting,
        )

        result = await runner.execute(AgentRole.AGGREGATOR, "x")

        assert result.success is False
        assert result.error == "Agent profile not found: aggregator"
        assert state_store.get_agent_state(AgentRole.AGGREGATOR) is None
        assert worker.calls == []


class TestRetry:
    """Tests for bounded retry."""

    async def test_succeeds_after_failures(self, runner, worker, state_store):
        """Test that failures are retried until success."""
        worker.script(AgentRole.SCOUT, fail("e1"), fail("e2"), ok("done"))

        result = await runner.execute(AgentRole.SCOUT, "x")

        assert result.success is True
        assert len(worker.calls) == 3
        state = state_store.get_agent_state(AgentRole.SCOUT)
        assert state.status == AgentStatus.COMPLETED
        assert state.retry_count == 2

    async def test_retry_prompts_carry_error(self, runner, worker):
        """Test that each retry prompt embeds the previous error and prompt."""
        worker.script(AgentRole.SCOUT, fail("e1"), fail("e2"), ok("done"))

        await runner.execute(AgentRole.SCOUT, "x")

        second = worker.calls[1]["prompt"]
        third = worker.calls[2]["prompt"]
        assert "**RETRY ATTEMPT 1**" in second
        assert "```\ne1\n```" in second
        assert "**RETRY ATTEMPT 2**" in third
        assert "```\ne2\n```" in third
        assert "**RETRY ATTEMPT 1**" in third

    async def test_gives_up_after_max_retries(self, runner, worker, state_store):
        """Test that a persistent failure makes max_retries + 1 attempts."""
        worker.script(AgentRole.SCOUT, fail("always"))

        result = await runner.execute(AgentRole.SCOUT, "x")

        assert result.success is False
        assert result.error == "always"
        assert len(worker.calls) == 4
        state = state_store.get_agent_state(AgentRole.SCOUT)
        assert state.status == AgentStatus.ERROR
        assert state.error == "always"
        assert state.retry_count == 3

    async def test_start_count(self, runner, worker):
        """Test that a non-zero starting count shortens the retry budget."""
        worker.script(AgentRole.SCOUT, fail())

        await runner.execute(AgentRole.SCOUT, "x", retry_count=2)

        assert len(worker.calls) == 2

    async def test_worker_exception_is_retried(self, runner, worker):
        """Test that an exception from the worker counts as a failed attempt."""
        worker.script(AgentRole.SCOUT, RuntimeError("crash"), ok("recovered"))

        result = await runner.execute(AgentRole.SCOUT, "x")

        assert result.success is True
        assert "crash" in worker.calls[1]["prompt"]


class TestAccounting:
    """Tests for usage recording."""

    async def test_usage_recorded_with_cost(self, runner, worker, accounting, state_store):
        """Test that usage is priced with the role's model and recorded."""
        worker.script(AgentRole.SCOUT, ok("x", tokens=(1000, 500)))

        result = await runner.execute(AgentRole.SCOUT, "x")

        # Scout is a fast-tier role priced at 0.25/1.25 USD per 1M tokens
        assert result.token_usage.cost == pytest.approx(0.000875)
        snapshot = accounting.snapshot()
        assert snapshot.total_tokens == 1500
        assert snapshot.session_count == 1
        assert snapshot.by_role["scout"].total_tokens == 1500
        assert state_store.get_agent_state(AgentRole.SCOUT).token_usage.cost == pytest.approx(
            0.000875
        )

    async def test_failed_attempts_are_counted(self, runner, worker, accounting):
        """Test that usage from failed attempts is still recorded."""
        failed = fail("e")
        failed.token_usage = TokenUsage(input_tokens=10, total_tokens=10)
        worker.script(AgentRole.SCOUT, failed, ok("x", tokens=(10, 5)))

        await runner.execute(AgentRole.SCOUT, "x")

        assert accounting.snapshot().total_tokens == 25
        assert accounting.snapshot().session_count == 2


class TestModelResolution:
    """Tests for AgentTaskRunner.resolve_model()."""

    async def test_tier_model_passed_to_worker(self, runner, worker):
        """Test that the tier's model reaches the worker."""
        await runner.execute(AgentRole.SECURITY_AUDITOR, "x")

        assert worker.calls[0]["model"] == "claude-opus-4-5-20251101"

    def test_explicit_model_wins(self, runner):
        """Test that an explicit model overrides the tier."""
        profile = AgentProfile(
            role=AgentRole.SCOUT,
            name="Scout",
            instructions="",
            model="custom-model",
            model_tier=ModelTier.FAST,
        )

        assert runner.resolve_model(profile) == "custom-model"

    def test_default_without_tier(self, runner):
        """Test that profiles without model or tier use the default."""
        profile = AgentProfile(role=AgentRole.SCOUT, name="Scout", instructions="")

        assert runner.resolve_model(profile) == "claude-sonnet-4-5-20250929"


class TestConversations:
    """Tests for continuation-id reuse."""

    async def test_session_resumed(self, runner, worker, conversations):
        """Test that a second run resumes with only the request."""
        worker.script(AgentRole.PLANNER, ok("plan v1", session_id="s1"))

        await runner.execute(AgentRole.PLANNER, "make a plan")
        await runner.execute(AgentRole.PLANNER, "refine it")

        first, second = worker.calls
        assert first["session_id"] is None
        assert first["prompt"].startswith("# You are: Planner")
        assert second["session_id"] == "s1"
        assert second["prompt"] == "refine it"
        session = conversations.get(AgentRole.PLANNER)
        assert [m.content for m in session.messages] == [
            "make a plan",
            "plan v1",
            "refine it",
            "plan v1",
        ]

    async def test_resume_disabled(self, registry, worker, state_store, accounting, conversations):
        """Test that sessions are recorded but not resumed when disabled."""
        runner = AgentTaskRunner(
            registry=registry,
            worker=worker,
            state_store=state_store,
            accounting=accounting,
            conversations=conversations,
            resume_sessions=False,
        )
        worker.script(AgentRole.PLANNER, ok("plan", session_id="s1"))

        await runner.execute(AgentRole.PLANNER, "a")
        await runner.execute(AgentRole.PLANNER, "b")

        assert worker.calls[1]["session_id"] is None
        assert conversations.has_active(AgentRole.PLANNER) is True

    async def test_no_session_id_not_recorded(self, runner, worker, conversations):
        """Test that results without a continuation id leave no session."""
        await runner.execute(AgentRole.SCOUT, "x")

        assert conversations.get(AgentRole.SCOUT) is None


class TestStop:
    """Tests for cancellation through the StateStore."""

    async def test_stop_running_agent(self, blocking_runner, blocking_worker, state_store):
        """Test that stop aborts the invocation without retrying."""
        task = asyncio.create_task(blocking_runner.execute(AgentRole.SCOUT, "x"))
        await blocking_worker.started.wait()
        assert state_store.has_cancel_handle(AgentRole.SCOUT)

        assert state_store.stop(AgentRole.SCOUT) is True
        result = await task

        assert result.success is False
        assert result.error == STOPPED_ERROR
        assert result.output == "thinking"
        assert blocking_worker.calls == 1
        state = state_store.get_agent_state(AgentRole.SCOUT)
        assert state.status == AgentStatus.STOPPED
        assert state.ended_at is not None
        assert not state_store.has_cancel_handle(AgentRole.SCOUT)

    async def test_stop_idle_agent(self, state_store):
        """Test that stopping a role that is not running does nothing."""
        assert state_store.stop(AgentRole.SCOUT) is False
        assert state_store.get_agent_state(AgentRole.SCOUT) is None

    async def test_outer_cancel_propagates(self, blocking_runner, blocking_worker, state_store):
        """Test that cancelling the caller is not mistaken for a stop."""
        task = asyncio.create_task(blocking_runner.execute(AgentRole.SCOUT, "x"))
        await blocking_worker.started.wait()

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert not state_store.has_cancel_handle(AgentRole.SCOUT)
        state = state_store.get_agent_state(AgentRole.SCOUT)
        assert state.status == AgentStatus.STOPPED
        assert state.error == STOPPED_ERROR
        assert state.ended_at is not None


class TestPartialOutputCallback:
    """Tests for the caller's partial output callback."""

    async def test_raising_callback_does_not_fail_run(self, registry, state_store, accounting):
        """Test that a broken callback is logged and the run still succeeds."""
        worker = BlockingWorker()
        worker.release.set()
        runner = AgentTaskRunner(
            registry=registry, worker=worker, state_store=state_store, accounting=accounting
        )

        def broken(chunk):
            raise RuntimeError("observer failed")

        result = await runner.execute(AgentRole.SCOUT, "x", on_partial_output=broken)

        assert result.success is True
        assert worker.calls == 1
        state = state_store.get_agent_state(AgentRole.SCOUT)
        assert state.status == AgentStatus.COMPLETED
