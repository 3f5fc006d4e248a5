"""AgentTaskRunner implementation."""

import asyncio
from typing import Callable

from ..accounting import AccountingStore, model_for_tier
from ..config import DEFAULT_MODEL
from ..logging_config import get_logger
from ..models import (
    AgentExecutionState,
    AgentProfile,
    AgentRole,
    AgentStatus,
    RunResult,
    utc_now,
)
from ..prompts import PromptBuilder
from ..registry import IAgentRegistry
from ..state import ConversationStore, IStateStore
from ..workers import IWorker

logger = get_logger(__name__)

STOPPED_ERROR = "Agent stopped"

PartialOutputCallback = Callable[[str], None]


class AgentTaskRunner:
    """Runs one agent role through the worker with retry and cancellation.

    Every attempt overwrites the role's state in the StateStore, so the
    visible retry count and timestamps always describe the latest attempt.
    """

    def __init__(
        self,
        registry: IAgentRegistry,
        worker: IWorker,
        state_store: IStateStore,
        accounting: AccountingStore,
        prompt_builder: PromptBuilder | None = None,
        conversations: ConversationStore | None = None,
        max_retries: int = 3,
        default_model: str = DEFAULT_MODEL,
        resume_sessions: bool = True,
    ):
        self._registry = registry
        self._worker = worker
        self._state_store = state_store
        self._accounting = accounting
        self._prompts = prompt_builder or PromptBuilder()
        self._conversations = conversations
        self._max_retries = max_retries
        self._default_model = default_model
        self._resume_sessions = resume_sessions

    def resolve_model(self, profile: AgentProfile) -> str:
        """Explicit profile model, else the tier's model, else the default."""
        if profile.model:
            return profile.model
        if profile.model_tier is not None:
            return model_for_tier(profile.model_tier)
        return self._default_model

    async def execute(
        self,
        role: AgentRole,
        prompt: str,
        on_partial_output: PartialOutputCallback | None = None,
        retry_count: int = 0,
    ) -> RunResult:
        """Run a role on a request.

        Args:
            role: Role to run
            prompt: User request
            on_partial_output: Called with each streamed output chunk
            retry_count: Attempt number to start counting from

        Returns:
            Result of the last attempt. Failures are reported in the result;
            a missing profile fails immediately without touching state.
        """
        profile = self._registry.get_profile(role)
        if profile is None:
            logger.warning("Agent profile not found: %s", role.value)
            return RunResult(success=False, error=f"Agent profile not found: {role.value}")

        model = self.resolve_model(profile)
        session_id = None
        if (
            self._resume_sessions
            and self._conversations is not None
            and self._conversations.has_active(role)
        ):
            session_id = self._conversations.get_session_id(role)
            attempt_prompt = self._prompts.build_request_only(prompt)
        else:
            attempt_prompt = self._prompts.build_prompt(profile, prompt)

        attempt = retry_count
        while True:
            result, stopped = await self._run_attempt(
                profile, attempt_prompt, attempt, on_partial_output, session_id, model
            )
            if result.success:
                self._record_conversation(role, prompt, result)
                return result
            if stopped:
                return result
            if attempt >= self._max_retries:
                logger.error(
                    "Agent %s failed after %s attempts: %s",
                    role.value,
                    attempt - retry_count + 1,
                    result.error,
                )
                return result

            attempt += 1
            logger.info(
                "Retrying agent %s (attempt %s): %s",
                role.value,
                attempt,
                result.error,
                extra={"role": role.value, "attempt": attempt},
            )
            attempt_prompt = self._prompts.build_retry_prompt(
                profile, attempt_prompt, result.error or "Unknown error", attempt
            )

    async def _run_attempt(
        self,
        profile: AgentProfile,
        prompt: str,
        attempt: int,
        on_partial_output: PartialOutputCallback | None,
        session_id: str | None,
        model: str,
    ) -> tuple[RunResult, bool]:
        role = profile.role
        previous = self._state_store.get_agent_state(role)
        if previous is not None and previous.status == AgentStatus.RUNNING:
            logger.warning("Agent %s is already running; overwriting its state", role.value)

        state = AgentExecutionState(
            role=role,
            status=AgentStatus.RUNNING,
            started_at=utc_now(),
            retry_count=attempt,
        )
        self._state_store.update_agent_state(role, state)

        stop_requested = False

        def handle_partial(chunk: str) -> None:
            if stop_requested:
                return
            state.output += chunk
            self._state_store.update_agent_state(role, state)
            if on_partial_output is None:
                return
            try:
                on_partial_output(chunk)
            except Exception:
                logger.exception("Partial output callback failed for agent %s", role.value)

        task = asyncio.ensure_future(
            self._worker.invoke(
                profile, prompt, handle_partial, session_id=session_id, model=model
            )
        )

        def cancel() -> None:
            nonlocal stop_requested
            stop_requested = True
            task.cancel()

        self._state_store.register_cancel_handle(role, cancel)
        try:
            result = await task
        except asyncio.CancelledError:
            if not stop_requested:
                # The caller was cancelled; leave no run marked as running
                stop_requested = True
                state.status = AgentStatus.STOPPED
                state.error = STOPPED_ERROR
                state.ended_at = utc_now()
                self._state_store.update_agent_state(role, state)
                raise
            result = RunResult(success=False, error=STOPPED_ERROR)
        except Exception as e:
            logger.exception("Worker raised for agent %s", role.value)
            result = RunResult(success=False, error=str(e))
        finally:
            self._state_store.release_cancel_handle(role, cancel)

        if result.token_usage is not None:
            result.token_usage = self._accounting.record_usage(role, result.token_usage, model)
            state.token_usage = result.token_usage

        if stop_requested:
            result = RunResult(
                success=False,
                output=result.output or state.output,
                error=STOPPED_ERROR,
                exit_code=result.exit_code,
                token_usage=result.token_usage,
            )
            state.status = AgentStatus.STOPPED
        else:
            state.status = AgentStatus.COMPLETED if result.success else AgentStatus.ERROR

        state.output = result.output or state.output
        state.error = result.error
        state.ended_at = utc_now()
        self._state_store.update_agent_state(role, state)
        return result, stop_requested

    def _record_conversation(self, role: AgentRole, prompt: str, result: RunResult) -> None:
        if self._conversations is None or not result.session_id:
            return
        self._conversations.add_exchange(
            role, result.session_id, prompt, result.output, result.token_usage
        )
