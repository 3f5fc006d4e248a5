"""WorkflowExecutor implementation."""

import asyncio
from dataclasses import dataclass
from typing import Callable

from ..logging_config import get_logger
from ..models import (
    AgentRole,
    RunResult,
    WorkflowDefinition,
    WorkflowExecutionState,
    WorkflowPattern,
    WorkflowStatus,
    WorkflowStep,
    utc_now,
)
from ..prompts import PromptBuilder
from ..registry import IAgentRegistry
from ..runner import AgentTaskRunner
from ..state import IStateStore

logger = get_logger(__name__)


class WorkflowExecutionError(RuntimeError):
    """A sequential step failed and the workflow was aborted."""

    def __init__(self, workflow_id: str, role: AgentRole, error: str | None):
        self.workflow_id = workflow_id
        self.role = role
        self.error = error
        super().__init__(f"Agent {role.value} failed: {error}")


@dataclass
class WorkflowCallbacks:
    """Optional lifecycle hooks for one workflow run."""

    on_agent_start: Callable[[AgentRole], None] | None = None
    on_agent_output: Callable[[AgentRole, str], None] | None = None
    on_agent_complete: Callable[[AgentRole, RunResult], None] | None = None
    on_workflow_complete: Callable[[str, dict[AgentRole, str]], None] | None = None


class WorkflowExecutor:
    """Runs a workflow definition with its pattern.

    Sequential failures abort the workflow and raise WorkflowExecutionError.
    Parallel and fan-out runs settle every step and return only the
    successful outputs.
    """

    def __init__(
        self,
        runner: AgentTaskRunner,
        state_store: IStateStore,
        registry: IAgentRegistry,
        prompt_builder: PromptBuilder | None = None,
        aggregator_role: AgentRole = AgentRole.AGGREGATOR,
    ):
        self._runner = runner
        self._state_store = state_store
        self._registry = registry
        self._prompts = prompt_builder or PromptBuilder()
        self._aggregator_role = aggregator_role

    async def run(
        self,
        workflow: WorkflowDefinition,
        initial_prompt: str,
        callbacks: WorkflowCallbacks | None = None,
    ) -> dict[AgentRole, str]:
        """Execute a workflow.

        Args:
            workflow: Definition to run
            initial_prompt: Prompt for steps without explicit input
            callbacks: Lifecycle hooks

        Returns:
            Map of role to output for every successful step

        Raises:
            WorkflowExecutionError: A sequential step failed
        """
        callbacks = callbacks or WorkflowCallbacks()
        state = WorkflowExecutionState(
            workflow_id=workflow.id,
            status=WorkflowStatus.RUNNING,
            started_at=utc_now(),
        )
        self._state_store.update_workflow_state(workflow.id, state)
        logger.info(
            "Starting workflow %s (%s, %s steps)",
            workflow.id,
            workflow.pattern.value,
            len(workflow.steps),
            extra={"workflow_id": workflow.id},
        )

        try:
            if workflow.pattern == WorkflowPattern.SEQUENTIAL:
                outputs = await self._run_sequential(workflow, initial_prompt, state, callbacks)
            elif workflow.pattern == WorkflowPattern.PARALLEL:
                outputs = await self._run_parallel(workflow.steps, initial_prompt, callbacks)
            elif workflow.pattern == WorkflowPattern.FAN_OUT:
                outputs = await self._run_fan_out(workflow, initial_prompt, callbacks)
            else:
                raise ValueError(f"Unknown workflow pattern: {workflow.pattern}")
        except Exception as e:
            state.status = WorkflowStatus.ERROR
            state.error = str(e)
            state.ended_at = utc_now()
            self._state_store.update_workflow_state(workflow.id, state)
            logger.error("Workflow %s failed: %s", workflow.id, e)
            raise

        state.status = WorkflowStatus.COMPLETED
        state.ended_at = utc_now()
        self._state_store.update_workflow_state(workflow.id, state)
        logger.info(
            "Workflow %s completed with %s/%s outputs",
            workflow.id,
            len(outputs),
            len(workflow.steps),
        )

        if callbacks.on_workflow_complete is not None:
            callbacks.on_workflow_complete(workflow.id, outputs)
        return outputs

    async def _run_sequential(
        self,
        workflow: WorkflowDefinition,
        initial_prompt: str,
        state: WorkflowExecutionState,
        callbacks: WorkflowCallbacks,
    ) -> dict[AgentRole, str]:
        outputs: dict[AgentRole, str] = {}
        previous_outputs: dict[str, str] = {}  # display name -> output

        for index, step in enumerate(workflow.steps):
            state.current_step = index
            self._state_store.update_workflow_state(workflow.id, state)

            # Prior outputs ride along as context; they never replace the prompt
            prompt = (step.input or initial_prompt) + self._prompts.build_chain_context(
                previous_outputs
            )
            result = await self._run_step(step.role, prompt, callbacks)
            if not result.success:
                raise WorkflowExecutionError(workflow.id, step.role, result.error)

            outputs[step.role] = result.output
            previous_outputs[self._display_name(step.role)] = result.output

        return outputs

    async def _run_parallel(
        self,
        steps: tuple[WorkflowStep, ...],
        initial_prompt: str,
        callbacks: WorkflowCallbacks,
    ) -> dict[AgentRole, str]:
        results = await asyncio.gather(
            *(
                self._run_step(step.role, step.input or initial_prompt, callbacks)
                for step in steps
            ),
            return_exceptions=True,
        )

        outputs: dict[AgentRole, str] = {}
        for step, result in zip(steps, results):
            if isinstance(result, BaseException):
                logger.error("Agent %s raised: %r", step.role.value, result)
            elif result.success:
                outputs[step.role] = result.output
            else:
                logger.warning("Agent %s failed: %s", step.role.value, result.error)
        return outputs

    async def _run_fan_out(
        self,
        workflow: WorkflowDefinition,
        initial_prompt: str,
        callbacks: WorkflowCallbacks,
    ) -> dict[AgentRole, str]:
        steps = tuple(step for step in workflow.steps if step.role != self._aggregator_role)
        outputs = await self._run_parallel(steps, initial_prompt, callbacks)

        if not outputs:
            logger.warning("No successful outputs in %s; skipping aggregation", workflow.id)
            return outputs

        prompt = self._prompts.build_aggregation_prompt(
            {role.value: output for role, output in outputs.items()}, initial_prompt
        )
        result = await self._run_step(self._aggregator_role, prompt, callbacks)
        if result.success:
            outputs[self._aggregator_role] = result.output
        else:
            logger.warning("Aggregator failed: %s", result.error)
        return outputs

    async def _run_step(
        self, role: AgentRole, prompt: str, callbacks: WorkflowCallbacks
    ) -> RunResult:
        if callbacks.on_agent_start is not None:
            callbacks.on_agent_start(role)

        on_output = None
        if callbacks.on_agent_output is not None:
            def on_output(chunk: str) -> None:
                callbacks.on_agent_output(role, chunk)

        result = await self._runner.execute(role, prompt, on_output)

        if callbacks.on_agent_complete is not None:
            callbacks.on_agent_complete(role, result)
        return result

    def _display_name(self, role: AgentRole) -> str:
        profile = self._registry.get_profile(role)
        return profile.name if profile else role.value
