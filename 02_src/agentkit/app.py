"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .accounting import AccountingStore
from .config import Settings
from .event_bus import EventBus
from .logging_config import get_logger
from .models import (
    AccountingSnapshot,
    AgentRole,
    RunResult,
    WorkflowDefinition,
    WorkflowStatus,
)
from .prompts import PromptBuilder
from .registry import AgentRegistry
from .runner import AgentTaskRunner
from .state import ConversationStore, StateStore
from .storage import IStorage, Storage
from .tracker import ITracker, Tracker
from .workers import AnthropicWorker, CliWorker, IWorker, PartialOutputHandler
from .workflows import (
    WORKFLOW_TEMPLATES,
    WorkflowCallbacks,
    WorkflowExecutor,
    get_template,
)

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Reset data between test runs."""
        ...


def parse_role(role: AgentRole | str) -> AgentRole:
    """Convert a role id to AgentRole; unknown ids raise KeyError."""
    if isinstance(role, AgentRole):
        return role
    try:
        return AgentRole(role)
    except ValueError:
        raise KeyError(f"Unknown agent role: {role}") from None


class Application:
    """Main application bootstrap.

    Owns every component and exposes the commands used by the HTTP API.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        worker: IWorker | None = None,
        db_path: str | None = None,
    ):
        self._settings = settings or Settings.from_env()
        if db_path is not None:
            self._settings.db_path = db_path
        self._worker_override = worker

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._event_bus: EventBus | None = None
        self._tracker: ITracker | None = None
        self._accounting: AccountingStore | None = None
        self._state_store: StateStore | None = None
        self._conversations: ConversationStore | None = None
        self._registry: AgentRegistry | None = None
        self._worker: IWorker | None = None
        self._runner: AgentTaskRunner | None = None
        self._executor: WorkflowExecutor | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")
        settings = self._settings

        # 1. Storage (no dependencies)
        self._storage = Storage(settings.db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. EventBus (no dependencies)
        self._event_bus = EventBus()

        # 3. Tracker (depends on EventBus + Storage)
        self._tracker = Tracker(self._event_bus, self._storage)
        await self._tracker.start()

        # 4. Stores (depend on EventBus; accounting persists to Storage)
        self._accounting = AccountingStore(self._event_bus, persistence=self._storage)
        await self._accounting.load()
        if settings.daily_budget is not None:
            self._accounting.set_budget(settings.daily_budget, settings.budget_warning)

        self._state_store = StateStore(self._event_bus)
        if settings.checkpoint_state:
            raw = await self._storage.load_state_checkpoint()
            if raw is not None and self._state_store.deserialize(raw):
                logger.info("State restored from checkpoint")

        self._conversations = ConversationStore(self._event_bus)
        logger.info("Stores initialized")

        # 5. Registry and worker
        self._registry = AgentRegistry(agents_dir=settings.agents_dir)
        self._worker = self._worker_override or self._create_worker()
        logger.info(
            "Registry loaded %s profiles; worker: %s",
            len(self._registry.list_profiles()),
            type(self._worker).__name__,
        )

        # 6. Runner and executor
        prompt_builder = PromptBuilder()
        self._runner = AgentTaskRunner(
            registry=self._registry,
            worker=self._worker,
            state_store=self._state_store,
            accounting=self._accounting,
            prompt_builder=prompt_builder,
            conversations=self._conversations,
            max_retries=settings.max_retries,
            default_model=settings.default_model,
            resume_sessions=settings.resume_sessions,
        )
        self._executor = WorkflowExecutor(
            runner=self._runner,
            state_store=self._state_store,
            registry=self._registry,
            prompt_builder=prompt_builder,
        )
        logger.info("All components initialized successfully")

    def _create_worker(self) -> IWorker:
        settings = self._settings
        if settings.worker == "anthropic":
            return AnthropicWorker(default_model=settings.default_model)
        return CliWorker(
            cli_path=settings.cli_path,
            working_dir=settings.working_dir,
            timeout_seconds=settings.timeout_seconds,
            default_model=settings.default_model,
        )

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._state_store:
            stopped = self._state_store.stop_all()
            if stopped:
                logger.info("Stopped %s running agents", len(stopped))
        if self._tracker:
            await self._tracker.stop()
        if self._accounting:
            await self._accounting.flush()
        if self._storage and self._state_store and self._settings.checkpoint_state:
            await self._storage.save_state_checkpoint(self._state_store.serialize())
            logger.info("State checkpoint saved")
        if self._storage:
            await self._storage.close()
            self._storage = None
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Reset data between test runs."""
        state_store = self.state_store
        state_store.stop_all()
        state_store.reset_all_agent_states()
        for workflow_state in state_store.list_workflow_states():
            state_store.clear_workflow_state(workflow_state.workflow_id)
        self.conversations.clear_all()
        self.accounting.reset_all()
        await self.accounting.flush()
        await self._tracker.flush()

        await self.storage.clear()
        logger.info("Reset complete")

    # Commands

    async def run_agent(
        self,
        role: AgentRole | str,
        prompt: str,
        on_partial_output: PartialOutputHandler | None = None,
    ) -> RunResult:
        """Run a single agent."""
        return await self.runner.execute(parse_role(role), prompt, on_partial_output)

    def stop_agent(self, role: AgentRole | str) -> bool:
        """Stop a running agent; False when it was not running."""
        return self.state_store.stop(parse_role(role))

    def stop_all_agents(self) -> list[AgentRole]:
        """Stop every running agent."""
        return self.state_store.stop_all()

    def reload_agents(self) -> int:
        """Rescan the agents directory; return the number of profiles."""
        self.registry.reload()
        return len(self.registry.list_profiles())

    def status(self) -> dict:
        """Summary of the worker and what is currently running."""
        return {
            "worker": type(self._worker).__name__,
            "running_agents": [s.role.value for s in self.state_store.running_agents()],
            "running_workflows": [
                s.workflow_id
                for s in self.state_store.list_workflow_states()
                if s.status == WorkflowStatus.RUNNING
            ],
            "profiles": len(self.registry.list_profiles()),
        }

    def list_workflows(self) -> list[WorkflowDefinition]:
        return list(WORKFLOW_TEMPLATES)

    async def run_workflow(
        self,
        workflow_id: str,
        prompt: str,
        callbacks: WorkflowCallbacks | None = None,
    ) -> dict[AgentRole, str]:
        """Run a workflow template by id.

        Raises:
            KeyError: Unknown workflow id
            WorkflowExecutionError: A sequential step failed
        """
        workflow = get_template(workflow_id)
        if workflow is None:
            raise KeyError(f"Unknown workflow: {workflow_id}")
        return await self.executor.run(workflow, prompt, callbacks)

    def get_accounting_snapshot(self) -> AccountingSnapshot:
        return self.accounting.snapshot()

    def reset_accounting(self) -> None:
        self.accounting.reset_all()

    def set_budget(self, daily_limit: int, warning_fraction: float = 0.8) -> None:
        self.accounting.set_budget(daily_limit, warning_fraction)

    def disable_budget(self) -> None:
        self.accounting.disable_budget()

    def clear_conversation(self, role: AgentRole | str) -> None:
        self.conversations.clear(parse_role(role))

    def clear_conversations(self) -> None:
        self.conversations.clear_all()

    # Components

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def event_bus(self) -> EventBus:
        """Get event bus instance."""
        if not self._event_bus:
            raise RuntimeError("Application not started")
        return self._event_bus

    @property
    def accounting(self) -> AccountingStore:
        """Get accounting store instance."""
        if not self._accounting:
            raise RuntimeError("Application not started")
        return self._accounting

    @property
    def state_store(self) -> StateStore:
        """Get state store instance."""
        if not self._state_store:
            raise RuntimeError("Application not started")
        return self._state_store

    @property
    def conversations(self) -> ConversationStore:
        """Get conversation store instance."""
        if not self._conversations:
            raise RuntimeError("Application not started")
        return self._conversations

    @property
    def registry(self) -> AgentRegistry:
        """Get agent registry instance."""
        if not self._registry:
            raise RuntimeError("Application not started")
        return self._registry

    @property
    def runner(self) -> AgentTaskRunner:
        """Get task runner instance."""
        if not self._runner:
            raise RuntimeError("Application not started")
        return self._runner

    @property
    def executor(self) -> WorkflowExecutor:
        """Get workflow executor instance."""
        if not self._executor:
            raise RuntimeError("Application not started")
        return self._executor
