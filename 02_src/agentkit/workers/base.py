"""Worker interface."""

from typing import Callable, Protocol

from ..models import AgentProfile, RunResult

PartialOutputHandler = Callable[[str], None]


class IWorker(Protocol):
    """Invokes a language-model worker for one agent prompt."""

    async def invoke(
        self,
        profile: AgentProfile,
        prompt: str,
        on_partial: PartialOutputHandler | None = None,
        session_id: str | None = None,
        model: str | None = None,
    ) -> RunResult:
        """Run the prompt and return the outcome.

        Args:
            profile: Agent profile being invoked
            prompt: Text to send
            on_partial: Called with each output chunk as it arrives
            session_id: Continuation id to resume, if any
            model: Resolved model id

        Returns:
            RunResult; failures are reported in the result, not raised.
            Cancellation propagates as asyncio.CancelledError.
        """
        ...
