"""Worker using the Anthropic Messages API."""

import os

import anthropic

from ..config import DEFAULT_MODEL
from ..logging_config import get_logger
from ..models import AgentProfile, RunResult, TokenUsage
from .base import PartialOutputHandler

logger = get_logger(__name__)

DEFAULT_MAX_TOKENS = 4096


class AnthropicWorker:
    """Streams completions from the Anthropic API.

    The profile's instructions are sent as the system prompt. The API keeps
    no server-side conversation, so no continuation id is returned.
    """

    def __init__(self, api_key: str | None = None, default_model: str = DEFAULT_MODEL):
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self._api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self._default_model = default_model
        self._client = anthropic.AsyncAnthropic(api_key=self._api_key)

    async def invoke(
        self,
        profile: AgentProfile,
        prompt: str,
        on_partial: PartialOutputHandler | None = None,
        session_id: str | None = None,
        model: str | None = None,
    ) -> RunResult:
        model = model or self._default_model
        chunks: list[str] = []
        input_tokens = 0
        output_tokens = 0

        try:
            stream = await self._client.messages.create(
                model=model,
                system=profile.instructions,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=profile.max_output_tokens or DEFAULT_MAX_TOKENS,
                stream=True,
            )
            async for event in stream:
                if event.type == "message_start":
                    input_tokens = event.message.usage.input_tokens
                elif event.type == "content_block_delta" and event.delta.type == "text_delta":
                    chunks.append(event.delta.text)
                    if on_partial is not None:
                        on_partial(event.delta.text)
                elif event.type == "message_delta":
                    output_tokens = event.usage.output_tokens

        except anthropic.APIError as e:
            logger.error("Anthropic API error for %s: %s", profile.role.value, e)
            return RunResult(success=False, output="".join(chunks), error=f"LLM API error: {e}")

        return RunResult(
            success=True,
            output="".join(chunks).strip(),
            exit_code=0,
            token_usage=TokenUsage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
            ),
        )
