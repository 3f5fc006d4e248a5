"""Worker that runs the agent CLI as a subprocess."""

import asyncio
import codecs
import os
from pathlib import Path

from ..config import DEFAULT_MODEL
from ..logging_config import get_logger
from ..models import AgentProfile, RunResult
from .base import PartialOutputHandler
from .usage import (
    estimate_usage,
    extract_usage,
    parse_envelope,
    parse_stream_event,
    stream_event_text,
    usage_from_envelope,
)

logger = get_logger(__name__)

TIMEOUT_EXIT_CODE = 124
SPAWN_FAILURE_EXIT_CODE = -1
STDERR_PREFIX = "[stderr] "
_READ_SIZE = 4096
_TERMINATE_GRACE_SECONDS = 2.0


class CliWorker:
    """Runs ``<cli> --print --output-format stream-json`` with the prompt on stdin.

    stdout is read line by line: assistant text from stream events is
    forwarded as partial chunks, other events are skipped and non-JSON
    lines are forwarded as they are. stderr is forwarded prefixed. The
    final ``result`` event supplies the result text, the continuation id
    and usage; without it, token markers in the text are parsed and as a
    last resort output tokens are estimated from the output length.
    """

    def __init__(
        self,
        cli_path: str = "claude",
        working_dir: Path | None = None,
        timeout_seconds: float = 600.0,
        default_model: str = DEFAULT_MODEL,
    ):
        self._cli_path = cli_path
        self._working_dir = working_dir
        self._timeout_seconds = timeout_seconds
        self._default_model = default_model

    def build_command(self, model: str, session_id: str | None = None) -> list[str]:
        """Command line for one invocation."""
        cmd = [
            self._cli_path,
            "--print",
            "--output-format",
            "stream-json",
            "--verbose",
            "--model",
            model,
        ]
        if session_id:
            cmd.extend(["--resume", session_id])
        return cmd

    async def invoke(
        self,
        profile: AgentProfile,
        prompt: str,
        on_partial: PartialOutputHandler | None = None,
        session_id: str | None = None,
        model: str | None = None,
    ) -> RunResult:
        cmd = self.build_command(model or self._default_model, session_id)
        logger.info(
            "Invoking CLI for %s (model=%s, resume=%s)",
            profile.role.value,
            cmd[cmd.index("--model") + 1],
            bool(session_id),
        )

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self._working_dir) if self._working_dir else None,
                env={**os.environ, "FORCE_COLOR": "0"},
            )
        except (FileNotFoundError, PermissionError) as e:
            logger.error("Failed to start %s: %s", self._cli_path, e)
            return RunResult(
                success=False,
                error=f"Failed to start '{self._cli_path}': {e}",
                exit_code=SPAWN_FAILURE_EXIT_CODE,
            )

        stdout_parts: list[str] = []
        stderr_parts: list[str] = []
        streamed: list[str] = []
        try:
            exit_code = await asyncio.wait_for(
                self._communicate(
                    process, prompt, stdout_parts, stderr_parts, streamed, on_partial
                ),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            await _terminate_process(process)
            logger.warning(
                "CLI for %s timed out after %ss", profile.role.value, self._timeout_seconds
            )
            return RunResult(
                success=False,
                output="".join(streamed).strip(),
                error=f"Timed out after {self._timeout_seconds}s",
                exit_code=TIMEOUT_EXIT_CODE,
            )
        except BaseException:
            # Cancelled, or a partial-output handler raised
            await _terminate_process(process)
            raise

        return self._build_result(
            "".join(stdout_parts), "".join(stderr_parts), "".join(streamed), exit_code
        )

    async def _communicate(
        self,
        process: asyncio.subprocess.Process,
        prompt: str,
        stdout_parts: list[str],
        stderr_parts: list[str],
        streamed: list[str],
        on_partial: PartialOutputHandler | None,
    ) -> int:
        await self._write_prompt(process, prompt)
        await asyncio.gather(
            _pump_stdout(process.stdout, stdout_parts, streamed, on_partial),
            _pump(process.stderr, stderr_parts, on_partial, STDERR_PREFIX),
        )
        return await process.wait()

    async def _write_prompt(self, process: asyncio.subprocess.Process, prompt: str) -> None:
        try:
            process.stdin.write(prompt.encode("utf-8"))
            await process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            # The process exited early; its exit code and stderr report why
            logger.warning("CLI closed stdin early: %s", e)
        finally:
            process.stdin.close()

    def _build_result(
        self, stdout: str, stderr: str, streamed: str, exit_code: int
    ) -> RunResult:
        envelope = parse_envelope(stdout)
        if envelope is not None:
            output = str(envelope.get("result") or "").strip()
            token_usage = usage_from_envelope(envelope)
            is_error = bool(envelope.get("is_error"))
            session_id = envelope.get("session_id")
        else:
            logger.debug("No JSON envelope in CLI output, falling back to text")
            output = streamed.strip()
            token_usage = None
            is_error = False
            session_id = None

        if token_usage is None:
            token_usage = extract_usage(stdout + stderr) or estimate_usage(output)

        if exit_code == 0 and not is_error:
            return RunResult(
                success=True,
                output=output,
                exit_code=exit_code,
                token_usage=token_usage,
                session_id=session_id,
            )

        if is_error:
            error = output or "CLI reported an error"
        else:
            error = stderr.strip() or f"Process exited with code {exit_code}"
        return RunResult(
            success=False,
            output=output,
            error=error,
            exit_code=exit_code,
            token_usage=token_usage,
            session_id=session_id,
        )


async def _pump(
    stream: asyncio.StreamReader,
    parts: list[str],
    on_partial: PartialOutputHandler | None,
    prefix: str,
) -> None:
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        data = await stream.read(_READ_SIZE)
        text = decoder.decode(data, final=not data)
        if text:
            parts.append(text)
            if on_partial is not None:
                on_partial(prefix + text)
        if not data:
            break


async def _pump_stdout(
    stream: asyncio.StreamReader,
    parts: list[str],
    streamed: list[str],
    on_partial: PartialOutputHandler | None,
) -> None:
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    pending = ""
    while True:
        data = await stream.read(_READ_SIZE)
        text = decoder.decode(data, final=not data)
        parts.append(text)
        *lines, pending = (pending + text).split("\n")
        for line in lines:
            _emit_stdout_line(line + "\n", streamed, on_partial)
        if not data:
            if pending:
                _emit_stdout_line(pending, streamed, on_partial)
            break


def _emit_stdout_line(
    line: str, streamed: list[str], on_partial: PartialOutputHandler | None
) -> None:
    event = parse_stream_event(line)
    chunk = stream_event_text(event) if event is not None else line
    if chunk:
        streamed.append(chunk)
        if on_partial is not None:
            on_partial(chunk)


async def _terminate_process(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.terminate()
    except ProcessLookupError:
        return
    try:
        await asyncio.wait_for(process.wait(), timeout=_TERMINATE_GRACE_SECONDS)
    except asyncio.TimeoutError:
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()
