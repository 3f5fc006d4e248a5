"""Tests for CliWorker against a fake CLI script."""

import asyncio
import json
import os
import stat
import sys
import textwrap

import pytest

from agentkit.models import AgentRole
from agentkit.registry import AgentRegistry
from agentkit.workers import CliWorker
from agentkit.workers.cli_worker import SPAWN_FAILURE_EXIT_CODE, TIMEOUT_EXIT_CODE


@pytest.fixture
def profile():
    return AgentRegistry().get_profile(AgentRole.SCOUT)


@pytest.fixture
def make_cli(tmp_path):
    """Write an executable fake CLI whose body runs after reading stdin."""

    def _make(body: str) -> str:
        path = tmp_path / "fake_cli.py"
        script = f"#!{sys.executable}\nimport json, sys, time\nprompt = sys.stdin.read()\n"
        path.write_text(script + textwrap.dedent(body), encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR)
        return str(path)

    return _make


class TestBuildCommand:
    """Tests for CliWorker.build_command()."""

    def test_fresh_command(self):
        """Test the command for a new conversation."""
        worker = CliWorker(cli_path="claude")

        assert worker.build_command("m1") == [
            "claude", "--print", "--output-format", "stream-json", "--verbose", "--model", "m1"
        ]

    def test_resume_command(self):
        """Test that a session id adds --resume."""
        worker = CliWorker(cli_path="claude")

        assert worker.build_command("m1", "sess-1")[-2:] == ["--resume", "sess-1"]


class TestCliWorkerInvoke:
    """Tests for CliWorker.invoke()."""

    async def test_stream_events(self, make_cli, profile):
        """Test that assistant text streams and the result event supplies the outcome."""
        cli = make_cli(
            """
            def text_event(text):
                content = [{"type": "text", "text": text}]
                return {"type": "assistant", "message": {"content": content}}

            print(json.dumps({"type": "system", "subtype": "init"}))
            print(json.dumps(text_event("echo: ")))
            print(json.dumps(text_event(prompt)))
            print(json.dumps({
                "type": "result",
                "is_error": False,
                "result": "echo: " + prompt,
                "session_id": "sess-42",
                "total_cost_usd": 0.002,
                "usage": {"input_tokens": 10, "output_tokens": 5},
            }))
            """
        )
        worker = CliWorker(cli_path=cli)
        chunks = []

        result = await worker.invoke(profile, "hello", chunks.append)

        assert chunks == ["echo: ", "hello"]
        assert result.success is True
        assert result.output == "echo: hello"
        assert result.exit_code == 0
        assert result.session_id == "sess-42"
        assert result.token_usage.input_tokens == 10
        assert result.token_usage.output_tokens == 5
        assert result.token_usage.cost == 0.002

    async def test_single_json_envelope(self, make_cli, profile):
        """Test a CLI that prints one JSON object instead of a stream."""
        cli = make_cli(
            'print(json.dumps({"result": "done", "session_id": "s1",'
            ' "usage": {"input_tokens": 2, "output_tokens": 3}}, indent=2))\n'
        )
        worker = CliWorker(cli_path=cli)

        result = await worker.invoke(profile, "x")

        assert result.output == "done"
        assert result.session_id == "s1"
        assert result.token_usage.total_tokens == 5

    async def test_passes_model_and_resume(self, make_cli, profile):
        """Test that model and session id reach the command line."""
        cli = make_cli('print(json.dumps({"result": json.dumps(sys.argv[1:])}))\n')
        worker = CliWorker(cli_path=cli)

        result = await worker.invoke(profile, "x", session_id="sess-1", model="m-9")

        argv = json.loads(result.output)
        assert argv[argv.index("--model") + 1] == "m-9"
        assert argv[-2:] == ["--resume", "sess-1"]

    async def test_text_fallback_with_markers(self, make_cli, profile):
        """Test that non-JSON output falls back to textual token markers."""
        cli = make_cli('print("plain answer")\nprint("Input tokens: 3, Output tokens: 4")\n')
        worker = CliWorker(cli_path=cli)

        result = await worker.invoke(profile, "x")

        assert result.success is True
        assert result.output.startswith("plain answer")
        assert result.session_id is None
        assert result.token_usage.input_tokens == 3
        assert result.token_usage.output_tokens == 4

    async def test_estimate_when_no_markers(self, make_cli, profile):
        """Test the character-count estimate as a last resort."""
        cli = make_cli('sys.stdout.write("abcdefgh")\n')
        worker = CliWorker(cli_path=cli)

        result = await worker.invoke(profile, "x")

        assert result.token_usage.output_tokens == 2
        assert result.token_usage.input_tokens == 0

    async def test_nonzero_exit(self, make_cli, profile):
        """Test that a failing process reports stderr and its exit code."""
        cli = make_cli('sys.stderr.write("bad things\\n")\nsys.exit(2)\n')
        worker = CliWorker(cli_path=cli)
        chunks = []

        result = await worker.invoke(profile, "x", chunks.append)

        assert result.success is False
        assert result.exit_code == 2
        assert result.error == "bad things"
        assert "[stderr] bad things\n" in chunks

    async def test_reported_error(self, make_cli, profile):
        """Test that is_error in the envelope marks the run failed."""
        cli = make_cli('print(json.dumps({"is_error": True, "result": "quota exceeded"}))\n')
        worker = CliWorker(cli_path=cli)

        result = await worker.invoke(profile, "x")

        assert result.success is False
        assert result.error == "quota exceeded"

    async def test_spawn_failure(self, tmp_path, profile):
        """Test that a missing executable fails with exit code -1."""
        worker = CliWorker(cli_path=str(tmp_path / "does-not-exist"))

        result = await worker.invoke(profile, "x")

        assert result.success is False
        assert result.exit_code == SPAWN_FAILURE_EXIT_CODE

    async def test_timeout(self, make_cli, profile):
        """Test that a hung process is terminated with exit code 124."""
        cli = make_cli("time.sleep(30)\n")
        worker = CliWorker(cli_path=cli, timeout_seconds=0.5)

        result = await worker.invoke(profile, "x")

        assert result.success is False
        assert result.exit_code == TIMEOUT_EXIT_CODE
        assert "Timed out" in result.error

    async def test_cancel_propagates(self, make_cli, profile):
        """Test that cancelling the invocation raises CancelledError."""
        cli = make_cli("time.sleep(30)\n")
        worker = CliWorker(cli_path=cli)

        task = asyncio.create_task(worker.invoke(profile, "x"))
        await asyncio.sleep(0.3)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    async def test_raising_handler_terminates_child(self, make_cli, profile, tmp_path):
        """Test that an exception from the partial handler kills the process."""
        pid_file = tmp_path / "cli.pid"
        cli = make_cli(
            f"""
            import os
            with open({str(pid_file)!r}, "w") as f:
                f.write(str(os.getpid()))
            print("working", flush=True)
            time.sleep(30)
            """
        )
        worker = CliWorker(cli_path=cli)

        def broken(chunk):
            raise RuntimeError("observer failed")

        with pytest.raises(RuntimeError, match="observer failed"):
            await worker.invoke(profile, "x", broken)

        with pytest.raises(ProcessLookupError):
            os.kill(int(pid_file.read_text()), 0)
