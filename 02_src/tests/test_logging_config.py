"""Tests for logging setup."""

import json
import logging

import pytest

from agentkit.logging_config import JSONFormatter, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_context_fields(self):
        """Test that extra role and workflow fields are emitted."""
        record = logging.LogRecord("agentkit.runner", logging.INFO, __file__, 1, "run %s", ("x",), None)
        record.role = "scout"
        record.workflow_id = "debug-and-fix"

        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "run x"
        assert entry["level"] == "INFO"
        assert entry["role"] == "scout"
        assert entry["workflow_id"] == "debug-and-fix"
        assert "exception" not in entry


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_writes_json_file(self, tmp_path, restore_logging):
        """Test that records land in the log file as JSON."""
        log_file = tmp_path / "logs" / "app.log"

        setup_logging(log_level="debug", log_file=str(log_file), console_format="text")
        logging.getLogger("agentkit.test").info("hello", extra={"role": "tester"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["message"] == "hello"
        assert entry["role"] == "tester"
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_bad_console_format(self, tmp_path):
        """Test that an unknown console format is rejected."""
        with pytest.raises(ValueError, match="LOG_FORMAT"):
            setup_logging(log_file=str(tmp_path / "app.log"), console_format="xml")
