# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Tests for the structured logging adapter."""

import json
import logging
import os
from io import StringIO
from unittest.mock import patch

import pytest

from dvm_logging import Logger, SilentLogger, StreamLogger, create_logger


def _first_entry(stream: StringIO) -> dict:
    return json.loads(stream.getvalue().splitlines()[0])


class TestLoggerFactory:
    """Tests for create_logger factory function."""

    def test_create_stderr_logger(self):
        logger = create_logger(logger_type="stderr", level="INFO")

        assert isinstance(logger, StreamLogger)
        assert isinstance(logger, Logger)
        assert logger.stream == "stderr"
        assert logger.level == "INFO"

    def test_create_stdout_logger(self):
        logger = create_logger(logger_type="stdout")

        assert isinstance(logger, StreamLogger)
        assert logger.stream == "stdout"

    def test_create_silent_logger(self):
        logger = create_logger(logger_type="silent")

        assert isinstance(logger, SilentLogger)

    def test_create_logger_with_name_and_level(self):
        logger = create_logger(logger_type="stderr", level="debug", name="dvm_secrets")

        assert logger.name == "dvm_secrets"
        assert logger.level == "DEBUG"

    def test_create_unknown_logger_type(self):
        with pytest.raises(ValueError, match="Unknown logger_type"):
            create_logger(logger_type="syslog")

    def test_create_logger_from_env(self):
        """Test creating logger from environment variables."""
        with patch.dict(os.environ, {
            "LOG_TYPE": "silent",
            "LOG_LEVEL": "WARNING",
            "LOG_NAME": "env-service",
        }):
            logger = create_logger()

            assert isinstance(logger, SilentLogger)
            assert logger.level == "WARNING"
            assert logger.name == "env-service"

    def test_create_logger_defaults_to_stderr(self):
        with patch.dict(os.environ, {}, clear=True):
            logger = create_logger()

            assert isinstance(logger, StreamLogger)
            assert logger.stream == "stderr"
            assert logger.name == "dvm"


class TestSilentLogger:
    """Tests for SilentLogger."""

    def test_default_values(self):
        logger = SilentLogger()

        assert logger.level == "INFO"
        assert logger.name == "dvm"

    def test_records_every_level(self):
        logger = SilentLogger()

        logger.debug("d")
        logger.info("i")
        logger.warning("w")
        logger.error("e")
        logger.exception("x")

        assert [log["level"] for log in logger.logs] == ["DEBUG", "INFO", "WARNING", "ERROR", "ERROR"]

    def test_extra_fields(self):
        logger = SilentLogger()

        logger.info("Resolved secret", provider="env", secret="github-token")

        assert logger.logs[0]["extra"] == {"provider": "env", "secret": "github-token"}

    def test_get_logs_and_has_log(self):
        logger = SilentLogger()

        logger.info("Registered secret provider")
        logger.warning("Keychain lookup failed")

        assert len(logger.get_logs()) == 2
        assert [log["message"] for log in logger.get_logs(level="WARNING")] == ["Keychain lookup failed"]
        assert logger.has_log("Registered")
        assert logger.has_log("Keychain", level="WARNING")
        assert not logger.has_log("Keychain", level="INFO")

    def test_mentions_checks_messages_and_fields(self):
        logger = SilentLogger()

        logger.debug("Resolved secret", provider="env", secret="github-token")

        assert logger.mentions("github-token")
        assert logger.mentions("Resolved")
        assert not logger.mentions("ghp_value")

    def test_exception_drops_exc_info(self):
        logger = SilentLogger()

        logger.exception("Lookup failed", provider="keychain")

        assert logger.logs[0]["extra"] == {"provider": "keychain"}

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            SilentLogger(level="TRACE")

    def test_clear_logs(self):
        logger = SilentLogger()
        logger.info("one")

        logger.clear_logs()

        assert logger.logs == []


class TestStreamLogger:
    """Tests for StreamLogger."""

    def test_default_values(self):
        logger = StreamLogger()

        assert logger.level == "INFO"
        assert logger.name == "dvm"
        assert logger.stream == "stderr"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            StreamLogger(level="TRACE")

    def test_invalid_stream(self):
        with pytest.raises(ValueError, match="Invalid log stream"):
            StreamLogger(stream="file")

    @patch("sys.stderr", new_callable=StringIO)
    def test_json_output_on_stderr(self, mock_stderr):
        logger = StreamLogger(level="INFO", name="test")

        logger.info("Registered secret provider", provider="env")

        log_entry = _first_entry(mock_stderr)
        assert log_entry["level"] == "INFO"
        assert log_entry["message"] == "Registered secret provider"
        assert log_entry["logger"] == "test"
        assert log_entry["extra"] == {"provider": "env"}
        assert log_entry["timestamp"].endswith("Z")

    @patch("sys.stdout", new_callable=StringIO)
    def test_json_output_on_stdout(self, mock_stdout):
        logger = StreamLogger(name="test", stream="stdout")

        logger.error("Something failed")

        assert _first_entry(mock_stdout)["level"] == "ERROR"

    @patch("sys.stderr", new_callable=StringIO)
    def test_level_filtering(self, mock_stderr):
        logger = StreamLogger(level="WARNING", name="test")

        logger.debug("hidden")
        logger.info("hidden")
        logger.warning("shown")

        lines = [json.loads(line) for line in mock_stderr.getvalue().splitlines() if line.startswith("{")]
        assert [line["message"] for line in lines] == ["shown"]

    @patch("sys.stderr", new_callable=StringIO)
    def test_non_serializable_extra_uses_str(self, mock_stderr):
        logger = StreamLogger(name="test")

        logger.info("Event", value=object())

        assert _first_entry(mock_stderr)["extra"]["value"].startswith("<object object")

    def test_mirrors_to_stdlib_logging(self, caplog):
        logger = StreamLogger(level="DEBUG", name="dvm_secrets.test")

        with caplog.at_level(logging.DEBUG, logger="dvm_secrets.test"):
            with patch("sys.stderr", new_callable=StringIO):
                logger.debug("Secret cache hit", provider="mock")

        assert any(record.getMessage() == "Secret cache hit" for record in caplog.records)


class TestLoggerInterface:
    """Tests for the Logger base class."""

    def test_level_methods_delegate_to_log(self):
        class RecordingLogger(Logger):
            def __init__(self):
                self.calls = []

            def log(self, level, message, **fields):
                self.calls.append((level, message, fields))

        logger = RecordingLogger()
        logger.debug("d", a=1)
        logger.warning("w")
        logger.exception("x")

        assert logger.calls == [
            ("DEBUG", "d", {"a": 1}),
            ("WARNING", "w", {}),
            ("ERROR", "x", {"exc_info": True}),
        ]
