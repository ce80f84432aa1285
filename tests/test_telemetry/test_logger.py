"""Tests for structured logging configuration."""

import gzip
import json
import logging
import pathlib

import structlog

from service_config.telemetry.logger import (
    CONSOLE_HANDLER_NAME,
    FILE_HANDLER_NAME,
    configure_logging,
    get_logger,
    get_sink_level,
    set_log_level,
    to_logging_level,
)


def _sink_names() -> list[str | None]:
    return [handler.get_name() for handler in logging.getLogger().handlers]


class TestLoggerConfiguration:
    """Test logger configuration and setup."""

    def test_get_logger_returns_bound_logger(self) -> None:
        """Test that get_logger returns a logger that can be used."""
        log = get_logger(__name__)

        assert hasattr(log, "info")
        assert hasattr(log, "error")
        assert hasattr(log, "debug")

    def test_get_logger_configures_on_first_call(self) -> None:
        """Test that get_logger configures logging on first call."""
        structlog.reset_defaults()

        get_logger("test.module1")

        assert structlog.is_configured()
        assert CONSOLE_HANDLER_NAME in _sink_names()

    def test_reconfigure_replaces_sinks(self) -> None:
        """Test that repeated configuration does not duplicate handlers."""
        configure_logging(level="INFO")
        configure_logging(level="ERROR")

        assert _sink_names().count(CONSOLE_HANDLER_NAME) == 1
        assert get_sink_level() == logging.ERROR

    def test_logger_emits_structured_logs(self, tmp_path: pathlib.Path) -> None:
        """Test that logger emits structured JSON logs to file."""
        log_file = tmp_path / "logs" / "app.jsonl"
        configure_logging(level="DEBUG", log_file=log_file)

        log = structlog.get_logger("service_config.component")
        log.info("test_event", key1="value1", key2=42)

        with open(log_file, encoding="utf-8") as f:
            log_entry = json.loads(f.readlines()[-1])

        assert log_entry["event"] == "test_event"
        assert log_entry["key1"] == "value1"
        assert log_entry["key2"] == 42
        assert log_entry["component"] == "component"
        assert "timestamp" in log_entry
        assert FILE_HANDLER_NAME in _sink_names()

    def test_threshold_filters_file_output(self, tmp_path: pathlib.Path) -> None:
        """Test that events below the threshold are dropped."""
        log_file = tmp_path / "app.jsonl"
        configure_logging(level="WARN", log_file=log_file)

        log = structlog.get_logger("service_config.threshold")
        log.info("dropped_event")
        log.warning("kept_event")

        events = [json.loads(line)["event"] for line in log_file.read_text().splitlines()]
        assert events == ["kept_event"]


    def test_compressed_rotation(self, tmp_path: pathlib.Path) -> None:
        """Test that rotated files are gzipped when compression is on."""
        log_file = tmp_path / "app.jsonl"
        configure_logging(level="DEBUG", log_file=log_file, compress=True)

        structlog.get_logger("service_config.rotation").info("before_rotation")
        file_handler = next(
            h for h in logging.getLogger().handlers if h.get_name() == FILE_HANDLER_NAME
        )
        file_handler.doRollover()  # type: ignore[attr-defined]

        rotated = tmp_path / "app.jsonl.1.gz"
        with gzip.open(rotated, "rt", encoding="utf-8") as f:
            assert json.loads(f.readlines()[-1])["event"] == "before_rotation"
        assert not (tmp_path / "app.jsonl.1").exists()

class TestLogLevels:
    """Test level mapping and runtime threshold changes."""

    def test_to_logging_level(self) -> None:
        assert to_logging_level("DEBUG") == logging.DEBUG
        assert to_logging_level("INFO") == logging.INFO
        assert to_logging_level("WARN") == logging.WARNING
        assert to_logging_level("warning") == logging.WARNING
        assert to_logging_level("ERROR") == logging.ERROR

    def test_set_log_level(self) -> None:
        configure_logging(level="DEBUG")

        set_log_level("ERROR")

        assert get_sink_level() == logging.ERROR

    def test_sink_level_when_unconfigured(self) -> None:
        root = logging.getLogger()
        saved = list(root.handlers)
        root.handlers.clear()
        try:
            assert get_sink_level() is None
        finally:
            root.handlers.extend(saved)
