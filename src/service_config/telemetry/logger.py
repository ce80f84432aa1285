"""Structured logging configuration using structlog.

This module configures structlog for the library's own log output:
- JSON or pretty-printed console output on stderr
- Optional rotating JSON file output, optionally gzipped on rotation
- UTC timestamps
- Component tracking
- A runtime-adjustable threshold driven by the loaded logger config
"""

import gzip
import logging
import logging.handlers
import os
import pathlib
import shutil
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

CONSOLE_HANDLER_NAME = "service_config.console"
FILE_HANDLER_NAME = "service_config.file"

_SINK_NAMES = (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME)


def _get_log_level() -> str:
    """Get the bootstrap log level from the loader settings.

    Returns:
        Normalized log level string (DEBUG, INFO, WARN, ERROR).
    """
    from pydantic import ValidationError  # noqa: PLC0415

    from service_config.settings import get_loader_settings  # noqa: PLC0415

    try:
        return get_loader_settings().log_level
    except ValidationError:
        # Bad SERVICE_CONFIG_* variables surface when a manager reads settings.
        return "DEBUG"


def _add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add UTC timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _add_component(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add component name to a foreign (stdlib) log event.

    Args:
        logger: The logger instance.
        method_name: The log method name (info, error, etc.).
        event_dict: The event dictionary.

    Returns:
        Event dictionary with component added.
    """
    if logger is None or not hasattr(logger, "name"):
        event_dict["component"] = "unknown"
        return event_dict

    event_dict["component"] = logger.name.split(".")[-1]
    return event_dict


def _add_component_from_event_dict(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add component name from the logger name set by add_logger_name."""
    logger_name = event_dict.get("logger", "")
    event_dict["component"] = logger_name.split(".")[-1] if logger_name else "unknown"
    return event_dict


def _renderer(log_format: str) -> Any:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.processors.JSONRenderer()


def _formatter(log_format: str) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=_renderer(log_format),
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            _add_timestamp,  # type: ignore[list-item]
            _add_component,  # type: ignore[list-item]
        ],
    )


def _configure_console_handler(log_format: str) -> logging.StreamHandler[Any]:
    """Configure the stderr handler.

    Args:
        log_format: "json" or "console".

    Returns:
        Configured StreamHandler.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setFormatter(_formatter(log_format))
    return handler


def _gzip_namer(name: str) -> str:
    return f"{name}.gz"


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as f_in, gzip.open(dest, "wb") as f_out:
        shutil.copyfileobj(f_in, f_out)
    os.remove(source)


def _configure_file_handler(
    log_file: pathlib.Path, max_size_mb: int, max_backups: int, compress: bool = False
) -> logging.handlers.RotatingFileHandler:
    """Configure rotating file handler for JSON logs.

    Args:
        log_file: Path of the active log file.
        max_size_mb: Rotate once the file reaches this many megabytes.
        max_backups: Number of rotated files to keep.
        compress: Gzip rotated files (app.jsonl.1.gz, ...).

    Returns:
        Configured RotatingFileHandler.
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=str(log_file),
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=max_backups,
        encoding="utf-8",
    )
    if compress:
        handler.namer = _gzip_namer
        handler.rotator = _gzip_rotator
    handler.set_name(FILE_HANDLER_NAME)
    handler.setFormatter(_formatter("json"))
    return handler


def to_logging_level(level: str) -> int:
    """Map a normalized level name to the stdlib logging level."""
    if level.upper() == "WARN":
        return logging.WARNING
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(
    level: str | None = None,
    log_format: str = "json",
    log_file: pathlib.Path | None = None,
    max_size_mb: int = 100,
    max_backups: int = 10,
    compress: bool = False,
) -> None:
    """Configure structlog and the library's logging sinks.

    Replaces any sinks installed by a previous call, so it is safe to call
    again once the configuration file has been loaded.

    Args:
        level: Threshold for the sinks. Defaults to the bootstrap level.
        log_format: "json" or "console" for the stderr sink.
        log_file: If set, also write JSON lines to this rotating file.
        max_size_mb: Rotation size for the file sink.
        max_backups: Rotated files to keep for the file sink.
        compress: Gzip rotated files of the file sink.
    """
    threshold = to_logging_level(level or _get_log_level())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        if handler.get_name() in _SINK_NAMES:
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = _configure_console_handler(log_format)
    console_handler.setLevel(threshold)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = _configure_file_handler(log_file, max_size_mb, max_backups, compress)
        file_handler.setLevel(threshold)
        root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            _add_component_from_event_dict,  # type: ignore[list-item]
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def set_log_level(level: str) -> None:
    """Change the threshold of the library's logging sinks.

    Args:
        level: Normalized level name (DEBUG, INFO, WARN, WARNING, ERROR).
    """
    threshold = to_logging_level(level)
    for handler in logging.getLogger().handlers:
        if handler.get_name() in _SINK_NAMES:
            handler.setLevel(threshold)


def get_sink_level() -> int | None:
    """Return the stderr sink threshold, or None if logging is not configured."""
    for handler in logging.getLogger().handlers:
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            return handler.level
    return None


def get_logger(name: str) -> Any:  # Returns structlog.stdlib.BoundLogger
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module).

    Returns:
        Configured structlog logger instance.

    Example:
        >>> from service_config.telemetry import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("config_loaded", config_file="/etc/app/config.yaml")
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name)
