"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Runtime threshold changes driven by the loaded configuration
- Semantic event constants
"""

from service_config.telemetry.events import (
    CONFIG_DEFAULT_WRITTEN,
    CONFIG_FILE_EMPTY,
    CONFIG_FILE_RESOLVED,
    CONFIG_LOAD_FAILED,
    CONFIG_LOADED,
    CONFIG_READ,
    CONFIG_SEARCH,
    CONFIG_SECURE_COPY,
    CONFIG_UNKNOWN_KEYS,
    CONFIG_WRITTEN,
    ENV_FILES_LOADED,
    ENV_OVERRIDE_APPLIED,
    LOG_LEVEL_CHANGED,
)
from service_config.telemetry.logger import (
    configure_logging,
    get_logger,
    get_sink_level,
    set_log_level,
    to_logging_level,
)

__all__ = [
    # Core exports
    "get_logger",
    "configure_logging",
    "set_log_level",
    "get_sink_level",
    "to_logging_level",
    # Event constants
    "CONFIG_SEARCH",
    "CONFIG_FILE_RESOLVED",
    "CONFIG_READ",
    "CONFIG_FILE_EMPTY",
    "CONFIG_UNKNOWN_KEYS",
    "ENV_FILES_LOADED",
    "ENV_OVERRIDE_APPLIED",
    "CONFIG_DEFAULT_WRITTEN",
    "CONFIG_WRITTEN",
    "CONFIG_LOADED",
    "CONFIG_LOAD_FAILED",
    "CONFIG_SECURE_COPY",
    "LOG_LEVEL_CHANGED",
]
