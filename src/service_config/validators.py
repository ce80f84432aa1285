"""Validators and defaulters for the base configuration fields.

These functions raise the package's own ValueError subclasses so they can be
used directly from Pydantic field validators.
"""

import uuid

from service_config.errors import ConfigValidationError, UnknownLogLevelError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "WARNING", "ERROR")
VALID_LOG_FORMATS = ("json", "console")

APP_ID_MIN_LENGTH = 8
APP_SECRET_MIN_LENGTH = 12


def validate_log_level(value: str) -> str:
    """Validate and normalize a log level.

    Matching is case-insensitive. WARNING is accepted as an alias and stored
    as WARN.

    Args:
        value: Log level string.

    Returns:
        Normalized log level.

    Raises:
        UnknownLogLevelError: If the level is not recognized.
    """
    level = str(value).strip().upper()
    if level not in VALID_LOG_LEVELS:
        raise UnknownLogLevelError(str(value))
    if level == "WARNING":
        return "WARN"
    return level


def validate_log_format(value: str) -> str:
    """Validate log format is 'json' or 'console'.

    Args:
        value: Log format string.

    Returns:
        Validated log format.

    Raises:
        ValueError: If log format is not valid.
    """
    if value.lower() not in VALID_LOG_FORMATS:
        raise ValueError(f"log_format must be one of {VALID_LOG_FORMATS}, got {value}")
    return value.lower()


def default_identifier(value: object) -> str:
    """Return value as a string, or a fresh UUID when it is missing or empty."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return str(uuid.uuid4())
    return str(value)


def validate_min_length(value: str, minimum: int, field: str) -> str:
    """Check that value has at least minimum characters.

    Args:
        value: Value to check.
        minimum: Minimum accepted length.
        field: Field name used in the error message (e.g. "AppID").

    Returns:
        The value unchanged.

    Raises:
        ConfigValidationError: If value is shorter than minimum.
    """
    if len(value) < minimum:
        raise ConfigValidationError(
            field, f"must be at least {minimum} characters, got {len(value)}"
        )
    return value
