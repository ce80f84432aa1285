"""Exception hierarchy for configuration loading.

Every error raised by this package derives from ConfigError so callers can
catch the whole family in one place. Validation errors also derive from
ValueError so they can be raised from inside Pydantic validators and
recovered intact from the resulting ValidationError.
"""

from typing import Any


def _type_name(hint: Any) -> str:
    # Unions and other hints have no usable __name__
    if isinstance(hint, type):
        return hint.__name__
    return repr(hint)


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigPathError(ConfigError):
    """Raised when a configuration file path cannot be resolved."""

    pass


class ConfigNotFoundError(ConfigError):
    """Raised when no configuration file is found in the search paths."""

    pass


class ConfigLoadError(ConfigError):
    """Base exception for errors while loading a configuration document."""

    pass


class ConfigReadError(ConfigLoadError):
    """Raised when a configuration file exists but cannot be read."""

    pass


class ConfigWriteError(ConfigError):
    """Raised when a configuration file cannot be created or written."""

    pass


class UnsupportedExtensionError(ConfigError):
    """Raised when the configuration file extension is not supported."""

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(f"unsupported config file extension: {extension or '<none>'}")


class ConfigParseError(ConfigLoadError):
    """Raised when a configuration document cannot be parsed or unmarshalled."""

    pass


class ConfigValidationError(ConfigError, ValueError):
    """Raised when a base configuration field fails validation."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"invalid {field}: {message}")


class UnknownLogLevelError(ConfigError, ValueError):
    """Raised when the configured log level is not recognized."""

    def __init__(self, level: str) -> None:
        self.level = level
        super().__init__(f"unknown log level: {level}")


class ServiceTypeMismatchError(ConfigError):
    """Raised when the stored service payload is not of the requested type."""

    def __init__(self, expected: Any, actual: type) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"invalid service config type: expected {_type_name(expected)}, "
            f"got {_type_name(actual)}"
        )


class ConfigNotLoadedError(ConfigError):
    """Raised when configuration is accessed before it has been loaded."""

    pass
