"""Service configuration loading.

Loads a YAML/JSON configuration file holding a fixed base configuration
(application identity, secret, logger settings) plus a caller-defined service
payload, merges environment overrides, fills in generated identifiers and
validates the result.

Example:
    >>> from pydantic import BaseModel
    >>> from service_config import ConfigManager
    >>> class Database(BaseModel):
    ...     host: str = "localhost"
    ...     port: int = 5432
    >>> manager = ConfigManager()
    >>> manager.set_env_prefix("MYAPP")
    >>> config = manager.init_service_config(Database(), "config.yaml")
    >>> db = manager.get_service(Database)
"""

from service_config.errors import (
    ConfigError,
    ConfigLoadError,
    ConfigNotFoundError,
    ConfigNotLoadedError,
    ConfigParseError,
    ConfigPathError,
    ConfigReadError,
    ConfigValidationError,
    ConfigWriteError,
    ServiceTypeMismatchError,
    UnknownLogLevelError,
    UnsupportedExtensionError,
)
from service_config.finder import ConfigFinder, Finders
from service_config.fs import FileSystem, MemoryFileSystem, OSFileSystem
from service_config.manager import ConfigManager, get_manager
from service_config.models import MASK, BaseConfig, Config, LoggerConfig, Sensitive, SensitiveModel
from service_config.result import ServiceOk, ServiceResult, ServiceTypeMismatch
from service_config.settings import LoaderSettings, get_loader_settings

__all__ = [
    # Manager
    "ConfigManager",
    "get_manager",
    # Models
    "BaseConfig",
    "Config",
    "LoggerConfig",
    "Sensitive",
    "SensitiveModel",
    "MASK",
    # Accessor results
    "ServiceOk",
    "ServiceTypeMismatch",
    "ServiceResult",
    # Locating and filesystems
    "ConfigFinder",
    "Finders",
    "FileSystem",
    "OSFileSystem",
    "MemoryFileSystem",
    # Loader settings
    "LoaderSettings",
    "get_loader_settings",
    # Exception classes
    "ConfigError",
    "ConfigPathError",
    "ConfigNotFoundError",
    "ConfigLoadError",
    "ConfigReadError",
    "ConfigWriteError",
    "ConfigParseError",
    "UnsupportedExtensionError",
    "ConfigValidationError",
    "UnknownLogLevelError",
    "ServiceTypeMismatchError",
    "ConfigNotLoadedError",
]
