"""Load, validate and hold a service configuration.

ConfigManager runs the whole pipeline:

1. Resolve the configuration file (explicit path, CONFIG_FILE, or search).
2. Generate a default file when it does not exist yet.
3. Read and parse it (YAML or JSON, by extension) and match its keys to
   the persisted layout, ignoring case.
4. Load .env files and apply environment overrides.
5. Default and validate the base fields; unmarshal the service payload into
   the caller's template type.
6. Store the result and apply the logger settings.

Managers are plain objects; create one per application (or per test) and
pass it where it is needed. get_manager() returns a shared default instance
for callers that want one.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from service_config.env_loader import apply_env_overrides, key_paths, load_env_files
from service_config.errors import (
    ConfigError,
    ConfigNotFoundError,
    ConfigNotLoadedError,
    ConfigParseError,
    ConfigPathError,
)
from service_config.finder import ConfigFinder
from service_config.fs import FileSystem, OSFileSystem
from service_config.loader import SUPPORTED_EXTENSIONS, config_format, read_config_file
from service_config.models import BaseConfig, Config, LoggerConfig
from service_config.result import ServiceResult
from service_config.settings import LoaderSettings, get_loader_settings
from service_config.telemetry import (
    CONFIG_DEFAULT_WRITTEN,
    CONFIG_FILE_RESOLVED,
    CONFIG_LOAD_FAILED,
    CONFIG_LOADED,
    CONFIG_SECURE_COPY,
    CONFIG_UNKNOWN_KEYS,
    LOG_LEVEL_CHANGED,
    configure_logging,
    get_logger,
)
from service_config.writer import dump_service, write_config

log = get_logger(__name__)

T = TypeVar("T")


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        field_path = " -> ".join(str(loc) for loc in item["loc"])
        messages.append(f"{field_path}: {item['msg']}")
    return "\n".join(messages)


def _unwrap_validation_error(error: ValidationError, source: str) -> ConfigError:
    """Recover the package error raised inside a validator, if any."""
    for item in error.errors():
        cause = (item.get("ctx") or {}).get("error")
        if isinstance(cause, ConfigError):
            return cause
    return ConfigParseError(
        f"Configuration validation failed for {source}:\n{_format_validation_error(error)}"
    )


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _template_instance(service: Any) -> Any:
    """Return service itself, or a default instance when given a type."""
    if service is None:
        raise ConfigError("need configuration object")
    if isinstance(service, type):
        try:
            return service()
        except (TypeError, ValidationError) as e:
            raise ConfigError(
                f"service type {service.__name__} cannot be built from defaults: {e}"
            ) from None
    return service


def _layout(template: Any) -> dict[str, Any]:
    """Persisted key layout of the base config and the service template."""
    layout: dict[str, Any] = {
        field.alias or name: None
        for name, field in BaseConfig.model_fields.items()
        if name != "logger"
    }
    layout["logger"] = LoggerConfig().model_dump(by_alias=True)
    layout["service"] = dump_service(template)
    return layout


def _fold(key: Any) -> str:
    return str(key).replace("_", "").lower()


def _match_keys(
    data: Mapping[str, Any], layout: Mapping[str, Any], unknown: list[str], parent: str = ""
) -> dict[str, Any]:
    """Rename keys of data to their spelling in layout.

    Keys match ignoring case and underscores, so appid, AppID and app_id all
    become appID. An exact spelling wins over a variant of the same key.
    Keys with no counterpart in a non-empty layout are kept as-is and
    collected in unknown.
    """
    spelling = {_fold(key): key for key in layout}
    matched: dict[str, Any] = {}
    for key, value in data.items():
        name = spelling.get(_fold(key), key)
        path = f"{parent}.{name}" if parent else str(name)
        if layout and name not in layout:
            unknown.append(path)
        if name in matched and key != name:
            continue
        nested = layout.get(name)
        if isinstance(value, Mapping) and isinstance(nested, Mapping) and nested:
            value = _match_keys(value, nested, unknown, path)
        matched[name] = value
    return matched


class ConfigManager:
    """Holds one loaded configuration and the settings used to find it.

    Args:
        fs: Filesystem used for config files. Defaults to the real disk.
        settings: Loader settings. Defaults to the environment-driven singleton.
        apply_logging: Apply the loaded logger settings to the library's sinks.
        supported_extensions: Accepted config file extensions.

    Example:
        >>> manager = ConfigManager()
        >>> manager.set_env_prefix("MYAPP")
        >>> manager.init_service_config(Database(), "config/config.yaml")
        >>> db = manager.get_service(Database)
    """

    def __init__(
        self,
        fs: FileSystem | None = None,
        settings: LoaderSettings | None = None,
        apply_logging: bool = True,
        supported_extensions: Sequence[str] = SUPPORTED_EXTENSIONS,
    ) -> None:
        self.settings = settings if settings is not None else get_loader_settings()
        self.fs: FileSystem = fs if fs is not None else OSFileSystem()
        self.apply_logging = apply_logging
        self.supported_extensions = tuple(supported_extensions)
        self.env_prefix = self.settings.env_prefix
        self.config_name = self.settings.config_name
        self.config_paths: list[Path] = list(self.settings.config_paths)
        self.config_file: Path | None = self.settings.config_file
        self._config: Config | None = None

    def set_env_prefix(self, prefix: str) -> None:
        """Set the prefix for environment overrides (e.g. "MYAPP")."""
        self.env_prefix = prefix.rstrip("_")

    def set_config_name(self, name: str) -> None:
        """Set the base file name used when searching config paths."""
        self.config_name = name

    def add_config_path(self, path: Path | str) -> None:
        """Add a directory to search when no file is given."""
        self.config_paths.append(Path(path))

    def set_config_file(self, path: Path | str) -> None:
        """Use path instead of searching."""
        self.config_file = Path(path)

    @property
    def loaded(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> Config:
        if self._config is None:
            raise ConfigNotLoadedError("configuration has not been loaded")
        return self._config

    def resolve_config_file(self, path: Path | str | None = None) -> Path:
        """Resolve the configuration file path.

        Order: the path argument, set_config_file / CONFIG_FILE, then a search
        of config_paths for {config_name}.{ext}.

        Raises:
            ConfigPathError: If there is no path and nothing to search.
            ConfigNotFoundError: If the search finds no file.
        """
        candidate = path if path not in (None, "") else self.config_file
        if candidate is None:
            if not self.config_paths:
                raise ConfigPathError("invalid config file path: no file given and no search paths")
            finder = ConfigFinder(self.config_paths, [self.config_name], self.supported_extensions)
            candidate = finder.find(self.fs)
            if candidate is None:
                raise ConfigNotFoundError(
                    f"no config file found in paths: {[str(p) for p in self.config_paths]}"
                )

        try:
            resolved = Path(candidate).expanduser().absolute()
        except (OSError, RuntimeError) as e:
            raise ConfigPathError(f"invalid config file path {candidate}: {e}") from None

        log.debug(CONFIG_FILE_RESOLVED, config_file=str(resolved))
        return resolved

    def init_service_config(self, service: Any, path: Path | str | None = None) -> Config:
        """Load the configuration file and store the result.

        If the file does not exist, a default one is generated first from the
        service template and fresh identifiers.

        Args:
            service: Default-valued service payload (Pydantic model, dataclass
                or dict), or a type whose fields all have defaults.
            path: Configuration file. See resolve_config_file for fallbacks.

        Returns:
            The loaded configuration. The service payload is a new instance of
            the template's type with file and environment values applied.

        Raises:
            ConfigError: Any path, read, parse or validation failure. The
                previously loaded configuration is kept in that case.
        """
        try:
            template = _template_instance(service)
            config_file = self.resolve_config_file(path)
            config_format(config_file, self.supported_extensions)

            if not self.fs.exists(config_file):
                self._write_default(config_file, template)

            layout = _layout(template)
            document = self._read_document(config_file, template, layout)
            if self.settings.load_env_files:
                load_env_files(config_file.parent, self.fs)
            document = apply_env_overrides(document, self.env_prefix, key_paths(layout))

            config = self._build_config(document, template, str(config_file))
        except ConfigError as e:
            log.error(CONFIG_LOAD_FAILED, error=str(e), error_type=type(e).__name__)
            raise

        self._config = config
        self.config_file = config_file
        if self.apply_logging:
            self._apply_logger_config(config.logger)

        log.info(
            CONFIG_LOADED,
            config_file=str(config_file),
            app_name=config.app_name,
            log_level=config.logger.log_level,
            service_type=type(config.service).__name__,
        )
        return config

    def _read_document(
        self, config_file: Path, template: Any, layout: Mapping[str, Any]
    ) -> dict[str, Any]:
        document = read_config_file(self.fs, config_file, self.supported_extensions)
        unknown: list[str] = []
        document = _match_keys(document, layout, unknown)
        if isinstance(template, Mapping):
            # dict payloads take any key
            unknown = [key for key in unknown if not key.startswith("service.")]
        if unknown:
            log.warning(CONFIG_UNKNOWN_KEYS, config_file=str(config_file), keys=unknown)
        return document

    def _build_config(self, document: Mapping[str, Any], template: Any, source: str) -> Config:
        base_data = {key: value for key, value in document.items() if key != "service"}
        try:
            config = Config.model_validate(base_data)
        except ValidationError as e:
            raise _unwrap_validation_error(e, source) from None

        config.service = self._load_service(template, document.get("service"), source)
        return config

    def _load_service(self, template: Any, section: Any, source: str) -> Any:
        data = dump_service(template)
        if isinstance(data, Mapping) and isinstance(section, Mapping):
            data = _deep_merge(data, section)
        elif section is not None:
            data = section

        try:
            return TypeAdapter(type(template)).validate_python(data)
        except ValidationError as e:
            raise ConfigParseError(
                f"Failed to unmarshal service config from {source}:\n"
                f"{_format_validation_error(e)}"
            ) from None

    def _apply_logger_config(self, logger_config: LoggerConfig) -> None:
        configure_logging(
            level=logger_config.log_level,
            log_format=logger_config.log_format,
            log_file=logger_config.log_file,
            max_size_mb=logger_config.max_size,
            max_backups=logger_config.max_backups,
            compress=logger_config.compress,
        )
        log.debug(LOG_LEVEL_CHANGED, log_level=logger_config.log_level)

    def _write_default(self, path: Path, template: Any) -> Path:
        config = Config(service=template)
        write_config(self.fs, path, config)
        log.info(CONFIG_DEFAULT_WRITTEN, file_path=str(path), app_id=config.app_id)
        return path

    def default_config(self, service: Any, path: Path | str) -> Path:
        """Write a default configuration file without loading it.

        Args:
            service: Service template instance, or a type with all-default fields.
            path: Target file, or an existing directory to write
                {config_name}.yaml into.

        Returns:
            Path of the written file.

        Raises:
            ConfigError: If the template is missing or the file cannot be written.
        """
        template = _template_instance(service)
        target = Path(path).expanduser().absolute()
        if self.fs.exists(target) and not self.fs.is_file(target):
            target = target / f"{self.config_name}.yaml"
        return self._write_default(target, template)

    def write_config(self, path: Path | str | None = None) -> Path:
        """Persist the loaded configuration to path (default: the loaded file)."""
        target = Path(path) if path is not None else self.config_file
        if target is None:
            raise ConfigPathError("invalid config file path: nothing to write to")
        return write_config(self.fs, target, self.config)

    def get_base_config(self) -> Config:
        """Return the loaded configuration."""
        return self.config

    def service_result(self, service_type: type[T]) -> "ServiceResult[T]":
        """Look up the service payload as service_type without raising on mismatch."""
        return self.config.service_as(service_type)

    def get_service(self, service_type: type[T]) -> T:
        """Return the service payload as service_type.

        Raises:
            ServiceTypeMismatchError: If the payload has a different type.
            ConfigNotLoadedError: If nothing has been loaded yet.
        """
        return self.service_result(service_type).unwrap()

    def get_secure_copy(self) -> Config:
        """Return a copy of the configuration with sensitive fields masked."""
        masked = self.config.secure_copy()
        log.debug(
            CONFIG_SECURE_COPY,
            app_id=masked.app_id,
            app_name=masked.app_name,
            app_secret=masked.app_secret,
            log_level=masked.logger.log_level,
        )
        return masked


_manager: ConfigManager | None = None


def get_manager() -> ConfigManager:
    """Get the shared default manager, created on first use."""
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager
