"""Settings for the configuration loader itself.

These are read from the process environment (prefix SERVICE_CONFIG_) and
control where the loader looks for files before any configuration file has
been read.
"""

from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from service_config.validators import validate_log_level


class LoaderSettings(BaseSettings):
    """Loader settings read from environment variables and defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SERVICE_CONFIG_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    config_file: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("SERVICE_CONFIG_CONFIG_FILE", "CONFIG_FILE", "config_file"),
        description="Explicit configuration file path",
    )
    config_name: str = Field(
        default="config", description="Base file name used when searching config_paths"
    )
    config_paths: list[Path] = Field(
        default_factory=list, description="Directories searched when no file is given"
    )
    env_prefix: str = Field(default="", description="Prefix for environment overrides")
    log_level: str = Field(
        default="DEBUG", description="Library log level before a config file is loaded"
    )
    load_env_files: bool = Field(
        default=True, description="Load .env files found next to the config file"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("config_file", mode="before")
    @classmethod
    def empty_config_file(cls, v: Path | str | None) -> Path | str | None:
        """Treat an empty CONFIG_FILE as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


_settings: LoaderSettings | None = None


def get_loader_settings() -> LoaderSettings:
    """Get the loader settings singleton.

    Returns:
        LoaderSettings instance, read from the environment on first use.
    """
    global _settings
    if _settings is None:
        _settings = LoaderSettings()
    return _settings


def reset_loader_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
