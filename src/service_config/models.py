"""Pydantic models for the base configuration.

Persisted layout (YAML shown, JSON uses the same keys):

    appID: 4f1c...        # generated when empty, at least 8 characters
    appName: app
    appSecret: 9b2e...    # generated when empty, at least 12 characters
    logger:
      logLevel: DEBUG     # DEBUG, INFO, WARN, WARNING, ERROR (any case)
      logFormat: json
      fileName: app
      logDir: ""
      maxSize: 100
      maxAge: 7
      maxBackups: 10
      localTime: true
      compress: true
    service: {...}        # caller-defined payload

Fields that must never be logged are marked with the Sensitive annotation.
The set of sensitive fields is computed once when each model class is
defined; secure_copy() masks exactly those fields.
"""

from pathlib import Path
from typing import Annotated, Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from service_config.result import ServiceResult, check_service_type
from service_config.validators import (
    APP_ID_MIN_LENGTH,
    APP_SECRET_MIN_LENGTH,
    default_identifier,
    validate_log_format,
    validate_log_level,
    validate_min_length,
)

T = TypeVar("T")
S = TypeVar("S", bound="SensitiveModel")

MASK = "********"
DEFAULT_APP_NAME = "app"


class Sensitive:
    """Annotation marker for fields masked in secure copies.

    Example:
        >>> class Database(SensitiveModel):
        ...     user: str = "admin"
        ...     password: Annotated[str, Sensitive()] = ""
    """

    def __repr__(self) -> str:
        return "Sensitive()"


class SensitiveModel(BaseModel):
    """Base model that knows which of its fields are sensitive."""

    sensitive_fields: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        cls.sensitive_fields = frozenset(
            name
            for name, field in cls.model_fields.items()
            if any(isinstance(meta, Sensitive) for meta in field.metadata)
        )

    def secure_copy(self: S) -> S:
        """Return a shallow copy with non-empty sensitive fields masked."""
        updates: dict[str, Any] = {
            name: MASK for name in self.sensitive_fields if getattr(self, name)
        }
        for name in type(self).model_fields:
            value = getattr(self, name)
            if name not in updates and isinstance(value, SensitiveModel):
                updates[name] = value.secure_copy()
        return self.model_copy(update=updates)


class LoggerConfig(BaseModel):
    """Logger settings applied to the library's sinks after loading."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    log_level: str = Field(default="DEBUG", alias="logLevel", description="Log threshold")
    log_format: str = Field(default="json", alias="logFormat", description="json or console")
    file_name: str = Field(default="", alias="fileName", description="Log file base name")
    log_dir: str = Field(default="", alias="logDir", description="Log directory (empty = none)")
    max_size: int = Field(default=100, ge=1, alias="maxSize", description="Rotation size (MB)")
    max_age: int = Field(default=7, ge=0, alias="maxAge", description="Retention days (stored)")
    max_backups: int = Field(
        default=10, ge=0, alias="maxBackups", description="Rotated files to keep"
    )
    local_time: bool = Field(
        default=True, alias="localTime", description="Local rotation times (stored)"
    )
    compress: bool = Field(default=True, description="Gzip rotated files")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        """Validate and normalize log level."""
        return validate_log_level("" if v is None else str(v))

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @property
    def log_file(self) -> Path | None:
        """Path of the log file, or None when file logging is off."""
        if not self.log_dir:
            return None
        return Path(self.log_dir) / f"{self.file_name}.jsonl"


class BaseConfig(SensitiveModel):
    """Fixed configuration present in every deployment."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    app_id: str = Field(default="", alias="appID", validate_default=True)
    app_name: str = Field(default=DEFAULT_APP_NAME, alias="appName")
    app_secret: Annotated[str, Sensitive()] = Field(
        default="", alias="appSecret", validate_default=True
    )
    logger: LoggerConfig = Field(default_factory=LoggerConfig)

    @field_validator("app_id", "app_secret", mode="before")
    @classmethod
    def generate_identifier(cls, v: Any) -> str:
        """Fill empty identifiers with a generated UUID."""
        return default_identifier(v)

    @field_validator("app_id")
    @classmethod
    def validate_app_id(cls, v: str) -> str:
        return validate_min_length(v, APP_ID_MIN_LENGTH, "AppID")

    @field_validator("app_secret")
    @classmethod
    def validate_app_secret(cls, v: str) -> str:
        return validate_min_length(v, APP_SECRET_MIN_LENGTH, "AppSecret")

    @field_validator("app_name", mode="before")
    @classmethod
    def default_app_name(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            return DEFAULT_APP_NAME
        return str(v)

    @field_validator("logger", mode="before")
    @classmethod
    def empty_logger(cls, v: Any) -> Any:
        # "logger:" with no body parses as None
        return {} if v is None else v

    @model_validator(mode="after")
    def default_log_file_name(self) -> "BaseConfig":
        if not self.logger.file_name:
            self.logger.file_name = self.app_name
        return self


class Config(BaseConfig):
    """Base configuration plus the caller-defined service payload."""

    service: Any = Field(default=None, alias="service")

    def service_as(self, service_type: type[T]) -> "ServiceResult[T]":
        """Look up the service payload as service_type without raising.

        Example:
            >>> result = config.service_as(Database)
            >>> if result.ok:
            ...     print(result.value.user)
        """
        return check_service_type(self.service, service_type)
