"""Serialize configuration back to YAML or JSON."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter

from service_config.errors import ConfigWriteError
from service_config.fs import FileSystem
from service_config.loader import SUPPORTED_EXTENSIONS, config_format
from service_config.models import Config
from service_config.telemetry import CONFIG_WRITTEN, get_logger

log = get_logger(__name__)


def dump_service(service: Any) -> Any:
    """Convert a service payload to plain data using its own type's schema."""
    if service is None:
        return None
    return TypeAdapter(type(service)).dump_python(service, mode="json", by_alias=True)


def config_to_dict(config: Config) -> dict[str, Any]:
    """Return the persisted layout of config (camelCase keys)."""
    data = config.model_dump(mode="json", by_alias=True, exclude={"service"})
    data["service"] = dump_service(config.service)
    return data


def render_config(config: Config, fmt: str = "yaml") -> str:
    """Render config as a YAML or JSON document.

    Args:
        config: Configuration to render.
        fmt: "yaml", "yml" or "json".

    Returns:
        Document text ending with a newline.
    """
    data = config_to_dict(config)
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    return yaml.safe_dump(
        data, sort_keys=False, indent=2, default_flow_style=False, allow_unicode=True
    )


def write_config(fs: FileSystem, path: Path, config: Config) -> Path:
    """Write config to path; the format follows the file extension.

    Raises:
        UnsupportedExtensionError: If the extension is not supported.
        ConfigWriteError: If the file cannot be written.
    """
    fmt = config_format(path, SUPPORTED_EXTENSIONS)
    document = render_config(config, fmt)
    try:
        fs.write_bytes(path, document.encode("utf-8"))
    except OSError as e:
        raise ConfigWriteError(f"Failed to write configuration file {path}: {e}") from None
    log.info(CONFIG_WRITTEN, file_path=str(path), format=fmt)
    return path
