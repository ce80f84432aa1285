"""Reading and parsing configuration files.

Files are read through a FileSystem and parsed according to their extension:
YAML (.yaml, .yml) with PyYAML, JSON (.json) with the json module.
"""

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from service_config.errors import (
    ConfigParseError,
    ConfigReadError,
    UnsupportedExtensionError,
)
from service_config.fs import FileSystem
from service_config.telemetry import CONFIG_FILE_EMPTY, CONFIG_READ, get_logger

log = get_logger(__name__)

SUPPORTED_EXTENSIONS: tuple[str, ...] = ("json", "yaml", "yml")


def config_format(path: Path, supported: Sequence[str] = SUPPORTED_EXTENSIONS) -> str:
    """Return the configuration format for path based on its extension.

    Args:
        path: Configuration file path.
        supported: Accepted extensions, without the leading dot.

    Returns:
        Lower-cased extension, e.g. "yaml".

    Raises:
        UnsupportedExtensionError: If the extension is not in supported.
    """
    ext = Path(path).suffix.lstrip(".").lower()
    if ext not in supported:
        raise UnsupportedExtensionError(ext)
    return ext


def parse_config_bytes(data: bytes, fmt: str, source: str = "<bytes>") -> dict[str, Any]:
    """Parse a configuration document.

    Args:
        data: Raw file content.
        fmt: "json", "yaml" or "yml".
        source: Name used in error messages.

    Returns:
        Parsed mapping. Empty documents yield an empty dict.

    Raises:
        ConfigParseError: If the document is malformed or not a mapping.
        UnsupportedExtensionError: If fmt is not a known format.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ConfigParseError(f"Config file {source} is not valid UTF-8: {e}") from None

    if fmt in ("yaml", "yml"):
        try:
            content = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Failed to parse YAML file {source}: {e}") from None
    elif fmt == "json":
        if not text.strip():
            content = None
        else:
            try:
                content = json.loads(text)
            except json.JSONDecodeError as e:
                raise ConfigParseError(f"Failed to parse JSON file {source}: {e}") from None
    else:
        raise UnsupportedExtensionError(fmt)

    if content is None:
        log.debug(CONFIG_FILE_EMPTY, file_path=source)
        return {}
    if not isinstance(content, dict):
        raise ConfigParseError(
            f"Config file {source} must contain a mapping at the top level, "
            f"got {type(content).__name__}"
        )
    return content


def read_config_file(
    fs: FileSystem, path: Path, supported: Sequence[str] = SUPPORTED_EXTENSIONS
) -> dict[str, Any]:
    """Read and parse a configuration file through fs.

    Args:
        fs: Filesystem to read from.
        path: Configuration file path.
        supported: Accepted extensions.

    Returns:
        Parsed mapping.

    Raises:
        UnsupportedExtensionError: If the extension is not supported.
        ConfigReadError: If the file cannot be read.
        ConfigParseError: If the content cannot be parsed.
    """
    fmt = config_format(path, supported)
    log.debug(CONFIG_READ, file_path=str(path), format=fmt)
    try:
        data = fs.read_bytes(path)
    except FileNotFoundError:
        raise ConfigReadError(f"Configuration file not found: {path}") from None
    except OSError as e:
        raise ConfigReadError(f"Failed to read configuration file {path}: {e}") from None
    return parse_config_bytes(data, fmt, str(path))
