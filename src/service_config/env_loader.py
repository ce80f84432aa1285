"""Environment variable overrides for configuration documents.

Every key path known from the file or the defaults can be overridden by an
environment variable named PREFIX_ + the key path upper-cased, with "." and
"-" replaced by "_":

    logger.logLevel  ->  MYAPP_LOGGER_LOGLEVEL   (prefix "MYAPP")
    service.db-host  ->  SERVICE_DB_HOST         (no prefix)

.env files next to the configuration file are read through the same
FileSystem as the configuration and loaded with python-dotenv, without
overriding variables already set in the process.
"""

import copy
import io
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from service_config.errors import ConfigReadError
from service_config.fs import FileSystem, OSFileSystem
from service_config.telemetry import ENV_FILES_LOADED, ENV_OVERRIDE_APPLIED, get_logger

log = get_logger(__name__)

# Highest priority first; the first file to set a variable wins.
ENV_FILE_NAMES = (".env.local", ".env")


def env_key(key_path: str, prefix: str = "") -> str:
    """Build the environment variable name for a dotted key path."""
    name = key_path.replace(".", "_").replace("-", "_").upper()
    if prefix:
        return f"{prefix.upper()}_{name}"
    return name


def key_paths(mapping: Mapping[str, Any], parent: str = "") -> list[str]:
    """Return dotted paths of every leaf value in a nested mapping.

    Empty mappings are sections without leaves and yield no path.

    Example:
        >>> key_paths({"logger": {"logLevel": "DEBUG"}, "appID": "x"})
        ['logger.logLevel', 'appID']
    """
    paths: list[str] = []
    for key, value in mapping.items():
        path = f"{parent}.{key}" if parent else str(key)
        if isinstance(value, Mapping):
            paths.extend(key_paths(value, path))
        else:
            paths.append(path)
    return paths


def _set_path(document: dict[str, Any], key_path: str, value: str) -> None:
    node = document
    *parents, leaf = key_path.split(".")
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[leaf] = value


def _sections(keys: Iterable[str]) -> set[str]:
    """Dotted paths that have children, e.g. "a" and "a.b" for "a.b.c"."""
    sections: set[str] = set()
    for key in keys:
        parts = key.split(".")
        sections.update(".".join(parts[:i]) for i in range(1, len(parts)))
    return sections


def apply_env_overrides(
    document: Mapping[str, Any],
    prefix: str = "",
    known_keys: Iterable[str] = (),
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return a copy of document with environment overrides applied.

    Args:
        document: Parsed configuration document.
        prefix: Environment variable prefix (without trailing underscore).
        known_keys: Extra dotted key paths to bind, e.g. from defaults.
        environ: Environment to read. Defaults to os.environ.

    Returns:
        New document; the input is not modified.
    """
    if environ is None:
        environ = os.environ

    result = copy.deepcopy(dict(document))
    keys = dict.fromkeys([*key_paths(document), *known_keys])
    # A section name is never bound to a scalar, even when the file leaves it empty
    sections = _sections(keys)
    for key_path in keys:
        if key_path in sections:
            continue
        name = env_key(key_path, prefix)
        if name in environ:
            _set_path(result, key_path, environ[name])
            log.debug(ENV_OVERRIDE_APPLIED, key=key_path, env_var=name)
    return result


def load_env_files(directory: Path, fs: FileSystem | None = None) -> list[Path]:
    """Load .env files from directory.

    .env.local takes priority over .env. Variables that are already set in
    the environment are never overridden.

    Args:
        directory: Directory containing the configuration file.
        fs: Filesystem to read from. Defaults to the real disk.

    Returns:
        Files that were loaded.

    Raises:
        ConfigReadError: If an existing .env file cannot be read.
    """
    if fs is None:
        fs = OSFileSystem()

    loaded: list[Path] = []
    for name in ENV_FILE_NAMES:
        env_file = directory / name
        if not fs.is_file(env_file):
            continue
        try:
            text = fs.read_bytes(env_file).decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigReadError(f"Failed to read env file {env_file}: {e}") from None
        load_dotenv(stream=io.StringIO(text), override=False)
        loaded.append(env_file)

    if loaded:
        log.info(ENV_FILES_LOADED, files=[str(f) for f in loaded])
    return loaded
