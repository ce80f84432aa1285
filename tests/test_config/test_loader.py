"""Tests for reading and parsing configuration files."""

from pathlib import Path

import pytest

from service_config.errors import (
    ConfigLoadError,
    ConfigParseError,
    ConfigReadError,
    UnsupportedExtensionError,
)
from service_config.fs import MemoryFileSystem, OSFileSystem
from service_config.loader import (
    config_format,
    parse_config_bytes,
    read_config_file,
)


class TestConfigFormat:
    """Test format detection by extension."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("config.yaml", "yaml"), ("config.yml", "yml"), ("config.json", "json"), ("C.YAML", "yaml")],
    )
    def test_supported(self, name: str, expected: str) -> None:
        assert config_format(Path(name)) == expected

    def test_unsupported(self) -> None:
        with pytest.raises(UnsupportedExtensionError, match="unsupported config file extension: txt"):
            config_format(Path("config.txt"))

    def test_no_extension(self) -> None:
        with pytest.raises(UnsupportedExtensionError):
            config_format(Path("config"))

    def test_restricted_extensions(self) -> None:
        with pytest.raises(UnsupportedExtensionError):
            config_format(Path("config.json"), supported=("yaml",))


class TestParseConfigBytes:
    """Test document parsing."""

    def test_yaml(self) -> None:
        result = parse_config_bytes(b"key1: value1\nkey2:\n  nested: value2\n", "yaml")

        assert result == {"key1": "value1", "key2": {"nested": "value2"}}

    def test_json(self) -> None:
        result = parse_config_bytes(b'{"logger": {"logLevel": "INFO"}}', "json")

        assert result == {"logger": {"logLevel": "INFO"}}

    @pytest.mark.parametrize("fmt", ["yaml", "json"])
    def test_empty_document(self, fmt: str) -> None:
        assert parse_config_bytes(b"  \n", fmt) == {}

    def test_comments_only(self) -> None:
        assert parse_config_bytes(b"# Just comments\n# No actual content", "yaml") == {}

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ConfigParseError, match="Failed to parse YAML"):
            parse_config_bytes(b"invalid: yaml: content: [unclosed", "yaml", "bad.yaml")

    def test_invalid_json(self) -> None:
        with pytest.raises(ConfigParseError, match="Failed to parse JSON"):
            parse_config_bytes(b'{"appID": ', "json")

    def test_top_level_must_be_mapping(self) -> None:
        with pytest.raises(ConfigParseError, match="mapping at the top level"):
            parse_config_bytes(b"- item1\n- item2\n", "yaml")

    def test_invalid_utf8(self) -> None:
        with pytest.raises(ConfigParseError, match="not valid UTF-8"):
            parse_config_bytes(b"\xff\xfe", "yaml")

    def test_parse_errors_are_load_errors(self) -> None:
        with pytest.raises(ConfigLoadError):
            parse_config_bytes(b"[", "json")


class TestReadConfigFile:
    """Test reading through a filesystem."""

    def test_read_from_memory(self) -> None:
        fs = MemoryFileSystem()
        fs.mkdir("/etc/app")
        fs.write_bytes(Path("/etc/app/config.yaml"), b"appName: demo\n")

        assert read_config_file(fs, Path("/etc/app/config.yaml")) == {"appName": "demo"}

    def test_missing_file(self) -> None:
        with pytest.raises(ConfigReadError, match="not found"):
            read_config_file(MemoryFileSystem(), Path("/nowhere/config.yaml"))

    def test_directory_is_read_error(self, tmp_path: Path) -> None:
        directory = tmp_path / "config.yaml"
        directory.mkdir()

        with pytest.raises(ConfigReadError):
            read_config_file(OSFileSystem(), directory)

    def test_extension_checked_before_reading(self) -> None:
        with pytest.raises(UnsupportedExtensionError):
            read_config_file(MemoryFileSystem(), Path("/nowhere/config.ini"))
