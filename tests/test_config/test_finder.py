"""Tests for config file search and the filesystem abstraction."""

from pathlib import Path

import pytest

from service_config.finder import ConfigFinder, Finders
from service_config.fs import MemoryFileSystem, OSFileSystem


@pytest.fixture
def fs() -> MemoryFileSystem:
    fs = MemoryFileSystem()
    fs.mkdir("/home/user")
    fs.write_bytes(Path("/home/user/myapp.yaml"), b"foo: bar")
    fs.write_bytes(Path("/home/user/myapp.yml"), b"foo: baz")
    fs.mkdir("/etc/myapp")
    fs.write_bytes(Path("/etc/myapp/config.yaml"), b"")
    return fs


class TestConfigFinder:
    """Test single-finder search order."""

    def test_extension_order(self, fs: MemoryFileSystem) -> None:
        finder = ConfigFinder(paths=["/home/user"], names=["myapp"])

        assert finder.find(fs) == Path("/home/user/myapp.yaml")

    def test_path_order(self, fs: MemoryFileSystem) -> None:
        finder = ConfigFinder(paths=["/etc/myapp", "/home/user"], names=["config", "myapp"])

        assert finder.find(fs) == Path("/etc/myapp/config.yaml")

    def test_not_found(self, fs: MemoryFileSystem) -> None:
        assert ConfigFinder(paths=["/srv"]).find(fs) is None

    def test_directories_are_not_matches(self, fs: MemoryFileSystem) -> None:
        fs.mkdir("/srv/config.json")
        fs.write_bytes(Path("/srv/config.yaml"), b"")

        assert ConfigFinder(paths=["/srv"]).find(fs) == Path("/srv/config.yaml")

    def test_candidates(self) -> None:
        finder = ConfigFinder(paths=["/a"], names=["x"], extensions=["yaml", "json"])

        assert list(finder.candidates()) == [Path("/a/x.yaml"), Path("/a/x.json")]


class TestFinders:
    """Test combining finders."""

    def test_first_hit_wins(self, fs: MemoryFileSystem) -> None:
        finder = Finders(
            ConfigFinder(paths=["/home/user"], names=["myapp"]),
            ConfigFinder(paths=["/etc/myapp"], extensions=["yaml"]),
        )

        assert finder.find(fs) == Path("/home/user/myapp.yaml")

    def test_falls_through(self, fs: MemoryFileSystem) -> None:
        finder = Finders(
            ConfigFinder(paths=["/home/user"], names=["other"]),
            ConfigFinder(paths=["/etc/myapp"], extensions=["yaml"]),
        )

        assert finder.find(fs) == Path("/etc/myapp/config.yaml")


class TestFileSystems:
    """Test filesystem implementations behave alike."""

    def test_memory_requires_parent_directory(self) -> None:
        with pytest.raises(FileNotFoundError):
            MemoryFileSystem().write_bytes(Path("/missing/config.yaml"), b"")

    def test_memory_read_missing(self) -> None:
        with pytest.raises(FileNotFoundError):
            MemoryFileSystem().read_bytes(Path("/config.yaml"))

    def test_memory_round_trip(self) -> None:
        fs = MemoryFileSystem()
        fs.write_bytes(Path("/config.yaml"), b"a: 1")

        assert fs.exists(Path("/config.yaml"))
        assert fs.is_file(Path("/config.yaml"))
        assert fs.read_bytes(Path("/config.yaml")) == b"a: 1"
        assert fs.exists(Path("/"))
        assert not fs.is_file(Path("/"))

    def test_os_requires_parent_directory(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            OSFileSystem().write_bytes(tmp_path / "missing" / "config.yaml", b"")

    def test_os_round_trip(self, tmp_path: Path) -> None:
        fs = OSFileSystem()
        path = tmp_path / "config.yaml"

        fs.write_bytes(path, b"a: 1")

        assert fs.exists(path)
        assert fs.is_file(path)
        assert not fs.is_file(tmp_path)
        assert fs.read_bytes(path) == b"a: 1"
