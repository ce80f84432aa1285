"""Filesystem abstraction used by the configuration loader.

The loader never touches the disk directly; it goes through a FileSystem so
tests (and callers that want isolation) can swap in MemoryFileSystem.
"""

from pathlib import Path, PurePosixPath
from typing import Protocol


class FileSystem(Protocol):
    """Minimal filesystem interface needed to find, read and write config files."""

    def exists(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def read_bytes(self, path: Path) -> bytes: ...

    def write_bytes(self, path: Path, data: bytes) -> None: ...


class OSFileSystem:
    """FileSystem backed by the real disk."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_file(self, path: Path) -> bool:
        return Path(path).is_file()

    def read_bytes(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def write_bytes(self, path: Path, data: bytes) -> None:
        # Parent directories are not created; a missing directory is an error.
        with Path(path).open("wb") as f:
            f.write(data)


class MemoryFileSystem:
    """In-memory FileSystem keyed by absolute POSIX paths.

    Directories must exist (see mkdir) before files can be written into them,
    mirroring OSFileSystem. The root directory always exists.

    Example:
        >>> fs = MemoryFileSystem()
        >>> fs.mkdir("/etc/myapp")
        >>> fs.write_bytes(Path("/etc/myapp/config.yaml"), b"appName: demo")
        >>> fs.is_file(Path("/etc/myapp/config.yaml"))
        True
    """

    def __init__(self) -> None:
        self._files: dict[PurePosixPath, bytes] = {}
        self._dirs: set[PurePosixPath] = {PurePosixPath("/")}

    @staticmethod
    def _key(path: Path | str) -> PurePosixPath:
        key = PurePosixPath(Path(path).as_posix())
        if not key.is_absolute():
            key = PurePosixPath("/") / key
        return key

    def mkdir(self, path: Path | str) -> None:
        """Create a directory and all of its parents."""
        key = self._key(path)
        self._dirs.add(key)
        self._dirs.update(key.parents)

    def exists(self, path: Path) -> bool:
        key = self._key(path)
        return key in self._files or key in self._dirs

    def is_file(self, path: Path) -> bool:
        return self._key(path) in self._files

    def read_bytes(self, path: Path) -> bytes:
        key = self._key(path)
        if key in self._dirs:
            raise IsADirectoryError(str(path))
        try:
            return self._files[key]
        except KeyError:
            raise FileNotFoundError(str(path)) from None

    def write_bytes(self, path: Path, data: bytes) -> None:
        key = self._key(path)
        if key in self._dirs:
            raise IsADirectoryError(str(path))
        if key.parent not in self._dirs:
            raise FileNotFoundError(f"No such directory: {key.parent}")
        self._files[key] = bytes(data)
