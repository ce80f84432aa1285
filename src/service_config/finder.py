"""Locate configuration files in a list of candidate directories."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from service_config.fs import FileSystem
from service_config.loader import SUPPORTED_EXTENSIONS
from service_config.telemetry import CONFIG_SEARCH, get_logger

log = get_logger(__name__)


@dataclass
class ConfigFinder:
    """Search paths for {name}.{ext} files.

    Candidates are tried path by path, then name by name, then in extension
    order, so earlier extensions win inside a single directory.
    """

    paths: Sequence[Path | str]
    names: Sequence[str] = ("config",)
    extensions: Sequence[str] = field(default_factory=lambda: SUPPORTED_EXTENSIONS)

    def candidates(self) -> Iterator[Path]:
        for path in self.paths:
            for name in self.names:
                for ext in self.extensions:
                    yield Path(path) / f"{name}.{ext}"

    def find(self, fs: FileSystem) -> Path | None:
        """Return the first candidate that is an existing file, or None."""
        log.info(CONFIG_SEARCH, paths=[str(p) for p in self.paths], names=list(self.names))
        for candidate in self.candidates():
            if fs.is_file(candidate):
                return candidate
        return None


class Finders:
    """Combine finders; the first one that finds a file wins.

    Example:
        >>> finder = Finders(
        ...     ConfigFinder(paths=["/home/user"], names=["myapp"]),
        ...     ConfigFinder(paths=["/etc/myapp"], extensions=["yaml"]),
        ... )
        >>> finder.find(fs)
    """

    def __init__(self, *finders: ConfigFinder) -> None:
        self.finders = finders

    def find(self, fs: FileSystem) -> Path | None:
        for finder in self.finders:
            found = finder.find(fs)
            if found is not None:
                return found
        return None
