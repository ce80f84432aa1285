"""Shared fixtures for service_config tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from service_config.manager import ConfigManager
from service_config.settings import LoaderSettings, reset_loader_settings
from service_config.telemetry import configure_logging

TESTDATA_DIR = Path(__file__).parent / "testdata"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep loader-related environment variables and cached settings out of tests."""
    monkeypatch.delenv("CONFIG_FILE", raising=False)
    for name in ("CONFIG_FILE", "CONFIG_NAME", "CONFIG_PATHS", "ENV_PREFIX", "LOG_LEVEL"):
        monkeypatch.delenv(f"SERVICE_CONFIG_{name}", raising=False)
    reset_loader_settings()
    yield
    reset_loader_settings()
    configure_logging(level="DEBUG")


@pytest.fixture
def testdata_dir() -> Path:
    """Directory holding sample configuration files."""
    return TESTDATA_DIR


@pytest.fixture
def manager() -> ConfigManager:
    """ConfigManager on the real disk that does not read .env files."""
    return ConfigManager(settings=LoaderSettings(load_env_files=False))
