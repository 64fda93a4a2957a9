"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from princeinstall.core.models.settings import InstallerSettings
from tests.provision.archives import PRINCE_FILES, make_tar_gz


@pytest.fixture
def prince_tarball() -> bytes:
    """A Linux-style distribution tarball with one leading directory."""
    return make_tar_gz(PRINCE_FILES)


@pytest.fixture
def settings(tmp_path: Path) -> InstallerSettings:
    """Settings pointing the managed directory into tmp_path."""
    return InstallerSettings(install_dir=tmp_path / "prince")


@pytest.fixture(autouse=True)
def _clean_prince_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of the tests."""
    for var in (
        "PRINCE_INSTALL_DIR",
        "PRINCE_VERSION",
        "PRINCE_DOWNLOAD_TIMEOUT",
        "PRINCE_INSTALL_CONFIG",
        "PRINCE_LOG_LEVEL",
        "PRINCE_LOG_FILE",
        "PRINCE_LOG_FILE_LEVEL",
        "http_proxy",
        "HTTP_PROXY",
    ):
        monkeypatch.delenv(var, raising=False)
