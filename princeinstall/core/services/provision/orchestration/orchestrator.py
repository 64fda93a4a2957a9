"""
L5 Orchestration — Install and uninstall.

    install:   probe PATH → managed dir check → identify platform →
               resolve artifact → fetch → extract → done
    uninstall: remove the managed directory if it exists

Probe failures are expected and mean "go install". Every other failure
propagates as the ``ProvisionError`` that caused it; nothing partial is
ever left looking like a valid installation.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Literal

import httpx

from princeinstall.core.models.artifact import ArtifactDescriptor
from princeinstall.core.models.installation import InstallationState, VersionInfo
from princeinstall.core.models.platform import PlatformTriple
from princeinstall.core.services.provision.data.constants import PRODUCT_NAME
from princeinstall.core.services.provision.detection.existing_install import (
    probe_existing_installation,
)
from princeinstall.core.services.provision.detection.platform_id import (
    detect_os_family,
    identify_platform,
)
from princeinstall.core.services.provision.detection.proxy import resolve_proxy
from princeinstall.core.services.provision.domain.download_helpers import _fmt_size
from princeinstall.core.services.provision.errors import ProbeError
from princeinstall.core.services.provision.execution.download import (
    ProgressCallback,
    fetch_artifact,
)
from princeinstall.core.services.provision.execution.extract import (
    install_archive,
    read_installation_state,
)
from princeinstall.core.services.provision.resolver.artifact_resolution import (
    resolve_artifact,
)

if TYPE_CHECKING:
    from princeinstall.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

InstallOutcome = Literal["existing", "already-installed", "installed"]


@dataclass
class InstallResult:
    """What ``install_prince`` did."""

    outcome: InstallOutcome
    existing: VersionInfo | None = None
    installation: InstallationState | None = None
    platform: PlatformTriple | None = None
    artifact: ArtifactDescriptor | None = None
    size_bytes: int = 0

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "outcome": self.outcome,
            "existing": self.existing.to_dict() if self.existing else None,
            "installation": self.installation.to_dict() if self.installation else None,
            "platform": self.platform.to_dict() if self.platform else None,
            "artifact": self.artifact.to_dict() if self.artifact else None,
            "size_bytes": self.size_bytes,
        }


@dataclass
class UninstallResult:
    """What ``uninstall_prince`` did."""

    install_dir: Path
    removed: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "install_dir": str(self.install_dir),
            "removed": self.removed,
            "error": self.error,
        }


def _step(on_step: Callable[[str], None] | None, message: str) -> None:
    logger.info(message)
    if on_step is not None:
        on_step(message)


async def install_prince(
    settings: InstallerSettings,
    *,
    platform: PlatformTriple | None = None,
    on_progress: ProgressCallback | None = None,
    on_step: Callable[[str], None] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> InstallResult:
    """Make a ``prince`` executable available.

    Args:
        settings: Install directory, product version, network settings.
        platform: Skip detection and use this triple.
        on_progress: Download progress callback (see ``fetch_artifact``).
        on_step: Receives one human-readable line per pipeline stage.
        transport: Custom httpx transport (tests).

    Returns:
        ``InstallResult`` describing which path was taken.

    Raises:
        ProvisionError: Any non-probe failure, unchanged.
    """
    _step(on_step, f"checking for globally installed {PRODUCT_NAME}")
    try:
        found = await asyncio.to_thread(
            probe_existing_installation, settings.executable, product=PRODUCT_NAME,
        )
    except ProbeError as e:
        logger.info("No usable global installation: %s", e)
    else:
        _step(on_step, f"found {settings.executable}(1) command: {found.command}")
        _step(on_step, f"found {settings.executable}(1) version: {found.version}")
        return InstallResult(outcome="existing", existing=found)

    os_family = platform.os_family if platform else detect_os_family()
    current = read_installation_state(settings.install_dir, os_family)
    if current.exists:
        _step(on_step, f"local {PRODUCT_NAME} installation already present: {current.executable_path}")
        return InstallResult(outcome="already-installed", installation=current, platform=platform)

    triple = platform or identify_platform()
    artifact = resolve_artifact(
        triple, settings.product_version, base_url=settings.download_base_url,
    )

    _step(on_step, f"downloading {PRODUCT_NAME} distribution ({triple.label})")
    proxy = await asyncio.to_thread(resolve_proxy, settings.proxy_env_var)
    payload = await fetch_artifact(
        artifact.url,
        proxy=proxy,
        timeout=settings.download_timeout,
        user_agent=settings.user_agent,
        on_progress=on_progress,
        transport=transport,
    )
    _step(on_step, f"download: {_fmt_size(len(payload))} received")

    _step(on_step, f"locally unpacking {PRODUCT_NAME} distribution")
    state = await install_archive(
        payload, artifact, settings.install_dir, os_family=triple.os_family,
    )
    _step(on_step, f"local {PRODUCT_NAME} installation now available: {state.executable_path}")

    return InstallResult(
        outcome="installed",
        installation=state,
        platform=triple,
        artifact=artifact,
        size_bytes=len(payload),
    )


def uninstall_prince(settings: InstallerSettings) -> UninstallResult:
    """Remove the managed installation directory.

    A missing directory is a successful no-op. Removal errors are
    reported in the result, never raised.
    """
    install_dir = settings.install_dir
    if not install_dir.exists():
        logger.info("Nothing to uninstall at %s", install_dir)
        return UninstallResult(install_dir=install_dir)

    logger.info("Deleting locally unpacked %s distribution at %s", PRODUCT_NAME, install_dir)
    try:
        shutil.rmtree(install_dir)
    except OSError as e:
        logger.error("Cannot remove %s: %s", install_dir, e)
        return UninstallResult(install_dir=install_dir, error=str(e))

    return UninstallResult(install_dir=install_dir, removed=True)
