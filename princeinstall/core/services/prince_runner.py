"""
Prince runner — locate the provisioned binary and run it.

Thin wrapper used by callers that render documents. Argument
construction for rendering is the caller's business; this module only
finds the executable, pipes stdio and turns a non-zero exit into an
exception.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from princeinstall.core.services.provision.detection.platform_id import detect_os_family
from princeinstall.core.services.provision.errors import NotFoundError, PrinceExecutionError
from princeinstall.core.services.provision.execution.extract import read_installation_state
from princeinstall.core.services.provision.execution.subprocess_runner import (
    run_command,
    tail,
)

if TYPE_CHECKING:
    from princeinstall.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrinceOutput:
    """Captured output of a successful ``prince`` run."""

    stdout: str
    stderr: str


def locate_prince(settings: InstallerSettings) -> Path:
    """Return the executable to run.

    The managed installation wins; otherwise ``prince`` on PATH.

    Raises:
        NotFoundError: Neither exists.
    """
    state = read_installation_state(settings.install_dir, detect_os_family())
    if state.exists:
        return state.executable_path

    found = shutil.which(settings.executable)
    if found:
        return Path(found)

    raise NotFoundError(
        f"{settings.executable}(1) not found: no local installation in "
        f"{settings.install_dir} and nothing on PATH"
    )


async def run_prince(
    executable: Path,
    args: Sequence[str],
    *,
    input_data: bytes | None = None,
    timeout: float | None = None,
) -> PrinceOutput:
    """Run ``executable`` with ``args`` and capture its output.

    Args:
        executable: Path returned by ``locate_prince``.
        args: Command-line arguments.
        input_data: Bytes piped to stdin (e.g. a document read from ``-``).
        timeout: Seconds before the child is killed.

    Raises:
        PrinceExecutionError: Launch failure, timeout or non-zero exit.
    """
    result = await run_command([str(executable), *args], input_data=input_data, timeout=timeout)
    if not result.ok:
        message = f"{executable.name} failed: {result.describe()}"
        if result.stderr.strip():
            message += f"\n{tail(result.stderr).strip()}"
        raise PrinceExecutionError(
            message,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return PrinceOutput(stdout=result.stdout, stderr=result.stderr)
