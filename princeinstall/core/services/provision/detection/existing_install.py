"""
L3 Detection — Existing installation probe.

Read-only: looks for ``prince`` on PATH, runs ``--version`` and parses
the banner. Any failure here is a ``ProbeError``, which the
orchestrator treats as "not installed, go ahead".
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path

from princeinstall.core.models.installation import VersionInfo
from princeinstall.core.services.provision.data.constants import (
    PRINCE_EXECUTABLE,
    PRODUCT_NAME,
)
from princeinstall.core.services.provision.errors import (
    NotFoundError,
    UnexpectedOutputError,
)

logger = logging.getLogger(__name__)


def banner_pattern(product: str = PRODUCT_NAME) -> re.Pattern[str]:
    """Regex for a ``<Product> <major>[.<minor>]`` banner line."""
    return re.compile(rf"^{re.escape(product)}\s+(\d+(?:\.\d+)?)", re.MULTILINE)


def parse_version_banner(output: str, product: str = PRODUCT_NAME) -> str | None:
    """Extract the version from ``--version`` output, or None."""
    match = banner_pattern(product).search(output)
    return match.group(1) if match else None


def probe_existing_installation(
    executable: str = PRINCE_EXECUTABLE,
    *,
    product: str = PRODUCT_NAME,
    timeout: int = 10,
) -> VersionInfo:
    """Find a globally installed executable and report its version.

    Args:
        executable: Command name to search for on PATH.
        product: Product name expected at the start of the banner.
        timeout: Seconds to wait for ``--version``.

    Returns:
        ``VersionInfo`` with the resolved command path and version.

    Raises:
        NotFoundError: The executable is not on PATH.
        UnexpectedOutputError: It is on PATH but ``--version`` failed
            or printed something unrecognisable.
    """
    found = shutil.which(executable)
    if not found:
        raise NotFoundError(f"{executable}(1) not found in PATH")

    try:
        result = subprocess.run(
            [found, "--version"], capture_output=True, text=True, timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise UnexpectedOutputError(
            f'{executable}(1) timed out on "--version" ({timeout}s)', cause=e,
        ) from e
    except OSError as e:
        raise UnexpectedOutputError(
            f'{executable}(1) failed on "--version": {e}', cause=e,
        ) from e

    if result.returncode != 0:
        raise UnexpectedOutputError(
            f'{executable}(1) failed on "--version" (exit {result.returncode})'
        )

    output = (result.stdout or "") + (result.stderr or "")
    version = parse_version_banner(result.stdout or "", product)
    if version is None:
        raise UnexpectedOutputError(
            f'{executable}(1) returned unexpected output on "--version":\n{output.strip()}'
        )

    logger.debug("Found %s %s at %s", product, version, found)
    return VersionInfo(command=Path(found), version=version)
