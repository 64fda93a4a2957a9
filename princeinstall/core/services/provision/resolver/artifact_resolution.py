"""
L2 Resolver — Platform → artifact resolution.

Pure function over the compatibility matrix. No I/O, no network.
"""

from __future__ import annotations

import logging
import re

from princeinstall.core.models.artifact import ArtifactDescriptor
from princeinstall.core.models.platform import PlatformTriple
from princeinstall.core.services.provision.data.artifact_matrix import ARTIFACT_RULES
from princeinstall.core.services.provision.data.constants import DOWNLOAD_BASE_URL
from princeinstall.core.services.provision.domain.artifact_rules import ArtifactRule
from princeinstall.core.services.provision.errors import (
    UnknownVersionError,
    UnsupportedPlatformError,
)

logger = logging.getLogger(__name__)

_PRODUCT_VERSION_RE = re.compile(r"^\d+(?:\.\d+)?$")


def resolve_artifact(
    triple: PlatformTriple,
    product_version: str,
    *,
    base_url: str = DOWNLOAD_BASE_URL,
    rules: tuple[ArtifactRule, ...] = ARTIFACT_RULES,
) -> ArtifactDescriptor:
    """Pick the one artifact for a platform and product version.

    Args:
        triple: Host platform.
        product_version: Prince release, e.g. ``"14"``.
        base_url: Download directory the artifact filenames live under.
        rules: Compatibility matrix (override in tests).

    Returns:
        The matching ``ArtifactDescriptor``.

    Raises:
        UnknownVersionError: Malformed product version, or the OS version
            falls outside every range listed for this platform.
        UnsupportedPlatformError: No rule for this family/distro/arch.
    """
    if not _PRODUCT_VERSION_RE.match(product_version):
        raise UnknownVersionError(f"Unknown product version: {product_version!r}")

    candidates = [rule for rule in rules if rule.matches_platform(triple)]
    if not candidates:
        if triple.distro:
            raise UnsupportedPlatformError(
                f'Unsupported platform: "{triple.distro}" on {triple.os_family}/{triple.cpu_arch}'
            )
        raise UnsupportedPlatformError(
            f'Unsupported platform: "{triple.os_family}" ({triple.cpu_arch})'
        )

    for rule in candidates:
        if rule.matches_version(triple.version):
            artifact = rule.descriptor(base_url, product_version)
            logger.debug("Resolved %s → %s", triple.label, artifact.url)
            return artifact

    raise UnknownVersionError(f"Unknown os version: {triple.version!r} ({triple.label})")


def supported_platforms(rules: tuple[ArtifactRule, ...] = ARTIFACT_RULES) -> list[dict]:
    """List the matrix as plain dicts (diagnostics and docs)."""
    return [
        {
            "os_family": str(rule.os_family),
            "distro": rule.distro,
            "arch": rule.arch,
            "versions": str(rule.versions) if rule.versions else None,
            "filename": rule.filename,
            "archive_kind": str(rule.archive_kind),
        }
        for rule in rules
    ]
