"""
L1 Domain — Artifact rule types (pure).

One ``ArtifactRule`` is one row of the compatibility matrix: a
predicate on the platform triple plus the artifact it maps to.
No I/O, no subprocess.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from princeinstall.core.models.artifact import ArchiveKind, ArtifactDescriptor
from princeinstall.core.models.platform import OsFamily, PlatformTriple

_MAJOR_RE = re.compile(r"^(\d+)(?:\.\d+)*$")


def os_major(version: str) -> int | None:
    """Leading numeric component of an OS version (``"20.04"`` → 20)."""
    match = _MAJOR_RE.match(version.strip())
    if not match:
        return None
    return int(match.group(1))


@dataclass(frozen=True)
class VersionRange:
    """Inclusive range of OS major versions, e.g. Ubuntu 18–19."""

    first: int
    last: int

    def contains(self, version: str) -> bool:
        major = os_major(version)
        return major is not None and self.first <= major <= self.last

    def __str__(self) -> str:
        if self.first == self.last:
            return str(self.first)
        return f"{self.first}-{self.last}"


@dataclass(frozen=True)
class ArtifactRule:
    """Map platforms matching the predicate to one artifact.

    ``distro``, ``arch`` and ``versions`` set to ``None`` match anything.
    ``filename`` is a template; ``{version}`` is the product version.
    """

    os_family: OsFamily
    filename: str
    archive_kind: ArchiveKind
    distro: str | None = None
    arch: str | None = None
    versions: VersionRange | None = None
    strip_leading_dirs: int = 0

    def matches_platform(self, triple: PlatformTriple) -> bool:
        """Family, distro and arch match (the OS version is not checked)."""
        if triple.os_family != self.os_family:
            return False
        if self.distro is not None and triple.distro != self.distro:
            return False
        if self.arch is not None and triple.cpu_arch != self.arch:
            return False
        return True

    def matches_version(self, version: str) -> bool:
        return self.versions is None or self.versions.contains(version)

    def descriptor(self, base_url: str, product_version: str) -> ArtifactDescriptor:
        name = self.filename.format(version=product_version)
        return ArtifactDescriptor(
            url=f"{base_url.rstrip('/')}/{name}",
            archive_kind=self.archive_kind,
            strip_leading_dirs=self.strip_leading_dirs,
        )
