"""
Artifact model — one downloadable PrinceXML distribution package.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ArchiveKind(StrEnum):
    """Container format of a distribution artifact."""

    TAR_GZ = "tar-gz"
    ZIP = "zip"
    EXE_INSTALLER = "exe-installer"


@dataclass(frozen=True)
class ArtifactDescriptor:
    """Everything needed to download and unpack one artifact."""

    url: str
    archive_kind: ArchiveKind
    strip_leading_dirs: int = 0

    @property
    def filename(self) -> str:
        """Last path segment of the URL."""
        return self.url.rstrip("/").rsplit("/", 1)[-1]

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "url": self.url,
            "archive_kind": str(self.archive_kind),
            "strip_leading_dirs": self.strip_leading_dirs,
        }
