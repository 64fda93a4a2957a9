"""
Platform model — the normalized identity of the host machine.

Derived once per run by the platform identifier and handed to the
artifact resolver. Immutable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class OsFamily(StrEnum):
    """Operating system family as far as distribution artifacts care."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    OTHER_UNIX = "other-unix"


@dataclass(frozen=True)
class PlatformTriple:
    """OS family, CPU architecture, optional distro and OS version.

    ``cpu_arch`` uses Go-style names (``amd64``, ``i386``, ``arm64``).
    ``distro`` is only set on Linux (``ubuntu``, ``debian``, ...).
    """

    os_family: OsFamily
    cpu_arch: str
    distro: str | None
    version: str

    @property
    def label(self) -> str:
        """Short human label, e.g. ``linux/amd64 ubuntu 20.04``."""
        parts = [f"{self.os_family}/{self.cpu_arch}"]
        if self.distro:
            parts.append(self.distro)
        if self.version:
            parts.append(self.version)
        return " ".join(parts)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "os_family": str(self.os_family),
            "cpu_arch": self.cpu_arch,
            "distro": self.distro,
            "version": self.version,
        }
