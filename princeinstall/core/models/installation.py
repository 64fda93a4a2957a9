"""
Installation models — on-disk state and probe results.

``InstallationState`` describes the managed directory (read before
install, written after install, deleted by uninstall).
``VersionInfo`` is the result of probing a globally installed
``prince`` and is never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class InstallationState:
    """Managed installation directory and its primary executable."""

    install_dir: Path
    executable_path: Path
    exists: bool

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "install_dir": str(self.install_dir),
            "executable_path": str(self.executable_path),
            "exists": self.exists,
        }


@dataclass(frozen=True)
class VersionInfo:
    """A ``prince`` command found on PATH and the version it reports."""

    command: Path
    version: str

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {"command": str(self.command), "version": self.version}
