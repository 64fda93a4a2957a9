"""
Domain models — platform, artifact and installation types.

Re-exported here for convenient access::

    from princeinstall.core.models import PlatformTriple, ArtifactDescriptor

``InstallerSettings`` lives in ``princeinstall.core.models.settings``.
"""

from princeinstall.core.models.artifact import ArchiveKind, ArtifactDescriptor
from princeinstall.core.models.installation import InstallationState, VersionInfo
from princeinstall.core.models.platform import OsFamily, PlatformTriple

__all__ = [
    "ArchiveKind",
    "ArtifactDescriptor",
    "InstallationState",
    "OsFamily",
    "PlatformTriple",
    "VersionInfo",
]
