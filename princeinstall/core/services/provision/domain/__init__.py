"""
L1 Domain — pure logic. No I/O, no subprocess.
"""

from princeinstall.core.services.provision.domain.artifact_rules import (  # noqa: F401
    ArtifactRule,
    VersionRange,
    os_major,
)
from princeinstall.core.services.provision.domain.download_helpers import (  # noqa: F401
    DownloadProgress,
    _fmt_size,
)
