"""
L0 Data — pure data: constants and the artifact compatibility matrix.
"""

from princeinstall.core.services.provision.data.artifact_matrix import (  # noqa: F401
    ARTIFACT_RULES,
)
from princeinstall.core.services.provision.data.constants import (  # noqa: F401
    DEFAULT_PRODUCT_VERSION,
    DOWNLOAD_BASE_URL,
    POSIX_EXECUTABLES,
    PRINCE_EXECUTABLE,
    PRODUCT_NAME,
    WINDOWS_EXECUTABLE,
)
