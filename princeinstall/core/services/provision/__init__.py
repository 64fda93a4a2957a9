"""
Prince provisioning service — package re-exports.

Each symbol lives in its single-responsibility module inside the
appropriate layer (data → domain → resolver → detection → execution →
orchestration)::

    from princeinstall.core.services.provision import install_prince
"""

# ── Errors ──
from princeinstall.core.services.provision.errors import (  # noqa: F401
    DownloadFailedError,
    ExtractionFailedError,
    IOFailureError,
    NotFoundError,
    PrinceExecutionError,
    ProbeError,
    ProvisionError,
    UnexpectedArchiveLayoutError,
    UnexpectedOutputError,
    UnknownVersionError,
    UnsupportedPlatformError,
)

# ── L2: Resolver ──
from princeinstall.core.services.provision.resolver.artifact_resolution import (  # noqa: F401
    resolve_artifact,
)

# ── L3: Detection ──
from princeinstall.core.services.provision.detection.platform_id import (  # noqa: F401
    identify_platform,
)
from princeinstall.core.services.provision.detection.existing_install import (  # noqa: F401
    probe_existing_installation,
)
from princeinstall.core.services.provision.detection.proxy import (  # noqa: F401
    resolve_proxy,
)

# ── L4: Execution ──
from princeinstall.core.services.provision.execution.download import (  # noqa: F401
    fetch_artifact,
)
from princeinstall.core.services.provision.execution.extract import (  # noqa: F401
    install_archive,
    read_installation_state,
)

# ── L5: Orchestration ──
from princeinstall.core.services.provision.orchestration.orchestrator import (  # noqa: F401
    InstallResult,
    UninstallResult,
    install_prince,
    uninstall_prince,
)
