"""
L4 Execution — everything that downloads, writes files or spawns processes.
"""

from princeinstall.core.services.provision.execution.download import (  # noqa: F401
    fetch_artifact,
)
from princeinstall.core.services.provision.execution.extract import (  # noqa: F401
    ArchiveExtractor,
    ExeInstallerExtractor,
    TarGzExtractor,
    ZipExtractor,
    extractor_for,
    grant_execute,
    install_archive,
    read_installation_state,
)
from princeinstall.core.services.provision.execution.subprocess_runner import (  # noqa: F401
    CommandResult,
    run_command,
)
