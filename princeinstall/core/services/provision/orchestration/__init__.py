"""
L5 Orchestration — install/uninstall coordinators.
"""

from princeinstall.core.services.provision.orchestration.orchestrator import (  # noqa: F401
    InstallResult,
    UninstallResult,
    install_prince,
    uninstall_prince,
)
