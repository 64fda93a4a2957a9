"""
L3 Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
Subprocess calls, file reads, env var reads — all read-only.
"""

from princeinstall.core.services.provision.detection.existing_install import (  # noqa: F401
    parse_version_banner,
    probe_existing_installation,
)
from princeinstall.core.services.provision.detection.platform_id import (  # noqa: F401
    detect_os_family,
    identify_platform,
    normalize_arch,
    parse_platform_id,
    platform_id_string,
    read_os_release,
)
from princeinstall.core.services.provision.detection.proxy import (  # noqa: F401
    ProxyConfig,
    normalize_proxy_url,
    query_pip_proxy,
    resolve_proxy,
)
