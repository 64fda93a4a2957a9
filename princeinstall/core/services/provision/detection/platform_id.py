"""
L3 Detection — Platform identification.

Read-only: derives the ``PlatformTriple`` for the running host from
``platform`` and ``/etc/os-release``.

On Linux the distro and version come from a single platform
identification string ``<arch>-<distro><version>`` (for example
``amd64-ubuntu20.04``). A string that does not match the pattern is a
fatal error, not something to guess around.
"""

from __future__ import annotations

import logging
import platform
import re
from pathlib import Path

from princeinstall.core.models.platform import OsFamily, PlatformTriple
from princeinstall.core.services.provision.data.constants import _IARCH_MAP
from princeinstall.core.services.provision.errors import UnsupportedPlatformError

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")

_SYSTEM_MAP: dict[str, OsFamily] = {
    "linux": OsFamily.LINUX,
    "darwin": OsFamily.MACOS,
    "windows": OsFamily.WINDOWS,
}

_PLATFORM_ID_RE = re.compile(
    r"^(?P<arch>[a-z0-9][a-z0-9_]*)-(?P<distro>[a-z]{1,10})(?P<version>\d{1,5}(?:\.\d{1,5}){0,2})$"
)


def normalize_arch(machine: str) -> str:
    """Normalize a raw machine name (``x86_64`` → ``amd64``)."""
    key = machine.strip()
    return _IARCH_MAP.get(key, _IARCH_MAP.get(key.lower(), key.lower()))


def read_os_release(path: Path = OS_RELEASE_PATH) -> dict[str, str]:
    """Parse an os-release file into a ``KEY → value`` dict.

    Returns an empty dict when the file is missing or unreadable.
    """
    info: dict[str, str] = {}
    try:
        with open(path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                info[key.strip()] = value.strip().strip('"').strip("'")
    except (FileNotFoundError, OSError):
        return {}
    return info


def platform_id_string(arch: str, distro: str, version: str) -> str:
    """Compose the lowercase ``<arch>-<distro><version>`` identifier."""
    return f"{arch}-{distro}{version}".lower()


def parse_platform_id(text: str) -> tuple[str, str, str]:
    """Split a platform identifier into ``(arch, distro, version)``.

    Raises:
        UnsupportedPlatformError: If ``text`` does not match the pattern.
    """
    match = _PLATFORM_ID_RE.match(text.strip().lower())
    if not match:
        raise UnsupportedPlatformError(
            f"Cannot parse platform identification string: {text!r}"
        )
    return match.group("arch"), match.group("distro"), match.group("version")


def detect_os_family(system: str | None = None) -> OsFamily:
    """Map ``platform.system()`` to an ``OsFamily``.

    Raises:
        UnsupportedPlatformError: For anything but Linux, macOS, Windows.
    """
    raw = system if system is not None else platform.system()
    family = _SYSTEM_MAP.get(raw.lower())
    if family is None:
        raise UnsupportedPlatformError(f"Unsupported platform: {raw or 'unknown'!r}")
    return family


def identify_platform(os_release_path: Path = OS_RELEASE_PATH) -> PlatformTriple:
    """Detect and return the platform triple of the running host.

    Raises:
        UnsupportedPlatformError: If the OS family is unsupported or the
            distro/version cannot be determined.
    """
    family = detect_os_family()
    arch = normalize_arch(platform.machine())

    if family is OsFamily.LINUX:
        release = read_os_release(os_release_path)
        distro_id = release.get("ID", "")
        version_id = release.get("VERSION_ID", "")
        if not distro_id or not version_id:
            raise UnsupportedPlatformError(
                f"Cannot determine Linux distribution from {os_release_path}"
            )
        arch, distro, version = parse_platform_id(
            platform_id_string(arch, distro_id, version_id)
        )
        triple = PlatformTriple(family, arch, distro, version)
    elif family is OsFamily.MACOS:
        version = platform.mac_ver()[0]
        if not version:
            raise UnsupportedPlatformError("Cannot determine macOS version")
        triple = PlatformTriple(family, arch, None, version)
    else:
        triple = PlatformTriple(family, arch, None, platform.version())

    logger.debug("Identified platform: %s", triple.label)
    return triple
