"""
L0 Data — Module-level constants.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

import sys

# pip of the running interpreter
_PIP: list[str] = [sys.executable, "-m", "pip"]

PRODUCT_NAME = "Prince"
PRINCE_EXECUTABLE = "prince"
DEFAULT_PRODUCT_VERSION = "14"

DOWNLOAD_BASE_URL = "https://www.princexml.com/download"
USER_AGENT = "prince-install (install)"

# Architecture name normalization (Go-style names, matching the
# artifact table). Unknown machines pass through lowercased.
_IARCH_MAP: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",      # Windows reports AMD64
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",      # macOS (Darwin reports arm64)
    "armv7l": "armhf",
    "i686": "i386",
    "i586": "i386",
    "i386": "i386",
    "x86": "i386",         # 32-bit Windows
}

# Executables inside an unpacked POSIX distribution. The first one is
# the primary binary; all of them must be made executable.
POSIX_EXECUTABLES: tuple[str, ...] = (
    "lib/prince/bin/prince",
    "lib/prince/bin/princedebug",
)

# Primary binary inside an administrative install of the Windows setup.
WINDOWS_EXECUTABLE = "program files/Prince/Engine/bin/prince.exe"

# Flags for an unattended administrative install of the Windows setup.
# ``{target}`` is replaced by the destination directory.
WINDOWS_INSTALLER_ARGS: tuple[str, ...] = (
    "/s",
    "/a",
    '/vTARGETDIR="{target}" /qn',
)
