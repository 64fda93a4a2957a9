"""
L0 Data — PrinceXML artifact compatibility matrix.

Source: https://www.princexml.com/download/
Closed table: a platform missing here is unsupported. Adding a
platform means adding a row, not code.
"""

from __future__ import annotations

from princeinstall.core.models.artifact import ArchiveKind
from princeinstall.core.models.platform import OsFamily
from princeinstall.core.services.provision.domain.artifact_rules import (
    ArtifactRule,
    VersionRange,
)

_TGZ = ArchiveKind.TAR_GZ


def _linux(distro: str, arch: str, first: int, last: int, filename: str) -> ArtifactRule:
    # Linux tarballs wrap everything in a versioned top-level directory.
    return ArtifactRule(
        os_family=OsFamily.LINUX,
        distro=distro,
        arch=arch,
        versions=VersionRange(first, last),
        filename=filename,
        archive_kind=_TGZ,
        strip_leading_dirs=1,
    )


ARTIFACT_RULES: tuple[ArtifactRule, ...] = (
    # ── Windows: arch only ──
    ArtifactRule(
        os_family=OsFamily.WINDOWS, arch="amd64",
        filename="prince-{version}-win64-setup.exe",
        archive_kind=ArchiveKind.EXE_INSTALLER,
    ),
    ArtifactRule(
        os_family=OsFamily.WINDOWS, arch="i386",
        filename="prince-{version}-win32-setup.exe",
        archive_kind=ArchiveKind.EXE_INSTALLER,
    ),
    # ── macOS: one universal archive ──
    ArtifactRule(
        os_family=OsFamily.MACOS,
        filename="prince-{version}-macos.zip",
        archive_kind=ArchiveKind.ZIP,
    ),
    # ── Ubuntu ──
    _linux("ubuntu", "amd64", 14, 15, "prince-{version}-ubuntu14.04-amd64.tar.gz"),
    _linux("ubuntu", "amd64", 16, 17, "prince-{version}-ubuntu16.04-amd64.tar.gz"),
    _linux("ubuntu", "amd64", 18, 19, "prince-{version}-ubuntu18.04-amd64.tar.gz"),
    _linux("ubuntu", "amd64", 20, 21, "prince-{version}-ubuntu20.04-amd64.tar.gz"),
    _linux("ubuntu", "i386", 14, 15, "prince-{version}-ubuntu14.04-i386.tar.gz"),
    _linux("ubuntu", "i386", 16, 17, "prince-{version}-ubuntu16.04-i386.tar.gz"),
    _linux("ubuntu", "i386", 18, 19, "prince-{version}-ubuntu18.04-i386.tar.gz"),
    # ── Debian ──
    _linux("debian", "amd64", 10, 10, "prince-{version}-debian10-amd64.tar.gz"),
    _linux("debian", "amd64", 9, 9, "prince-{version}-debian9-amd64.tar.gz"),
    _linux("debian", "amd64", 8, 8, "prince-{version}-debian8-amd64.tar.gz"),
    # ── CentOS (vendor names the arch x86_64) ──
    _linux("centos", "amd64", 8, 8, "prince-{version}-centos8-x86_64.tar.gz"),
    _linux("centos", "amd64", 7, 7, "prince-{version}-centos7-x86_64.tar.gz"),
    _linux("centos", "amd64", 6, 6, "prince-{version}-centos6-x86_64.tar.gz"),
)
