"""
Tests for domain models — platform, artifact, installation, settings.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from princeinstall.core.models import (
    ArchiveKind,
    ArtifactDescriptor,
    InstallationState,
    OsFamily,
    PlatformTriple,
    VersionInfo,
)
from princeinstall.core.models.settings import InstallerSettings, default_install_dir


class TestPlatformTriple:
    def test_label_linux(self):
        triple = PlatformTriple(OsFamily.LINUX, "amd64", "debian", "10")
        assert triple.label == "linux/amd64 debian 10"

    def test_label_macos(self):
        triple = PlatformTriple(OsFamily.MACOS, "arm64", None, "14.2")
        assert triple.label == "macos/arm64 14.2"

    def test_to_dict(self):
        triple = PlatformTriple(OsFamily.WINDOWS, "amd64", None, "10.0")
        assert triple.to_dict() == {
            "os_family": "windows", "cpu_arch": "amd64", "distro": None, "version": "10.0",
        }

    def test_frozen(self):
        triple = PlatformTriple(OsFamily.LINUX, "amd64", "ubuntu", "20.04")
        with pytest.raises(AttributeError):
            triple.version = "22.04"


class TestArtifactDescriptor:
    def test_filename_from_url(self):
        artifact = ArtifactDescriptor(
            url="https://www.princexml.com/download/prince-14-macos.zip",
            archive_kind=ArchiveKind.ZIP,
        )
        assert artifact.filename == "prince-14-macos.zip"
        assert artifact.to_dict()["archive_kind"] == "zip"
        assert artifact.strip_leading_dirs == 0


class TestInstallation:
    def test_to_dict(self, tmp_path: Path):
        state = InstallationState(tmp_path, tmp_path / "bin/prince", False)
        assert state.to_dict()["exists"] is False
        info = VersionInfo(Path("/usr/bin/prince"), "14")
        assert info.to_dict() == {"command": "/usr/bin/prince", "version": "14"}


class TestInstallerSettings:
    def test_defaults(self):
        settings = InstallerSettings()
        assert settings.product_version == "14"
        assert settings.install_dir == default_install_dir()
        assert settings.install_dir.name == "prince"
        assert settings.download_base_url == "https://www.princexml.com/download"

    def test_numeric_version_coerced(self):
        assert InstallerSettings(product_version=15).product_version == "15"

    @pytest.mark.parametrize("bad", ["latest", "14.x", "", "1.2.3"])
    def test_bad_product_version(self, bad):
        with pytest.raises(ValidationError):
            InstallerSettings(product_version=bad)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            InstallerSettings(download_timeout=0)
