"""
Provision — Archive extraction and promotion into the managed directory.
"""

from __future__ import annotations

import asyncio
import io
import os
import re
import tarfile
from pathlib import Path
from unittest.mock import patch

import pytest

from princeinstall.core.models.artifact import ArchiveKind, ArtifactDescriptor
from princeinstall.core.models.platform import OsFamily
from princeinstall.core.services.provision.errors import (
    ExtractionFailedError,
    UnexpectedArchiveLayoutError,
)
from princeinstall.core.services.provision.execution.extract import (
    ExeInstallerExtractor,
    TarGzExtractor,
    ZipExtractor,
    _strip_members,
    extractor_for,
    install_archive,
    read_installation_state,
)
from princeinstall.core.services.provision.execution.subprocess_runner import CommandResult
from tests.provision.archives import PRINCE_FILES, make_tar_gz, make_zip

_MOD = "princeinstall.core.services.provision.execution.extract"

TARBALL = ArtifactDescriptor(
    url="https://www.princexml.com/download/prince-14-ubuntu20.04-amd64.tar.gz",
    archive_kind=ArchiveKind.TAR_GZ,
    strip_leading_dirs=1,
)
MAC_ZIP = ArtifactDescriptor(
    url="https://www.princexml.com/download/prince-14-macos.zip",
    archive_kind=ArchiveKind.ZIP,
)
WIN_SETUP = ArtifactDescriptor(
    url="https://www.princexml.com/download/prince-14-win64-setup.exe",
    archive_kind=ArchiveKind.EXE_INSTALLER,
)

posix_only = pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")


def _install(payload: bytes, artifact: ArtifactDescriptor, install_dir: Path,
             os_family: OsFamily = OsFamily.LINUX):
    return asyncio.run(install_archive(payload, artifact, install_dir, os_family=os_family))


class TestTarGz:
    @posix_only
    def test_strips_leading_dir_and_marks_executable(
        self, tmp_path: Path, prince_tarball: bytes,
    ) -> None:
        install_dir = tmp_path / "prince"
        state = _install(prince_tarball, TARBALL, install_dir)

        assert state.exists
        assert state.executable_path == install_dir / "lib/prince/bin/prince"
        assert os.access(state.executable_path, os.X_OK)
        assert os.access(install_dir / "lib/prince/bin/princedebug", os.X_OK)
        assert (install_dir / "lib/prince/license/license.dat").read_bytes() == b"demo"
        assert not (install_dir / "prince-14-linux").exists()

    def test_no_staging_left_behind(self, tmp_path: Path, prince_tarball: bytes) -> None:
        _install(prince_tarball, TARBALL, tmp_path / "prince")
        assert [p.name for p in tmp_path.iterdir()] == ["prince"]

    def test_replaces_stale_directory(self, tmp_path: Path, prince_tarball: bytes) -> None:
        install_dir = tmp_path / "prince"
        install_dir.mkdir()
        (install_dir / "leftover.txt").write_text("half-finished")

        state = _install(prince_tarball, TARBALL, install_dir)
        assert state.exists
        assert not (install_dir / "leftover.txt").exists()

    def test_corrupt_archive(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionFailedError, match="tarball"):
            _install(b"definitely not gzip", TARBALL, tmp_path / "prince")
        assert list(tmp_path.iterdir()) == []

    def test_missing_executable(self, tmp_path: Path) -> None:
        payload = make_tar_gz({"README": b"nothing here"})
        with pytest.raises(ExtractionFailedError, match="lib/prince/bin/prince"):
            _install(payload, TARBALL, tmp_path / "prince")
        assert list(tmp_path.iterdir()) == []

    @posix_only
    def test_hard_links_follow_the_strip(self, tmp_path: Path) -> None:
        payload = make_tar_gz(
            PRINCE_FILES,
            hardlinks={"lib/prince/bin/prince-alias": "lib/prince/bin/prince", "top-link": ""},
        )
        install_dir = tmp_path / "prince"
        _install(payload, TARBALL, install_dir)

        alias = install_dir / "lib/prince/bin/prince-alias"
        assert alias.read_bytes() == PRINCE_FILES["lib/prince/bin/prince"]
        assert os.path.samefile(alias, install_dir / "lib/prince/bin/prince")
        assert not (install_dir / "top-link").exists()

    def test_without_strip(self, tmp_path: Path) -> None:
        payload = make_tar_gz(PRINCE_FILES)
        dest = tmp_path / "out"
        asyncio.run(TarGzExtractor(0).extract(payload, dest))
        assert (dest / "prince-14-linux/lib/prince/bin/prince").is_file()


class TestZip:
    @posix_only
    def test_single_top_level_directory(self, tmp_path: Path) -> None:
        payload = make_zip({f"prince-14-macos/{name}": data for name, data in PRINCE_FILES.items()})
        install_dir = tmp_path / "prince"
        state = _install(payload, MAC_ZIP, install_dir, OsFamily.MACOS)

        assert state.exists
        assert os.access(state.executable_path, os.X_OK)
        assert [p.name for p in tmp_path.iterdir()] == ["prince"]

    def test_two_top_level_entries(self, tmp_path: Path) -> None:
        payload = make_zip({
            "prince-14-macos/lib/prince/bin/prince": b"bin",
            "README.txt": b"stray",
        })
        with pytest.raises(UnexpectedArchiveLayoutError, match="2 entries"):
            _install(payload, MAC_ZIP, tmp_path / "prince", OsFamily.MACOS)
        assert list(tmp_path.iterdir()) == []

    def test_single_file_is_not_a_directory(self, tmp_path: Path) -> None:
        payload = make_zip({"prince": b"bin"})
        dest = tmp_path / "out"
        with pytest.raises(UnexpectedArchiveLayoutError):
            asyncio.run(ZipExtractor().extract(payload, dest))
        assert not dest.exists()

    def test_corrupt_zip(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionFailedError, match="unzip"):
            _install(b"PK-not-really", MAC_ZIP, tmp_path / "prince", OsFamily.MACOS)


class TestExeInstaller:
    @staticmethod
    def _target(cmd: list[str]) -> Path:
        match = re.search(r'TARGETDIR="([^"]+)"', cmd[-1])
        assert match, cmd
        return Path(match.group(1))

    def test_runs_setup_unattended(self, tmp_path: Path) -> None:
        seen: dict = {}

        async def fake_run(cmd, *, timeout=None, **kwargs):
            seen["cmd"] = cmd
            seen["setup_present"] = Path(cmd[0]).is_file()
            exe = self._target(cmd) / "program files/Prince/Engine/bin/prince.exe"
            exe.parent.mkdir(parents=True)
            exe.write_bytes(b"MZ")
            return CommandResult(returncode=0)

        install_dir = tmp_path / "prince"
        with patch(f"{_MOD}.run_command", side_effect=fake_run):
            state = _install(b"MZ-setup", WIN_SETUP, install_dir, OsFamily.WINDOWS)

        assert state.exists
        assert state.executable_path == install_dir / "program files/Prince/Engine/bin/prince.exe"
        assert seen["setup_present"]
        assert seen["cmd"][1:3] == ["/s", "/a"]
        assert seen["cmd"][3].endswith(" /qn")
        assert not Path(seen["cmd"][0]).exists()

    def test_failed_setup(self, tmp_path: Path) -> None:
        seen: dict = {}

        async def fake_run(cmd, *, timeout=None, **kwargs):
            seen["setup"] = Path(cmd[0])
            return CommandResult(returncode=1603, stdout="", stderr="fatal error during installation")

        with patch(f"{_MOD}.run_command", side_effect=fake_run):
            with pytest.raises(ExtractionFailedError, match="STDERR: fatal error"):
                _install(b"MZ-setup", WIN_SETUP, tmp_path / "prince", OsFamily.WINDOWS)

        assert not seen["setup"].exists()
        assert list(tmp_path.iterdir()) == []


class TestLayout:
    def test_extractor_for(self) -> None:
        assert isinstance(extractor_for(TARBALL), TarGzExtractor)
        assert extractor_for(TARBALL).strip_leading_dirs == 1
        assert isinstance(extractor_for(MAC_ZIP), ZipExtractor)
        assert isinstance(extractor_for(WIN_SETUP), ExeInstallerExtractor)

    def test_state_of_missing_directory(self, tmp_path: Path) -> None:
        state = read_installation_state(tmp_path / "prince", OsFamily.LINUX)
        assert not state.exists
        assert state.executable_path == tmp_path / "prince/lib/prince/bin/prince"

    def test_windows_layout(self, tmp_path: Path) -> None:
        state = read_installation_state(tmp_path, OsFamily.WINDOWS)
        assert state.executable_path.name == "prince.exe"


class TestStripMembers:
    @staticmethod
    def _members(payload: bytes) -> list[tarfile.TarInfo]:
        with tarfile.open(fileobj=io.BytesIO(payload), mode="r:gz") as tar:
            return tar.getmembers()

    def test_rewrites_names_and_link_targets(self) -> None:
        payload = make_tar_gz(
            {"lib/prince/bin/prince": b"bin"},
            hardlinks={"lib/prince/bin/prince-alias": "lib/prince/bin/prince"},
        )
        kept = _strip_members(self._members(payload), 1)
        by_name = {m.name: m for m in kept}
        assert set(by_name) == {"lib/prince/bin/prince", "lib/prince/bin/prince-alias"}
        assert by_name["lib/prince/bin/prince-alias"].linkname == "lib/prince/bin/prince"

    def test_drops_link_to_stripped_directory(self) -> None:
        payload = make_tar_gz({"README": b"x"}, hardlinks={"top-link": ""})
        kept = _strip_members(self._members(payload), 1)
        assert [m.name for m in kept] == ["README"]

    def test_zero_strip_keeps_everything(self) -> None:
        members = self._members(make_tar_gz({"README": b"x"}))
        assert _strip_members(members, 0) == members
