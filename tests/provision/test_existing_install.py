"""
Provision — Existing installation probe.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from princeinstall.core.services.provision.detection.existing_install import (
    parse_version_banner,
    probe_existing_installation,
)
from princeinstall.core.services.provision.errors import (
    NotFoundError,
    ProbeError,
    UnexpectedOutputError,
)

_MOD = "princeinstall.core.services.provision.detection.existing_install"


def _completed(stdout: str = "", returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(
        args=["prince", "--version"], returncode=returncode, stdout=stdout, stderr="",
    )


class TestBanner:
    @pytest.mark.parametrize(
        "output,version",
        [
            ("Prince 14\nCopyright 2002-2021 YesLogic Pty. Ltd.\n", "14"),
            ("Prince 14.2\n", "14.2"),
            ("Prince  15\n", "15"),
            ("some preamble\nPrince 13.5\n", "13.5"),
        ],
    )
    def test_parses(self, output: str, version: str) -> None:
        assert parse_version_banner(output) == version

    @pytest.mark.parametrize("output", ["", "prince 14\n", "Princess 14\n", "Prince version fourteen\n"])
    def test_rejects(self, output: str) -> None:
        assert parse_version_banner(output) is None


class TestProbe:
    def test_not_on_path(self) -> None:
        with patch(f"{_MOD}.shutil.which", return_value=None):
            with pytest.raises(NotFoundError):
                probe_existing_installation()

    def test_found(self) -> None:
        with patch(f"{_MOD}.shutil.which", return_value="/usr/local/bin/prince"), \
             patch(f"{_MOD}.subprocess.run", return_value=_completed("Prince 14.2\n")) as run:
            info = probe_existing_installation()
        assert info.command == Path("/usr/local/bin/prince")
        assert info.version == "14.2"
        assert run.call_args[0][0] == ["/usr/local/bin/prince", "--version"]

    def test_unexpected_output(self) -> None:
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/prince"), \
             patch(f"{_MOD}.subprocess.run", return_value=_completed("Usage: prince [OPTIONS]\n")):
            with pytest.raises(UnexpectedOutputError, match="Usage: prince"):
                probe_existing_installation()

    def test_non_zero_exit(self) -> None:
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/prince"), \
             patch(f"{_MOD}.subprocess.run", return_value=_completed("Prince 14\n", returncode=1)):
            with pytest.raises(UnexpectedOutputError):
                probe_existing_installation()

    def test_timeout(self) -> None:
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/prince"), \
             patch(f"{_MOD}.subprocess.run", side_effect=subprocess.TimeoutExpired("prince", 10)):
            with pytest.raises(UnexpectedOutputError, match="timed out"):
                probe_existing_installation()

    def test_launch_failure(self) -> None:
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/prince"), \
             patch(f"{_MOD}.subprocess.run", side_effect=PermissionError("denied")):
            with pytest.raises(UnexpectedOutputError):
                probe_existing_installation()

    def test_all_failures_are_probe_errors(self) -> None:
        assert issubclass(NotFoundError, ProbeError)
        assert issubclass(UnexpectedOutputError, ProbeError)
