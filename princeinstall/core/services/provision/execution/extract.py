"""
L4 Execution — Archive extraction and installation.

One extractor per archive kind behind ``ArchiveExtractor``:

    tar-gz         decompress, strip leading path segments, extract
    zip            extract aside, promote the single top-level directory
    exe-installer  run the vendor setup unattended into the target

``install_archive`` wraps whichever extractor applies in a staging
directory next to the managed directory. Only a complete tree with
executable permissions set is renamed into place; every failure
discards the staging area.
"""

from __future__ import annotations

import asyncio
import io
import logging
import os
import shutil
import tarfile
import tempfile
import zipfile
import zlib
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from princeinstall.core.models.artifact import ArchiveKind, ArtifactDescriptor
from princeinstall.core.models.installation import InstallationState
from princeinstall.core.models.platform import OsFamily
from princeinstall.core.services.provision.data.constants import (
    POSIX_EXECUTABLES,
    WINDOWS_EXECUTABLE,
    WINDOWS_INSTALLER_ARGS,
)
from princeinstall.core.services.provision.errors import (
    ExtractionFailedError,
    IOFailureError,
    UnexpectedArchiveLayoutError,
)
from princeinstall.core.services.provision.execution.subprocess_runner import (
    run_command,
    tail,
)

logger = logging.getLogger(__name__)

_CORRUPT_ARCHIVE_ERRORS = (tarfile.TarError, zipfile.BadZipFile, EOFError, zlib.error)


# ── Layout ──────────────────────────────────────────────────────


def executable_paths(install_dir: Path, os_family: OsFamily) -> list[Path]:
    """Executables of an installation; the first is the primary binary."""
    if os_family is OsFamily.WINDOWS:
        return [install_dir / WINDOWS_EXECUTABLE]
    return [install_dir / rel for rel in POSIX_EXECUTABLES]


def read_installation_state(install_dir: Path, os_family: OsFamily) -> InstallationState:
    """Report what is on disk for a managed installation directory."""
    primary = executable_paths(install_dir, os_family)[0]
    return InstallationState(
        install_dir=install_dir,
        executable_path=primary,
        exists=primary.is_file(),
    )


def grant_execute(paths: list[Path]) -> None:
    """Set mode 0755 on each path (POSIX only).

    Raises:
        IOFailureError: A path is missing or chmod fails.
    """
    if os.name != "posix":
        return
    for path in paths:
        try:
            os.chmod(path, 0o755)
        except OSError as e:
            raise IOFailureError(f"Cannot make {path} executable: {e}", cause=e) from e


# ── Extractors ──────────────────────────────────────────────────


class ArchiveExtractor(ABC):
    """Unpack an artifact payload into ``dest``.

    ``dest`` does not exist yet; its parent does. After ``extract``
    returns, ``dest`` holds the distribution root.
    """

    kind: ArchiveKind

    @abstractmethod
    async def extract(self, payload: bytes, dest: Path) -> None:
        """Unpack ``payload`` so that ``dest`` is the distribution root."""


def _strip_members(
    members: list[tarfile.TarInfo], strip: int,
) -> list[tarfile.TarInfo]:
    """Drop the first ``strip`` path segments from every member name."""
    if strip <= 0:
        return members
    kept: list[tarfile.TarInfo] = []
    for member in members:
        parts = PurePosixPath(member.name).parts
        if len(parts) <= strip:
            continue
        member.name = "/".join(parts[strip:])
        if member.islnk():
            link_parts = PurePosixPath(member.linkname).parts
            if len(link_parts) <= strip:
                continue
            member.linkname = "/".join(link_parts[strip:])
        kept.append(member)
    return kept


class TarGzExtractor(ArchiveExtractor):
    """gzip-compressed tarball with a configurable strip count."""

    kind = ArchiveKind.TAR_GZ

    def __init__(self, strip_leading_dirs: int = 0) -> None:
        self.strip_leading_dirs = strip_leading_dirs

    async def extract(self, payload: bytes, dest: Path) -> None:
        await asyncio.to_thread(self._extract, payload, dest)

    def _extract(self, payload: bytes, dest: Path) -> None:
        dest.mkdir()
        try:
            with tarfile.open(fileobj=io.BytesIO(payload), mode="r:gz") as tar:
                members = _strip_members(tar.getmembers(), self.strip_leading_dirs)
                tar.extractall(dest, members=members, filter="data")
        except _CORRUPT_ARCHIVE_ERRORS as e:
            raise ExtractionFailedError(f"failed to extract tarball: {e}", cause=e) from e
        logger.debug("Extracted %d tar members into %s", len(members), dest)


class ZipExtractor(ArchiveExtractor):
    """Zip archive whose content sits in exactly one top-level directory."""

    kind = ArchiveKind.ZIP

    async def extract(self, payload: bytes, dest: Path) -> None:
        await asyncio.to_thread(self._extract, payload, dest)

    def _extract(self, payload: bytes, dest: Path) -> None:
        with tempfile.TemporaryDirectory(prefix=".unzip-", dir=dest.parent) as tmp:
            unpacked = Path(tmp)
            try:
                with zipfile.ZipFile(io.BytesIO(payload)) as zf:
                    zf.extractall(unpacked)
            except _CORRUPT_ARCHIVE_ERRORS as e:
                raise ExtractionFailedError(f"failed to unzip archive: {e}", cause=e) from e

            entries = list(unpacked.iterdir())
            if len(entries) != 1 or not entries[0].is_dir():
                names = sorted(p.name for p in entries)
                raise UnexpectedArchiveLayoutError(
                    "Expected exactly one top-level directory in zip archive, "
                    f"found {len(entries)} entries: {names[:10]}"
                )
            try:
                os.replace(entries[0], dest)
            except OSError as e:
                raise IOFailureError(f"Cannot move {entries[0]} to {dest}: {e}", cause=e) from e


class ExeInstallerExtractor(ArchiveExtractor):
    """Windows self-extracting setup, run unattended into ``dest``."""

    kind = ArchiveKind.EXE_INSTALLER

    def __init__(self, timeout: float | None = 600.0) -> None:
        self.timeout = timeout

    async def extract(self, payload: bytes, dest: Path) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix="prince-setup-", suffix=".exe", dir=dest.parent)
        setup = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            args = [arg.format(target=dest.resolve()) for arg in WINDOWS_INSTALLER_ARGS]
            result = await run_command([str(setup), *args], timeout=self.timeout)
        finally:
            setup.unlink(missing_ok=True)

        if not result.ok:
            details = [f"failed to extract: {result.describe()}"]
            if result.stdout.strip():
                details.append(f"STDOUT: {tail(result.stdout).strip()}")
            if result.stderr.strip():
                details.append(f"STDERR: {tail(result.stderr).strip()}")
            raise ExtractionFailedError("\n".join(details))


def extractor_for(artifact: ArtifactDescriptor) -> ArchiveExtractor:
    """Pick the extractor implementation for an artifact's archive kind."""
    if artifact.archive_kind is ArchiveKind.TAR_GZ:
        return TarGzExtractor(artifact.strip_leading_dirs)
    if artifact.archive_kind is ArchiveKind.ZIP:
        return ZipExtractor()
    if artifact.archive_kind is ArchiveKind.EXE_INSTALLER:
        return ExeInstallerExtractor()
    raise ExtractionFailedError(f"Unknown archive kind: {artifact.archive_kind}")


# ── Install ─────────────────────────────────────────────────────


async def install_archive(
    payload: bytes,
    artifact: ArtifactDescriptor,
    install_dir: Path,
    *,
    os_family: OsFamily,
    extractor: ArchiveExtractor | None = None,
) -> InstallationState:
    """Unpack ``payload`` and atomically promote it to ``install_dir``.

    Args:
        payload: Downloaded artifact bytes.
        artifact: Descriptor the payload was fetched for.
        install_dir: Managed installation directory.
        os_family: Decides the executable layout.
        extractor: Override the extractor chosen from ``artifact``.

    Returns:
        ``InstallationState`` of the promoted directory.

    Raises:
        ExtractionFailedError: Corrupt archive, bad layout, failed setup
            run, or no primary executable after extraction.
        IOFailureError: Staging, chmod, or promotion failed.
    """
    extractor = extractor or extractor_for(artifact)
    parent = install_dir.parent

    try:
        parent.mkdir(parents=True, exist_ok=True)
        staging_ctx = tempfile.TemporaryDirectory(
            prefix=f".{install_dir.name}-staging-", dir=parent,
        )
    except OSError as e:
        raise IOFailureError(f"Cannot create staging area in {parent}: {e}", cause=e) from e

    with staging_ctx as staging:
        root = Path(staging) / "root"
        try:
            await extractor.extract(payload, root)
        except OSError as e:
            raise IOFailureError(f"failed to extract: {e}", cause=e) from e

        executables = executable_paths(root, os_family)
        if not executables[0].is_file():
            raise ExtractionFailedError(
                f"Extracted distribution has no {executables[0].relative_to(root).as_posix()}"
            )
        grant_execute(executables)

        try:
            if install_dir.exists():
                logger.info("Replacing incomplete installation at %s", install_dir)
                shutil.rmtree(install_dir)
            os.replace(root, install_dir)
        except OSError as e:
            raise IOFailureError(
                f"Cannot move installation into {install_dir}: {e}", cause=e,
            ) from e

    state = read_installation_state(install_dir, os_family)
    logger.info("Installed %s into %s", artifact.filename, install_dir)
    return state
