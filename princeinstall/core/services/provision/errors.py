"""
Provisioning errors.

Every failure of the pipeline is a ``ProvisionError``. The probe's
errors (``ProbeError`` and subclasses) are the only non-fatal ones:
the orchestrator swallows them and proceeds to install.
"""

from __future__ import annotations


class ProvisionError(Exception):
    """Base class for provisioning failures.

    Args:
        message: Human-readable description.
        cause: The originating exception, if any. Also set as
            ``__cause__`` when raised with ``raise ... from``.
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class UnsupportedPlatformError(ProvisionError):
    """The host platform (or its distro/arch) is not in the artifact table."""


class UnknownVersionError(ProvisionError):
    """The OS version (or product version) has no matching artifact."""


class DownloadFailedError(ProvisionError):
    """Fetching the artifact failed (status, transport error, timeout)."""


class ExtractionFailedError(ProvisionError):
    """The archive could not be unpacked into a usable installation."""


class UnexpectedArchiveLayoutError(ExtractionFailedError):
    """A zip archive did not contain exactly one top-level directory."""


class IOFailureError(ProvisionError):
    """A filesystem operation (staging, chmod, rename, delete) failed."""


class ProbeError(ProvisionError):
    """The existing-installation probe found nothing usable."""


class NotFoundError(ProbeError):
    """The executable is not on the search path."""


class UnexpectedOutputError(ProbeError):
    """The executable exists but its version banner could not be parsed."""


class PrinceExecutionError(ProvisionError):
    """A ``prince`` run exited non-zero or timed out."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
