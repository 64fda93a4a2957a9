"""
L4 Execution — Core subprocess runner (async).

The single place where child processes are spawned for installer
runs and ``prince`` invocations. Output capture, timeouts and logging
are centralised here. Never raises for a failing child; the caller
decides what a failure means.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Trim captured output kept for diagnostics.
_OUTPUT_TAIL = 2000


def tail(text: str) -> str:
    """Last part of captured output, for error messages."""
    return text[-_OUTPUT_TAIL:] if text else ""


@dataclass
class CommandResult:
    """Outcome of one child process run."""

    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0
    timed_out: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out and self.error is None

    def describe(self) -> str:
        """One-line failure summary."""
        if self.error:
            return self.error
        if self.timed_out:
            return "Command timed out"
        return f"Command failed (exit {self.returncode})"


async def run_command(
    cmd: list[str],
    *,
    timeout: float | None = None,
    input_data: bytes | None = None,
    env_overrides: dict[str, str] | None = None,
    cwd: str | None = None,
) -> CommandResult:
    """Run ``cmd`` and capture its output.

    Args:
        cmd: Program and arguments.
        timeout: Seconds before the child is killed (None = wait forever).
        input_data: Bytes written to the child's stdin.
        env_overrides: Extra environment variables.
        cwd: Working directory for the child.

    Returns:
        ``CommandResult``; ``ok`` is True only for exit status 0.
    """
    env = os.environ.copy()
    if env_overrides:
        env.update(env_overrides)

    logger.debug("Running: %s", cmd)
    start = time.monotonic()
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.PIPE if input_data is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
            cwd=cwd,
        )
    except OSError as e:
        logger.debug("Cannot launch %s: %s", cmd[0], e)
        return CommandResult(returncode=None, error=f"Cannot launch {cmd[0]}: {e}")

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(input_data), timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.warning("Command timed out after %ss: %s", timeout, cmd[0])
        return CommandResult(
            returncode=proc.returncode, elapsed_ms=elapsed_ms, timed_out=True,
        )

    elapsed_ms = int((time.monotonic() - start) * 1000)
    result = CommandResult(
        returncode=proc.returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        elapsed_ms=elapsed_ms,
    )
    if not result.ok:
        logger.debug("%s exited %s after %dms", cmd[0], proc.returncode, elapsed_ms)
    return result
