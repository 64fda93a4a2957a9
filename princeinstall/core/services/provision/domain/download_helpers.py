"""
L1 Domain — Download helpers (pure).

Size formatting and progress accounting for streamed downloads.
No I/O, no subprocess.
"""

from __future__ import annotations

import logging
from typing import Callable

from princeinstall.core.observability.logging_config import PROGRESS_LOGGER

progress_logger = logging.getLogger(PROGRESS_LOGGER)


def _fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


class DownloadProgress:
    """Progress callback for ``fetch_artifact``.

    Called once per received chunk with the chunk size and the declared
    total (``None`` when the server sent no Content-Length). Emits a
    line every ``step`` percent; stays silent when the total is unknown.

    Args:
        emit: Where progress lines go. Defaults to the progress logger,
            which ``setup_logging`` routes to stderr unless quiet.
        step: Percentage interval between lines.
    """

    def __init__(self, emit: Callable[[str], None] | None = None, step: int = 5) -> None:
        self._emit = emit or progress_logger.info
        self._step = max(1, step)
        self.received = 0
        self.total: int | None = None
        self._last_pct = -1

    def __call__(self, advance: int, total: int | None) -> None:
        self.received += advance
        self.total = total
        if not total:
            return
        pct = min(100, int(self.received * 100 / total))
        if pct >= self._last_pct + self._step or (pct == 100 and self._last_pct < 100):
            self._last_pct = pct
            self._emit(
                f"download: {pct}% ({_fmt_size(self.received)} / {_fmt_size(total)})"
            )
