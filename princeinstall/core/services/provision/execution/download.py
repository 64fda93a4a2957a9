"""
L4 Execution — Artifact download.

Streams one URL into memory with ``httpx.AsyncClient``, reporting
progress per chunk. No retries: a failed fetch aborts the pipeline and
retrying is the caller's decision.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from princeinstall.core.services.provision.data.constants import USER_AGENT
from princeinstall.core.services.provision.detection.proxy import ProxyConfig
from princeinstall.core.services.provision.domain.download_helpers import _fmt_size
from princeinstall.core.services.provision.errors import DownloadFailedError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int | None], None]


def _content_length(headers: httpx.Headers) -> int | None:
    """Declared body size, or None if absent or garbage."""
    raw = headers.get("content-length")
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def _client_options(
    proxy: ProxyConfig | None,
    timeout: float,
    user_agent: str,
    transport: httpx.AsyncBaseTransport | None,
) -> dict[str, Any]:
    options: dict[str, Any] = {
        "timeout": httpx.Timeout(timeout),
        "follow_redirects": True,
        "headers": {"User-Agent": user_agent},
        # Proxy resolution is explicit (see detection.proxy).
        "trust_env": False,
    }
    if proxy is not None and proxy.url:
        options["proxy"] = proxy.url
    if transport is not None:
        options["transport"] = transport
    return options


async def fetch_artifact(
    url: str,
    *,
    proxy: ProxyConfig | None = None,
    timeout: float = 300.0,
    user_agent: str = USER_AGENT,
    on_progress: ProgressCallback | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bytes:
    """Download ``url`` and return the full payload.

    Args:
        url: Artifact URL.
        proxy: Proxy to route through (None or empty url = direct).
        timeout: Seconds allowed for connect/read/write/pool phases.
        user_agent: ``User-Agent`` header value.
        on_progress: Called as ``on_progress(chunk_len, total)`` for every
            chunk; ``total`` is None when no Content-Length was sent.
        transport: Custom httpx transport (tests).

    Returns:
        Response body bytes.

    Raises:
        DownloadFailedError: Non-200 status, transport error or timeout.
    """
    logger.info("download: %s", url)
    options = _client_options(proxy, timeout, user_agent, transport)

    try:
        client = httpx.AsyncClient(**options)
    except (ValueError, httpx.InvalidURL) as e:
        # httpx rejects unusable proxy URLs while building the client
        raise DownloadFailedError(f"download failed: invalid proxy: {e}", cause=e) from e

    try:
        async with client:
            async with client.stream("GET", url) as response:
                if response.status_code != 200:
                    raise DownloadFailedError(
                        f"download failed: HTTP {response.status_code} for {url}"
                    )
                total = _content_length(response.headers)
                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if on_progress is not None:
                        on_progress(len(chunk), total)
    except httpx.TimeoutException as e:
        raise DownloadFailedError(
            f"download failed: timed out after {timeout:g}s for {url}", cause=e,
        ) from e
    except httpx.HTTPError as e:
        raise DownloadFailedError(f"download failed: {e}", cause=e) from e

    logger.info("download: %s received.", _fmt_size(len(body)))
    return bytes(body)
