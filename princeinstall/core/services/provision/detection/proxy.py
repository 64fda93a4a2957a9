"""
L3 Detection — Proxy discovery.

Resolution order:
    1. ``$http_proxy`` (or the configured variable), if non-empty
    2. ``pip config get global.proxy`` — the ambient package-manager setting
    3. no proxy

Read-only; a failing pip lookup simply means "no ambient proxy".
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from typing import Literal, Mapping

from princeinstall.core.services.provision.data.constants import _PIP

logger = logging.getLogger(__name__)

_PROXY_URL_RE = re.compile(r"^https?://.+")

ProxySource = Literal["env", "pip-config", "none"]


@dataclass(frozen=True)
class ProxyConfig:
    """The proxy to use for downloads and where it came from."""

    url: str | None = None
    source: ProxySource = "none"

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {"url": self.url, "source": self.source}


def _env_proxy(env_var: str, environ: Mapping[str, str]) -> str:
    for name in (env_var, env_var.upper()):
        value = environ.get(name, "")
        if value.strip():
            return normalize_proxy_url(value)
    return ""


def normalize_proxy_url(value: str) -> str:
    """Add ``http://`` to a bare ``host:port`` proxy, as curl and wget do."""
    value = value.strip()
    if value and "://" not in value:
        return f"http://{value}"
    return value


def query_pip_proxy(timeout: int = 15) -> str | None:
    """Ask pip for its configured ``global.proxy``.

    Returns:
        The proxy URL, or None if pip has none (or pip is unavailable).
    """
    try:
        result = subprocess.run(
            _PIP + ["config", "get", "global.proxy"],
            capture_output=True, text=True, timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("pip proxy lookup failed: %s", e)
        return None

    if result.returncode != 0:
        return None

    value = (result.stdout or "").strip()
    if _PROXY_URL_RE.match(value):
        return value
    return None


def resolve_proxy(
    env_var: str = "http_proxy",
    *,
    environ: Mapping[str, str] | None = None,
) -> ProxyConfig:
    """Determine the proxy for artifact downloads.

    Args:
        env_var: Environment variable that overrides everything.
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        ``ProxyConfig`` (``url`` is None when no proxy applies).
    """
    env = os.environ if environ is None else environ

    from_env = _env_proxy(env_var, env)
    if from_env:
        logger.info("using proxy ($%s): %s", env_var, from_env)
        return ProxyConfig(url=from_env, source="env")

    from_pip = query_pip_proxy()
    if from_pip:
        logger.info("using proxy (pip config get global.proxy): %s", from_pip)
        return ProxyConfig(url=from_pip, source="pip-config")

    return ProxyConfig()
