"""
Installer settings — loaded from prince-install.yml and the environment.

Every value the pipeline needs from the outside world lives here,
including the managed install directory, so that callers (and tests)
can point the orchestrator at any location.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from princeinstall.core.services.provision.data.constants import (
    DEFAULT_PRODUCT_VERSION,
    DOWNLOAD_BASE_URL,
    PRINCE_EXECUTABLE,
    USER_AGENT,
)

_PRODUCT_VERSION_RE = re.compile(r"^\d+(?:\.\d+)?$")


def default_install_dir() -> Path:
    """The managed directory next to the installed package."""
    return Path(__file__).resolve().parents[2] / "prince"


class InstallerSettings(BaseModel):
    """Configuration for one install/uninstall run."""

    product_version: str = DEFAULT_PRODUCT_VERSION
    install_dir: Path = Field(default_factory=default_install_dir)
    download_base_url: str = DOWNLOAD_BASE_URL
    download_timeout: float = Field(default=300.0, gt=0)
    proxy_env_var: str = "http_proxy"
    executable: str = PRINCE_EXECUTABLE
    user_agent: str = USER_AGENT

    @field_validator("product_version", mode="before")
    @classmethod
    def _check_product_version(cls, value: object) -> str:
        text = str(value).strip()
        if not _PRODUCT_VERSION_RE.match(text):
            raise ValueError(f"product_version must look like '14' or '14.2', got {value!r}")
        return text

    @field_validator("install_dir")
    @classmethod
    def _expand_install_dir(cls, value: Path) -> Path:
        return value.expanduser()
