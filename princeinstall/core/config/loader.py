"""
Configuration loader — reads prince-install.yml into InstallerSettings.

Resolution order for the file:
    explicit path  >  PRINCE_INSTALL_CONFIG  >  search upward from cwd

No file at all means defaults. Environment overrides
(PRINCE_INSTALL_DIR, PRINCE_VERSION, PRINCE_DOWNLOAD_TIMEOUT) are
applied last, then the result is validated by the pydantic model.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import ValidationError

from princeinstall.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "prince-install.yml"

CONFIG_ENV_VAR = "PRINCE_INSTALL_CONFIG"

# env var → settings field
_ENV_OVERRIDES = {
    "PRINCE_INSTALL_DIR": "install_dir",
    "PRINCE_VERSION": "product_version",
    "PRINCE_DOWNLOAD_TIMEOUT": "download_timeout",
}


class ConfigError(Exception):
    """Raised when installer configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for prince-install.yml starting from ``start_dir``, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to the file, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading installer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "prince" key or be flat
    if "prince" in data:
        section = data["prince"] or {}
        if not isinstance(section, dict):
            raise ConfigError(f"Expected a mapping under 'prince' in {path}")
        return dict(section)
    return dict(data)


def load_settings(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> InstallerSettings:
    """Load and validate installer settings.

    Args:
        path: Explicit config file. If None, ``PRINCE_INSTALL_CONFIG`` is
            used, then an upward search from cwd.
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Validated InstallerSettings.

    Raises:
        ConfigError: If an explicit file is missing, or any file is
            unreadable, not YAML, not a mapping, or fails validation.
    """
    env = os.environ if environ is None else environ

    if path is None and env.get(CONFIG_ENV_VAR):
        path = Path(env[CONFIG_ENV_VAR])
    if path is None:
        path = find_config_file()

    data = _read_yaml(path) if path is not None else {}

    for var, field in _ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            logger.debug("%s overrides %s", var, field)
            data[field] = value

    try:
        settings = InstallerSettings.model_validate(data)
    except ValidationError as e:
        source = path or "environment"
        raise ConfigError(f"Invalid installer configuration ({source}): {e}") from e

    logger.info(
        "Settings: Prince %s into %s", settings.product_version, settings.install_dir,
    )
    return settings
