"""YAML configuration parser for the Tailwind launcher.

Settings come from three places, later ones winning:

1. Built-in defaults
2. A YAML project file: the path in TWLAUNCHER_CONFIG, otherwise
   ``twlauncher.yaml`` in the project root (optional)
3. The ``-version`` command-line flag (applied by the CLI)

Example twlauncher.yaml::

    version: v4.0.7
    timeout: 30
    deadline: 180
"""

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from twlauncher.core.download import DOWNLOAD_URL
from twlauncher.core.exceptions import ConfigError
from twlauncher.core.launcher import DEFAULT_DEADLINE
from twlauncher.core.releases import LATEST, LATEST_VERSION_URL

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "twlauncher.yaml"
CONFIG_ENV_VAR = "TWLAUNCHER_CONFIG"


@dataclass(frozen=True)
class LauncherConfig:
    """Effective launcher settings."""

    version: str = LATEST
    timeout: float = 30.0  # per HTTP request, seconds
    deadline: float = DEFAULT_DEADLINE  # whole invocation, seconds
    download_url: str = DOWNLOAD_URL
    latest_version_url: str = LATEST_VERSION_URL
    cache_dir: Optional[Path] = None  # user cache root override

    def with_version(self, version: Optional[str]) -> "LauncherConfig":
        """Return a copy with the requested version replaced (None keeps it)."""
        if version is None:
            return self
        return replace(self, version=version)


def _require_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' must be a non-empty string")
    return value.strip()


def _require_positive(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{key}' must be a number")
    if value <= 0:
        raise ConfigError(f"'{key}' must be positive")
    return float(value)


def parse_config_data(
    data: Mapping[str, Any], base: Optional[LauncherConfig] = None
) -> LauncherConfig:
    """
    Build a configuration from parsed YAML data.

    Args:
        data: Mapping loaded from YAML
        base: Configuration to start from (defaults if None)

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If a value has the wrong type
    """
    config = base or LauncherConfig()
    if not isinstance(data, Mapping):
        raise ConfigError("Configuration must be a mapping")

    data = dict(data)
    known = {f for f in LauncherConfig.__dataclass_fields__}
    for key in data:
        if key not in known:
            logger.warning(f"Ignoring unknown configuration key: {key}")

    # YAML turns unquoted tags like 4.0 into floats
    if isinstance(data.get("version"), (int, float)) and not isinstance(
        data.get("version"), bool
    ):
        data["version"] = str(data["version"])

    updates: Dict[str, Any] = {}
    for key in ("version", "download_url", "latest_version_url"):
        value = _require_str(data, key)
        if value is not None:
            updates[key] = value
    for key in ("timeout", "deadline"):
        value = _require_positive(data, key)
        if value is not None:
            updates[key] = value
    cache_dir = _require_str(data, "cache_dir")
    if cache_dir is not None:
        updates["cache_dir"] = Path(cache_dir).expanduser()

    return replace(config, **updates)


def parse_config(config_path: Path) -> LauncherConfig:
    """
    Parse a twlauncher.yaml configuration file.

    Args:
        config_path: Path to the file

    Returns:
        Parsed configuration (defaults for an empty file)

    Raises:
        ConfigError: If the file is missing or invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    if data is None:
        logger.debug(f"Configuration file is empty: {config_path}")
        return LauncherConfig()

    return parse_config_data(data)


def load_config(
    project_root: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> LauncherConfig:
    """
    Load the effective configuration.

    Args:
        project_root: Directory searched for twlauncher.yaml (cwd if None)
        env: Environment mapping (os.environ if None)

    Returns:
        Effective configuration

    Raises:
        ConfigError: If an explicitly named file is missing or any file is invalid
    """
    env = os.environ if env is None else env

    explicit = env.get(CONFIG_ENV_VAR)
    if explicit:
        logger.debug(f"Loading configuration from {explicit} ({CONFIG_ENV_VAR})")
        return parse_config(Path(explicit))

    default_file = (project_root or Path.cwd()) / CONFIG_FILENAME
    if not default_file.exists():
        logger.debug(f"Config file not found (optional): {default_file}")
        return LauncherConfig()

    logger.debug(f"Loading configuration from {default_file}")
    return parse_config(default_file)
