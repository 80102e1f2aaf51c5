"""Configuration module for the Tailwind launcher.

This module provides parsing of the optional twlauncher.yaml project file.
"""

from twlauncher.config.parser import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    LauncherConfig,
    load_config,
    parse_config,
    parse_config_data,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "LauncherConfig",
    "load_config",
    "parse_config",
    "parse_config_data",
]
