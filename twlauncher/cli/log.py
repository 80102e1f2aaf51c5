"""
Logging setup for the launcher CLI.

Verbosity and format are read from the environment:

    LOG_LEVEL   debug | info | warn | error   (default: info)
    LOG_OUTPUT  text | json                   (default: text)

Values are case sensitive; anything unrecognized falls back to the default.
Library modules only use ``logging.getLogger(__name__)``; JSON output is
produced by a structlog ProcessorFormatter on the root handler.
"""

import logging
import os
import sys
from typing import Mapping, Optional, TextIO

import structlog

LEVEL_ENV_VAR = "LOG_LEVEL"
OUTPUT_ENV_VAR = "LOG_OUTPUT"

OUTPUT_TEXT = "text"
OUTPUT_JSON = "json"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def to_level(value: Optional[str]) -> int:
    """
    Convert a level name to a logging level.

    Example:
        >>> to_level("debug") == logging.DEBUG
        True
        >>> to_level("DEBUG") == logging.INFO
        True
    """
    return _LEVELS.get(value or "", logging.INFO)


def to_output(value: Optional[str]) -> str:
    """Convert an output name to OUTPUT_JSON or OUTPUT_TEXT."""
    return OUTPUT_JSON if value == OUTPUT_JSON else OUTPUT_TEXT


def get_level(env: Optional[Mapping[str, str]] = None) -> int:
    """Read the log level from LOG_LEVEL."""
    env = os.environ if env is None else env
    return to_level(env.get(LEVEL_ENV_VAR))


def get_output(env: Optional[Mapping[str, str]] = None) -> str:
    """Read the log format from LOG_OUTPUT."""
    env = os.environ if env is None else env
    return to_output(env.get(OUTPUT_ENV_VAR))


def _json_formatter() -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_logging(
    level: int = logging.INFO,
    output: str = OUTPUT_TEXT,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Configure the root logger.

    Args:
        level: Logging level
        output: OUTPUT_TEXT or OUTPUT_JSON
        stream: Destination stream (stderr if None)

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(stream or sys.stderr)

    if output == OUTPUT_JSON:
        handler.setFormatter(_json_formatter())
    elif level <= logging.DEBUG:
        handler.setFormatter(logging.Formatter("%(levelname)s [%(name)s] %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True,  # Reconfigure if already configured
    )
    # urllib3 is chatty at debug level
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
    return handler


__all__ = [
    "OUTPUT_JSON",
    "OUTPUT_TEXT",
    "to_level",
    "to_output",
    "get_level",
    "get_output",
    "configure_logging",
]
