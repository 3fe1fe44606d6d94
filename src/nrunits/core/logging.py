"""
Unified logging utilities for the nrunits package.

The library keeps its own records quiet (``logger.disable("nrunits")`` in the
package root); applications and the CLI opt in with ``configure_logging``.

Exports:
    - logger: Global Loguru logger (ready for use/import).
    - configure_logging: Enable nrunits records on stderr at a given level.
    - setup_logfile: Add file logging with rotation/compression.
    - setup_json_logfile: Add a JSON-format log file for machine parsing.
"""

import os
import sys
from typing import Optional

from loguru import logger

__all__ = [
    "logger",
    "configure_logging",
    "setup_logfile",
    "setup_json_logfile",
]

LOG_LEVEL_ENV = "NRUNITS_LOG_LEVEL"
DEFAULT_LEVEL = "WARNING"


def resolve_level(level: Optional[str] = None) -> str:
    """Explicit level, else $NRUNITS_LOG_LEVEL, else WARNING."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LEVEL)
    level = str(level).upper()
    try:
        logger.level(level)
    except ValueError:
        raise ValueError(f"Unknown log level: {level!r}") from None
    return level


def _stderr(message) -> None:
    sys.stderr.write(message)


def configure_logging(level: Optional[str] = None, sink=None) -> int:
    """
    Replace the default handler with one at the requested level and enable
    records emitted from inside the package.

    Args:
        level (str, optional): Logging level (DEBUG, INFO, ...).
        sink: Where records go (default: the current sys.stderr).

    Returns:
        int: Loguru handler id.
    """
    level = resolve_level(level)
    logger.remove()
    handler_id = logger.add(
        sink or _stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
    logger.enable("nrunits")
    return handler_id


def setup_logfile(
    log_path: str,
    rotation: str = "10 MB",
    retention: str = "10 days",
    compression: str = "zip",
    level: str = "INFO",
    colorize: bool = False
) -> int:
    """
    Add a rotating file handler to the global logger.

    Args:
        log_path (str): Path to the log file.
        rotation (str): Size or time string for log rotation.
        retention (str): How long to keep old logs.
        compression (str): Compression method for rotated logs.
        level (str): Logging level (DEBUG, INFO, etc.).
        colorize (bool): Colorize file output (default: False).
    """
    log_dir = os.path.dirname(log_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler_id = logger.add(
        log_path,
        rotation=rotation,
        retention=retention,
        compression=compression,
        level=level.upper(),
        colorize=colorize,
        backtrace=True,
        diagnose=False,
    )
    logger.info(f"Loguru file logging initialized: {log_path}")
    return handler_id


def setup_json_logfile(log_path: str, **kwargs) -> int:
    """
    Add a JSON-format log file (for machine parsing).
    Args:
        log_path (str): Path to JSON log file.
        **kwargs: Passed to logger.add().
    """
    handler_id = logger.add(
        log_path,
        serialize=True,
        **kwargs
    )
    logger.info(f"Loguru JSON logging initialized: {log_path}")
    return handler_id
