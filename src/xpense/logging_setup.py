"""Logging configuration for the ``xpense`` package.

Library modules only call ``get_logger(__name__)``. Entry points (the CLI or a
host application) call ``configure_logging`` once to attach a handler to the
package root logger.
"""

import logging
import os
import sys
from typing import IO, Optional, Union

_PKG_LOGGER_NAME = "xpense"
LOG_LEVEL_ENV = "XPENSE_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_CONFIGURED = False


def parse_level(level: Union[int, str, None]) -> int:
    """Resolve a level given as int, level name or numeric string.

    None falls back to XPENSE_LOG_LEVEL, then WARNING.
    """
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = logging.getLevelName(name)
        if isinstance(numeric, int):
            return numeric
        raise ValueError(f"Unknown log level '{level}'")
    env_val = os.environ.get(LOG_LEVEL_ENV)
    if env_val:
        return parse_level(env_val)
    return logging.WARNING


def configure_logging(
    level: Union[int, str, None] = None,
    fmt: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure the package root logger exactly once."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    resolved = parse_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, keeping the package silent until configured."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
