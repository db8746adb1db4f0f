"""
Logging configuration for the Formicarium client.

Every module logs through ``logging.getLogger(__name__)``, which places it
under the ``formicarium`` namespace. ``setup_logging`` configures that
namespace once, at CLI start-up.

Log Format:
    2026-03-01 10:15:30 [INFO    ] formicarium.session - Synced with wallet: Base Mainnet
    2026-03-01 10:15:31 [ERROR   ] formicarium.market - Error fetching printers: ...
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


ROOT_LOGGER = "formicarium"

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure the ``formicarium`` logger.

    Console output goes to stderr so command output on stdout stays
    clean. A rotating file log is added when ``log_file`` is given.

    Args:
        log_level: Minimum log level (default: INFO)
        log_file: Optional path of a rotating log file

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    logger.propagate = False

    # Allows re-configuration
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging configured at level %s", logging.getLevelName(log_level))
    return logger
