"""Logging helpers for the sheetmap package."""

# Module responsibilities:
# - Hand out package-scoped loggers (sheetmap.<name>) to library modules.
# - Offer configure_logging() for applications that want console + rotating file output.
# - Stay silent by default: a library never installs handlers on import.

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER = "sheetmap"
ENV_LOG_DIR = "SHEETMAP_LOG_DIR"
_LOG_CONFIGURED = False

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def _resolve_log_dir(log_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Resolve the log directory (argument, then env var), ensuring existence."""
    target = log_dir or os.getenv(ENV_LOG_DIR)
    if not target:
        return None
    path = Path(target)
    path.mkdir(parents=True, exist_ok=True)
    return path


def configure_logging(
    level: int = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Configure the package logger once with console + optional rotating file handlers.

    Args:
        level: Level applied to the package logger and its handlers.
        log_dir: Directory for ``sheetmap.log``; falls back to ``SHEETMAP_LOG_DIR``.
            No file handler is installed when neither is set.

    Returns:
        The configured ``sheetmap`` logger.
    """
    global _LOG_CONFIGURED
    root_logger = logging.getLogger(ROOT_LOGGER)
    if _LOG_CONFIGURED:
        return root_logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    directory = _resolve_log_dir(log_dir)
    if directory is not None:
        file_handler = logging.handlers.RotatingFileHandler(
            directory / "sheetmap.log", maxBytes=2_000_000, backupCount=3
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(level)
    _LOG_CONFIGURED = True
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Return a package-scoped logger.

    Args:
        name: Logger name suffix appended to the package root logger namespace.

    Returns:
        Logger scoped under ``sheetmap``.
    """

    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
