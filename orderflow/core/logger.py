from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from orderflow_io.utils.log import ExtraFormatter, set_level as set_io_level

from .settings import ensure_work_dirs


_LOGGER: logging.Logger | None = None


def parse_level(name: str) -> int:
    """Translate ``DEBUG``/``info``/... into a logging level.

    Raises:
        ValueError: When the name is not a standard level.
    """
    value = logging.getLevelName(name.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {name}")
    return value


def get_logger(log_dir: Path | None = None) -> logging.Logger:
    """Return the ``orderflow`` application logger writing to <work>/logs/app.log.

    The initial level comes from ``ORDERFLOW_LOG_LEVEL`` (default INFO).
    """
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER

    base = Path(log_dir) if log_dir is not None else ensure_work_dirs()["logs"]
    base.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("orderflow")
    logger.setLevel(parse_level(os.getenv("ORDERFLOW_LOG_LEVEL", "INFO")))
    logger.propagate = False

    fmt = ExtraFormatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(base / "app.log", maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(fmt)
    logger.addHandler(file_handler)

    # Warnings reach the terminal; the CLI prints its own results on stdout.
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    console.setLevel(logging.WARNING)
    logger.addHandler(console)

    _LOGGER = logger
    return logger


def set_level(name: str) -> int:
    """Apply a level to the application and spreadsheet-layer loggers."""
    level = parse_level(name)
    get_logger().setLevel(level)
    set_io_level(level)
    return level
