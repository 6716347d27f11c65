"""Logging helpers for the orderflow_io package."""

# Module responsibilities:
# - Configure the ``orderflow_io`` logger once with a rotating file and a console handler.
# - Render structured ``extra=`` fields (sheet, backend, bytes, ...) as ``key=value`` suffixes.

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "orderflow_io"
DEFAULT_LOG_BASE = Path.home() / "OrderFlow" / "logs"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

_LOG_CONFIGURED = False


class ExtraFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields after the message."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        extras = {k: v for k, v in vars(record).items() if k not in _RECORD_FIELDS and not k.startswith("_")}
        if not extras:
            return text
        suffix = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{text} | {suffix}"


def _resolve_log_dir(log_dir: Optional[Path] = None) -> Path:
    env_dir = os.getenv("ORDERFLOW_LOG_DIR")
    target = log_dir or (Path(env_dir) if env_dir else DEFAULT_LOG_BASE)
    target.mkdir(parents=True, exist_ok=True)
    return target


def _configure_logging(log_dir: Optional[Path] = None) -> None:
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    formatter = ExtraFormatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.handlers.RotatingFileHandler(
        _resolve_log_dir(log_dir) / "orderflow_io.log", maxBytes=2_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING)

    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.setLevel(logging.INFO)
    package_logger.addHandler(file_handler)
    package_logger.addHandler(console_handler)
    package_logger.propagate = False

    _LOG_CONFIGURED = True


def set_level(level: int) -> None:
    """Change the level of the package logger (handlers keep their own floor)."""

    _configure_logging()
    logging.getLogger(ROOT_LOGGER).setLevel(level)


def get_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """Return a logger scoped under ``orderflow_io``.

    Args:
        name: Suffix appended to the package logger name, e.g. ``"workbook"``.
        log_dir: Optional override for the logging directory; only honoured
            by the first call.
    """

    _configure_logging(log_dir)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
