# src/readqc/utils/logger.py
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from colorama import Fore, Style, just_fix_windows_console

_LOGGER_NAME = "readqc"
_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

_LEVEL_COLORS = {
    logging.DEBUG: Style.DIM,
    logging.INFO: Fore.BLUE,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class _ColorFormatter(logging.Formatter):
    """Colorize the level name (and success messages) on the console only; the log file stays plain."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if getattr(record, "success", False):
            msg = record.getMessage()
            text = text.replace(msg, f"{Fore.GREEN}{msg}{Style.RESET_ALL}", 1)
        color = _LEVEL_COLORS.get(record.levelno)
        if not color:
            return text
        return text.replace(record.levelname, f"{color}{record.levelname}{Style.RESET_ALL}", 1)


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is when a record is emitted, never a stale stream."""

    def __init__(self):
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, _value):
        pass


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


def log_success(message: str, *args) -> None:
    """Log an INFO line printed in green on the console."""
    get_logger().info(message, *args, extra={"success": True})


def setup_logger(verbose: bool = False) -> logging.Logger:
    """
    Configure the root 'readqc' logger:
      - INFO to console (DEBUG when verbose)
      - DEBUG to a file, once attach_log_file() knows the output directory
    Idempotent: safe to call multiple times.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if getattr(setup_logger, "_configured", False):
        _console_handler(logger).setLevel(logging.DEBUG if verbose else logging.INFO)
        return logger

    just_fix_windows_console()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Remove any pre-existing handlers (only for our logger)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    ch = _StderrHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(_ColorFormatter(_FORMAT))
    ch.set_name("readqc-console")
    logger.addHandler(ch)

    setup_logger._configured = True  # type: ignore[attr-defined]
    return logger


def attach_log_file(path: Path) -> logging.FileHandler:
    """Send DEBUG records to `path`, replacing a file handler from an earlier run."""
    logger = logging.getLogger(_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.FileHandler):
            logger.removeHandler(h)
            h.close()

    path.parent.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(path, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(fh)
    return fh


def _console_handler(logger: logging.Logger) -> logging.Handler:
    for h in logger.handlers:
        if h.get_name() == "readqc-console":
            return h
    raise RuntimeError("readqc console handler missing; call setup_logger() first")
