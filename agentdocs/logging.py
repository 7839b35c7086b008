"""Logging setup shared by the agentdocs pipeline and CLI."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable

_ROOT_NAME = "agentdocs"
_CONSOLE_FORMAT = "[agentdocs] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child of the ``agentdocs`` logger (``scanner`` -> ``agentdocs.scanner``)."""
    return logging.getLogger(f"{_ROOT_NAME}.{name}" if name else _ROOT_NAME)


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Attach console (stderr) and optional file handlers to the agentdocs logger.

    ``quiet`` raises the console threshold to WARNING so machine-readable
    stdout (``--json``) is not interleaved with progress messages.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger(_ROOT_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    # The CLI may be invoked repeatedly in one interpreter (tests, notebooks).
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def log_warnings(logger: logging.Logger, messages: Iterable[object]) -> int:
    """Emit one WARNING record per message and return how many were logged."""
    count = 0
    for message in messages:
        logger.warning("%s", message)
        count += 1
    return count


__all__ = ["configure_logging", "get_logger", "log_warnings"]
