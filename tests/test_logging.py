"""Logging setup tests."""

from __future__ import annotations

import logging
from pathlib import Path

from agentdocs.logging import configure_logging, get_logger, log_warnings


def test_get_logger_namespaces_children() -> None:
    assert get_logger("scanner").name == "agentdocs.scanner"
    assert get_logger().name == "agentdocs"


def test_configure_logging_levels_and_reset(tmp_path: Path) -> None:
    logger = configure_logging(verbose=True)
    assert logger.handlers[0].level == logging.DEBUG

    logger = configure_logging(quiet=True, log_file=tmp_path / "run.log")
    assert len(logger.handlers) == 2
    assert logger.handlers[0].level == logging.WARNING
    assert logger.level == logging.DEBUG

    get_logger("test").debug("to file only")
    for handler in logger.handlers:
        handler.flush()
    assert "to file only" in (tmp_path / "run.log").read_text(encoding="utf-8")
    configure_logging()


def test_log_warnings_counts(tmp_path: Path) -> None:
    logger = configure_logging(quiet=True, log_file=tmp_path / "warn.log")

    assert log_warnings(get_logger("test"), ["a.md: broken", "b.md: broken"]) == 2

    for handler in logger.handlers:
        handler.flush()
    assert (tmp_path / "warn.log").read_text(encoding="utf-8").count("WARNING") == 2
    configure_logging()
