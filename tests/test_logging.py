"""Tests for ruling.logging."""

from __future__ import annotations

import logging

from ruling.logging import ProgressReport, configure_logging, get_logger


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def test_get_logger_nests_under_ruling() -> None:
    assert get_logger("discovery").name == "ruling.discovery"
    assert get_logger().name == "ruling"


def test_configure_logging_replaces_handlers(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(logging.getLogger("ruling"), "propagate", True)
    monkeypatch.setattr(logging.getLogger("ruling"), "level", logging.getLogger("ruling").level)
    configure_logging()
    logger = configure_logging(verbose=True, log_file=tmp_path / "run.log")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_progress_report_logs_at_most_once_per_period() -> None:
    logger = logging.getLogger("ruling.test-progress")
    logger.setLevel(logging.INFO)
    handler = _ListHandler()
    logger.addHandler(handler)
    clock = _Clock()
    try:
        progress = ProgressReport("Progress of markup analysis", 3, logger=logger, period=10.0, clock=clock)
        progress.start()
        progress.advance("/p/a.html")
        clock.now = 11.0
        progress.advance("/p/b.html")
        progress.advance("/p/c.html")
        progress.stop()
    finally:
        logger.removeHandler(handler)

    assert handler.messages == [
        "Progress of markup analysis: 3 source file(s) to be analyzed",
        "Progress of markup analysis: 2/3 files analyzed, current file: /p/b.html",
        "Progress of markup analysis: 3/3 source file(s) have been analyzed",
    ]
