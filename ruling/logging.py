"""Logging utilities for ruling runs."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable

_LOGGER_NAME = "ruling"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the ruling hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the ruling logger with console output and an optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI runs more than once.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[ruling] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


class ProgressReport:
    """Periodically log how many files of a batch have been analyzed."""

    def __init__(
        self,
        title: str,
        total: int,
        *,
        logger: logging.Logger | None = None,
        period: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.title = title
        self.total = total
        self.done = 0
        self._logger = logger or get_logger("progress")
        self._period = period
        self._clock = clock
        self._last = clock()
        self._lock = threading.Lock()

    def start(self) -> None:
        self._logger.info("%s: %d source file(s) to be analyzed", self.title, self.total)

    def advance(self, path: str) -> None:
        with self._lock:
            self.done += 1
            now = self._clock()
            if now - self._last < self._period:
                return
            self._last = now
            done = self.done
        self._logger.info("%s: %d/%d files analyzed, current file: %s", self.title, done, self.total, path)

    def stop(self) -> None:
        self._logger.info("%s: %d/%d source file(s) have been analyzed", self.title, self.done, self.total)


__all__ = ["ProgressReport", "configure_logging", "get_logger"]
