"""Error taxonomy for project analysis runs."""

from __future__ import annotations

from typing import Optional


class RulingError(RuntimeError):
    """Base class for errors that abort a ruling run."""


class ConfigError(RulingError):
    """Raised when configuration or the analyzer registry is unusable."""


class DiscoveryError(RulingError):
    """Raised when a directory or file cannot be read during discovery."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class AggregationConflictError(RulingError):
    """Raised when the same file is reported by more than one analysis path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File {path} has been analyzed in multiple paths")
        self.path = path


class AnalysisFailure(Exception):
    """Raised by per-file analyzers when a file cannot be parsed or analyzed."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line


__all__ = [
    "AggregationConflictError",
    "AnalysisFailure",
    "ConfigError",
    "DiscoveryError",
    "RulingError",
]
