"""Content heuristics that drop generated script files before analysis."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Callable

AcceptPredicate = Callable[[str, str], bool]

DEFAULT_MAX_FILE_SIZE_KB = 1000
AVERAGE_LINE_LENGTH_THRESHOLD = 200

_MINIFIED_SUFFIXES = (".min", "-min")
_BUNDLE_PATTERN = re.compile(r"\A\s*(?:/\*.*?\*/\s*)?!function\s*\(", re.DOTALL)


def is_minified_name(path: str) -> bool:
    stem = PurePosixPath(path.replace("\\", "/")).stem.lower()
    return stem.endswith(_MINIFIED_SUFFIXES)


def has_excessive_line_length(content: str, threshold: int = AVERAGE_LINE_LENGTH_THRESHOLD) -> bool:
    if not content:
        return False
    lines = content.count("\n") + 1
    return len(content) / lines > threshold


def is_bundle(content: str) -> bool:
    return bool(_BUNDLE_PATTERN.match(content))


def is_too_big(content: str, max_file_size_kb: int) -> bool:
    return len(content.encode("utf-8")) > max_file_size_kb * 1000


class ExclusionsFilter:
    """Reject minified, bundled and oversized script files."""

    def __init__(self, max_file_size_kb: int = DEFAULT_MAX_FILE_SIZE_KB) -> None:
        self.max_file_size_kb = max_file_size_kb

    def __call__(self, path: str, content: str) -> bool:
        return self.accept(path, content)

    def accept(self, path: str, content: str) -> bool:
        if is_too_big(content, self.max_file_size_kb):
            return False
        if is_minified_name(path) or has_excessive_line_length(content):
            return False
        if is_bundle(content):
            return False
        return True


def accept(path: str, content: str) -> bool:
    """Default acceptance predicate using the standard size limit."""
    return ExclusionsFilter().accept(path, content)


__all__ = [
    "AcceptPredicate",
    "DEFAULT_MAX_FILE_SIZE_KB",
    "ExclusionsFilter",
    "accept",
    "has_excessive_line_length",
    "is_bundle",
    "is_minified_name",
    "is_too_big",
]
