"""Glob-based exclusion rules applied during file discovery."""

from __future__ import annotations

import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import to_unix_path

DEFAULT_EXCLUSION_PATTERNS: Tuple[str, ...] = (
    "**/.*",
    "**/.*/**",
    "**/*.d.ts",
    "**/node_modules/**",
    "**/bower_components/**",
    "**/dist/**",
    "**/vendor/**",
    "**/external/**",
)

_GLOBSTAR = "**"
_SLASHES = re.compile(r"/+")


@dataclass(frozen=True)
class ExclusionRule:
    """A single compiled glob together with its matching options."""

    pattern: str
    segments: Tuple[str, ...]
    nocase: bool
    match_base: bool

    def matches(self, path: str) -> bool:
        target = to_unix_path(path)
        if self.nocase:
            target = target.lower()
        parts = _SLASHES.split(target)

        if self.match_base and len(self.segments) == 1:
            # A slash-free pattern names a file or a directory at any depth.
            return any(fnmatchcase(part, self.segments[0]) for part in parts if part)

        return _match_segments(self.segments, parts)


def _match_segments(pattern: Sequence[str], parts: Sequence[str]) -> bool:
    if not pattern:
        return not parts
    head = pattern[0]
    if head == _GLOBSTAR:
        rest = pattern[1:]
        return any(_match_segments(rest, parts[index:]) for index in range(len(parts) + 1))
    if not parts:
        return False
    if not fnmatchcase(parts[0], head):
        return False
    return _match_segments(pattern[1:], parts[1:])


def _build_rule(pattern: str, *, nocase: bool, match_base: bool) -> Optional[ExclusionRule]:
    pattern = _SLASHES.sub("/", to_unix_path(pattern.strip()))
    if not pattern:
        return None
    if pattern.startswith("./"):
        pattern = pattern[2:]
    if pattern.endswith("/"):
        pattern = f"{pattern}**"
    normalised = pattern.lower() if nocase else pattern

    segments: List[str] = []
    for segment in normalised.split("/"):
        # Consecutive globstars collapse into one.
        if segment == _GLOBSTAR and segments and segments[-1] == _GLOBSTAR:
            continue
        segments.append(segment)

    return ExclusionRule(
        pattern=pattern,
        segments=tuple(segments),
        nocase=nocase,
        match_base=match_base and "/" not in pattern,
    )


class Matcher:
    """Ordered set of exclusion rules; a path is excluded when any rule matches."""

    def __init__(self, rules: Iterable[ExclusionRule] = ()) -> None:
        self._rules: Tuple[ExclusionRule, ...] = tuple(rules)

    @property
    def rules(self) -> Tuple[ExclusionRule, ...]:
        return self._rules

    @property
    def patterns(self) -> List[str]:
        return [rule.pattern for rule in self._rules]

    def excludes(self, path: str) -> bool:
        return any(rule.matches(path) for rule in self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"Matcher({self.patterns!r})"


def compile_patterns(
    patterns: Iterable[str],
    *,
    nocase: bool = True,
    match_base: bool = False,
) -> Matcher:
    """Compile shell-style globs (with ``**`` support) into a matcher."""
    rules: List[ExclusionRule] = []
    for pattern in patterns:
        rule = _build_rule(pattern, nocase=nocase, match_base=match_base)
        if rule is not None:
            rules.append(rule)
    return Matcher(rules)


DEFAULT_EXCLUSIONS = compile_patterns(DEFAULT_EXCLUSION_PATTERNS)


def build_exclusions(exclusions: Optional[str], test_dir: Optional[str] = None) -> Matcher:
    """Return the caller matcher for a comma-separated exclusion string.

    Auxiliary test directories are excluded from the main pass; they are
    discovered separately with the auxiliary role.
    """
    patterns = [pattern.strip() for pattern in exclusions.split(",")] if exclusions else []
    if test_dir:
        directories = (directory.strip().rstrip("/") for directory in test_dir.split(","))
        patterns.extend(f"{directory}/**/*" for directory in directories if directory)
    return compile_patterns(patterns, nocase=True, match_base=True)


@dataclass(frozen=True)
class ExclusionSet:
    """Caller-supplied and default matchers evaluated independently."""

    caller: Matcher
    defaults: Matcher = DEFAULT_EXCLUSIONS

    def is_excluded(self, relative_path: str, absolute_path: str) -> bool:
        # Caller globs are project-relative; defaults inspect the whole path.
        return self.caller.excludes(relative_path) or self.defaults.excludes(absolute_path)

    @classmethod
    def for_project(cls, exclusions: Optional[str], test_dir: Optional[str] = None) -> "ExclusionSet":
        return cls(caller=build_exclusions(exclusions, test_dir))


__all__ = [
    "DEFAULT_EXCLUSIONS",
    "DEFAULT_EXCLUSION_PATTERNS",
    "ExclusionRule",
    "ExclusionSet",
    "Matcher",
    "build_exclusions",
    "compile_patterns",
]
