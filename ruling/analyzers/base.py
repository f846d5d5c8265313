"""Contracts for the analyzers the orchestrator dispatches files to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence

from ..models import AnalysisOutput, FileGroup, FileResult, Language, RuleConfig


@dataclass
class ProjectAnalysisInput:
    """Payload for a project-wide batch analysis."""

    rules: Sequence[RuleConfig]
    base_dir: str
    files: FileGroup


@dataclass
class FileAnalysisInput:
    """Payload for a single-file analysis."""

    file_path: str
    file_content: str
    rules: Sequence[RuleConfig] = field(default_factory=list)
    linter_id: Optional[str] = None
    language: Optional[Language] = None


class BatchAnalyzer(ABC):
    """Analyzes a whole file group in one pass, owning its own concurrency."""

    @abstractmethod
    def analyze_project(self, payload: ProjectAnalysisInput) -> AnalysisOutput | Mapping[str, object]:
        """Return results for every file of ``payload.files``."""


class FileAnalyzer(ABC):
    """Analyzes one file at a time; may raise on malformed input."""

    @abstractmethod
    def analyze_file(self, payload: FileAnalysisInput) -> FileResult | Mapping[str, object]:
        """Return diagnostics for ``payload.file_path``."""


def filter_rules(rules: Sequence[RuleConfig], excluded_keys: Sequence[str]) -> List[RuleConfig]:
    excluded = set(excluded_keys)
    return [rule for rule in rules if rule.key not in excluded]


__all__ = [
    "BatchAnalyzer",
    "FileAnalysisInput",
    "FileAnalyzer",
    "ProjectAnalysisInput",
    "filter_rules",
]
