"""Test doubles for the analyzer capabilities."""

from __future__ import annotations

import threading
from typing import Dict, List

from ruling.analyzers import BatchAnalyzer, FileAnalysisInput, FileAnalyzer, ProjectAnalysisInput
from ruling.errors import AnalysisFailure
from ruling.models import AnalysisOutput, Diagnostic, FileResult, ParsingError

BROKEN_MARKER = "@@broken@@"


def _todo_issues(content: str) -> List[Diagnostic]:
    issues = []
    for index, line in enumerate(content.splitlines(), start=1):
        column = line.find("TODO")
        if column >= 0:
            issues.append(
                Diagnostic(rule_id="S1135", line=index, column=column, message="Complete the task associated to this TODO comment.")
            )
    return issues


class RecordingBatchAnalyzer(BatchAnalyzer):
    """Reports TODO comments and embeds a parsing error for broken files."""

    def __init__(self) -> None:
        self.calls: List[ProjectAnalysisInput] = []

    def analyze_project(self, payload: ProjectAnalysisInput) -> AnalysisOutput:
        self.calls.append(payload)
        output = AnalysisOutput()
        for path, record in payload.files.items():
            if BROKEN_MARKER in record.content:
                line = record.content.splitlines().index(BROKEN_MARKER) + 1
                output.files[path] = FileResult(
                    parsing_error=ParsingError(message="Unexpected token", line=line, code="PARSING")
                )
            else:
                output.files[path] = FileResult(issues=_todo_issues(record.content))
        return output


class RecordingFileAnalyzer(FileAnalyzer):
    """Reports TODO comments and raises for broken files."""

    def __init__(self) -> None:
        self.calls: List[FileAnalysisInput] = []
        self._lock = threading.Lock()

    def analyze_file(self, payload: FileAnalysisInput) -> FileResult:
        with self._lock:
            self.calls.append(payload)
        if BROKEN_MARKER in payload.file_content:
            line = payload.file_content.splitlines().index(BROKEN_MARKER) + 1
            raise AnalysisFailure("Unexpected character", line=line)
        return FileResult(issues=_todo_issues(payload.file_content))

    @property
    def paths(self) -> List[str]:
        return [call.file_path for call in self.calls]


class DictBatchAnalyzer(BatchAnalyzer):
    """Returns JSON-like payloads as a bridge process would."""

    def analyze_project(self, payload: ProjectAnalysisInput) -> Dict[str, object]:
        return {
            "files": {
                path: {"issues": [{"ruleId": "S100", "line": 1, "column": 0, "message": "Rename.", "secondaryLocations": []}]}
                for path in payload.files
            }
        }


__all__ = [
    "BROKEN_MARKER",
    "DictBatchAnalyzer",
    "RecordingBatchAnalyzer",
    "RecordingFileAnalyzer",
]
