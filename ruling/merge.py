"""Aggregation of independently produced analysis results."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Mapping, Optional, Tuple

from .errors import AggregationConflictError
from .models import AnalysisOutput, Diagnostic, FileRecord, FileResult

PARSING_FAILURE_RULE = "S2260"


def parsing_failure_result(message: str, line: Optional[int] = None) -> FileResult:
    """Return the single normalized representation of a file that failed to parse.

    Column and secondary locations are placeholders; the failure cannot supply them.
    """
    return FileResult(
        issues=[
            Diagnostic(
                rule_id=PARSING_FAILURE_RULE,
                line=line,
                column=0,
                message=message,
                secondary_locations=[],
            )
        ]
    )


def is_parsing_failure(result: FileResult) -> bool:
    return len(result.issues) == 1 and result.issues[0].rule_id == PARSING_FAILURE_RULE


def merge_results(
    *outputs: object,
    files: Optional[Mapping[str, FileRecord]] = None,
) -> AnalysisOutput:
    """Merge result sets into one path-keyed output.

    Raises ``AggregationConflictError`` when a path appears in more than one set.
    """
    merged = AnalysisOutput()
    for output in outputs:
        for path, result in AnalysisOutput.coerce(output).files.items():
            if path in merged.files:
                raise AggregationConflictError(path)
            if result.parsing_error is not None:
                error = result.parsing_error
                result = replace(parsing_failure_result(error.message, error.line), language=result.language)
            record = files.get(path) if files is not None else None
            if record is not None:
                result = replace(result, language=record.language)
            merged.files[path] = result
    return merged


def check_completeness(
    output: AnalysisOutput, files: Mapping[str, FileRecord]
) -> Tuple[List[str], List[str]]:
    """Return (missing, unexpected) paths of ``output`` against the discovered files."""
    expected = set(files)
    actual = set(output.files)
    return sorted(expected - actual), sorted(actual - expected)


__all__ = [
    "PARSING_FAILURE_RULE",
    "check_completeness",
    "is_parsing_failure",
    "merge_results",
    "parsing_failure_result",
]
