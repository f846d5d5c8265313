"""Tests for ruling.merge."""

from __future__ import annotations

import pytest

from ruling.errors import AggregationConflictError
from ruling.merge import (
    PARSING_FAILURE_RULE,
    check_completeness,
    is_parsing_failure,
    merge_results,
    parsing_failure_result,
)
from ruling.models import AnalysisOutput, Diagnostic, FileRecord, FileResult, Language, ParsingError, Role


def _issue(rule_id: str = "S100", line: int = 1) -> Diagnostic:
    return Diagnostic(rule_id=rule_id, line=line, column=4, message="msg", end_line=line, end_column=9)


def test_merge_combines_disjoint_result_sets() -> None:
    first = AnalysisOutput(files={"/p/a.js": FileResult(issues=[_issue()])})
    second = AnalysisOutput(files={"/p/b.html": FileResult()})
    third = AnalysisOutput(files={"/p/c.yml": FileResult()})

    merged = merge_results(first, second, third)

    assert set(merged.files) == {"/p/a.js", "/p/b.html", "/p/c.yml"}
    assert merged.files["/p/a.js"].issues == [_issue()]


def test_merge_rejects_duplicate_paths() -> None:
    first = AnalysisOutput(files={"/p/a.js": FileResult()})
    second = AnalysisOutput(files={"/p/a.js": FileResult(issues=[_issue()])})

    with pytest.raises(AggregationConflictError) as excinfo:
        merge_results(first, second)

    assert excinfo.value.path == "/p/a.js"
    assert "/p/a.js has been analyzed in multiple paths" in str(excinfo.value)


def test_merge_normalizes_embedded_parsing_errors() -> None:
    output = AnalysisOutput(
        files={"/p/b.js": FileResult(parsing_error=ParsingError(message="Unexpected token", line=3))}
    )

    merged = merge_results(output)

    assert merged.files["/p/b.js"] == parsing_failure_result("Unexpected token", 3)
    assert merged.files["/p/b.js"].parsing_error is None


def test_parsing_failure_shape_uses_placeholders() -> None:
    result = parsing_failure_result("boom")

    assert is_parsing_failure(result)
    issue = result.issues[0]
    assert issue.rule_id == PARSING_FAILURE_RULE
    assert issue.line is None
    assert issue.column == 0
    assert issue.end_line is None
    assert issue.secondary_locations == []


def test_merge_attaches_discovered_language() -> None:
    files = {"/p/a.ts": FileRecord(content="", role=Role.PRIMARY, language=Language.TS)}
    output = AnalysisOutput(files={"/p/a.ts": FileResult(issues=[_issue()])})

    merged = merge_results(output, files=files)

    assert merged.files["/p/a.ts"].language is Language.TS
    assert output.files["/p/a.ts"].language is None


def test_merge_accepts_plain_payloads() -> None:
    payload = {
        "files": {
            "C:\\p\\a.js": {
                "issues": [
                    {
                        "ruleId": "S1481",
                        "line": 2,
                        "column": 6,
                        "endLine": 2,
                        "endColumn": 7,
                        "message": "Remove the declaration of the unused 'x' variable.",
                        "secondaryLocations": [],
                        "quickFixes": [],
                    }
                ]
            },
            "C:\\p\\b.js": {"issues": [], "parsingError": {"message": "Unexpected token", "line": 1}},
        }
    }

    merged = merge_results(payload)

    issue = merged.files["C:/p/a.js"].issues[0]
    assert issue.rule_id == "S1481"
    assert issue.end_column == 7
    assert issue.extra == {"quickFixes": []}
    assert is_parsing_failure(merged.files["C:/p/b.js"])


def test_check_completeness_reports_missing_and_unexpected() -> None:
    files = {
        "/p/a.js": FileRecord(content="", role=Role.PRIMARY, language=Language.JS),
        "/p/b.js": FileRecord(content="", role=Role.PRIMARY, language=Language.JS),
    }
    output = AnalysisOutput(files={"/p/a.js": FileResult(), "/p/z.js": FileResult()})

    missing, unexpected = check_completeness(output, files)

    assert missing == ["/p/b.js"]
    assert unexpected == ["/p/z.js"]
