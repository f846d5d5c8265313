"""Tests for ruling.results."""

from __future__ import annotations

import json
from pathlib import Path

from ruling.merge import parsing_failure_result
from ruling.models import AnalysisOutput, Diagnostic, FileResult, Language
from ruling.results import ResultWriter, collect_issue_lines, load_results


def _issue(rule_id: str, line: int) -> Diagnostic:
    return Diagnostic(rule_id=rule_id, line=line, column=0, message="m")


def _output(root: Path) -> AnalysisOutput:
    base = root.absolute().as_posix()
    failure = parsing_failure_result("Unexpected token", 4)
    failure.language = Language.JS
    return AnalysisOutput(
        files={
            f"{base}/src/b.js": FileResult(issues=[_issue("S100", 9), _issue("S100", 2)], language=Language.JS),
            f"{base}/src/a.ts": FileResult(issues=[_issue("S100", 1)], language=Language.TS),
            f"{base}/src/broken.js": failure,
            f"{base}/src/clean.js": FileResult(language=Language.JS),
        }
    )


def test_collect_issue_lines_groups_by_language_and_rule(tmp_path: Path) -> None:
    listing = collect_issue_lines("demo", tmp_path, _output(tmp_path))

    assert listing == {
        "javascript-S100": {"demo:src/b.js": [2, 9]},
        "javascript-S2260": {"demo:src/broken.js": [4]},
        "typescript-S100": {"demo:src/a.ts": [1]},
    }


def test_writer_writes_one_file_per_rule(tmp_path: Path) -> None:
    writer = ResultWriter(tmp_path / "actual")

    written = writer.write("demo", tmp_path, _output(tmp_path))

    assert sorted(path.name for path in written) == [
        "javascript-S100.json",
        "javascript-S2260.json",
        "typescript-S100.json",
    ]
    payload = json.loads((tmp_path / "actual" / "demo" / "javascript-S100.json").read_text(encoding="utf-8"))
    assert payload == {"demo:src/b.js": [2, 9]}


def test_writer_removes_stale_rule_files(tmp_path: Path) -> None:
    writer = ResultWriter(tmp_path / "actual")
    stale = tmp_path / "actual" / "demo" / "javascript-S999.json"
    stale.parent.mkdir(parents=True)
    stale.write_text("{}", encoding="utf-8")

    writer.write("demo", tmp_path, AnalysisOutput())

    assert not stale.exists()
    assert (tmp_path / "actual" / "demo").is_dir()


def test_load_results_reads_back_written_listing(tmp_path: Path) -> None:
    writer = ResultWriter(tmp_path / "actual")
    output = _output(tmp_path)
    writer.write("demo", tmp_path, output)

    assert load_results(writer.project_dir("demo")) == collect_issue_lines("demo", tmp_path, output)


def test_load_results_skips_malformed_entries(tmp_path: Path) -> None:
    (tmp_path / "javascript-S100.json").write_text(
        json.dumps({"demo:a.js": [1, 3], "demo:b.js": ["x"], "demo:c.js": "4"}), encoding="utf-8"
    )
    (tmp_path / "javascript-S200.json").write_text("[1, 2]", encoding="utf-8")

    assert load_results(tmp_path) == {"javascript-S100": {"demo:a.js": [1, 3]}}
