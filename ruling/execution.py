"""Failure-isolated execution of per-file analyzers."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from .analyzers.base import FileAnalysisInput, FileAnalyzer
from .errors import AnalysisFailure
from .logging import ProgressReport, get_logger
from .merge import parsing_failure_result
from .models import AnalysisOutput, FileGroup, FileRecord, FileResult, RuleConfig


def failure_line(exc: BaseException) -> Optional[int]:
    """Best-effort line number carried by an analyzer exception."""
    line = getattr(exc, "line", None)
    if isinstance(line, int) and not isinstance(line, bool):
        return line
    mark = getattr(exc, "problem_mark", None)
    mark_line = getattr(mark, "line", None)
    if isinstance(mark_line, int):
        return mark_line + 1
    return None


def failure_message(exc: BaseException) -> str:
    if isinstance(exc, AnalysisFailure):
        return exc.message
    text = str(exc).strip()
    return text or exc.__class__.__name__


class FileAnalysisExecutor:
    """Runs a per-file analyzer over a group, one result per file no matter what.

    Invocations share nothing but the read-only rule list, so they run on a
    bounded thread pool when ``max_workers`` is greater than one.
    """

    def __init__(self, max_workers: int = 1) -> None:
        self.max_workers = max(1, max_workers)
        self.logger = get_logger("execution")

    def run(
        self,
        files: FileGroup,
        analyzer: FileAnalyzer,
        rules: Sequence[RuleConfig] = (),
        *,
        linter_id: Optional[str] = None,
        title: str = "Analysis",
    ) -> AnalysisOutput:
        output = AnalysisOutput()
        if not files:
            return output

        progress = ProgressReport(title, len(files), logger=self.logger)
        progress.start()
        rule_list = list(rules)

        def _task(item: Tuple[str, FileRecord]) -> Tuple[str, FileResult]:
            path, record = item
            result = self.analyze_one(analyzer, path, record, rule_list, linter_id)
            progress.advance(path)
            return path, result

        items = list(files.items())
        if self.max_workers == 1 or len(items) == 1:
            for path, result in map(_task, items):
                output.files[path] = result
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="ruling-file") as pool:
                for path, result in pool.map(_task, items):
                    output.files[path] = result

        progress.stop()
        return output

    def analyze_one(
        self,
        analyzer: FileAnalyzer,
        path: str,
        record: FileRecord,
        rules: Sequence[RuleConfig],
        linter_id: Optional[str] = None,
    ) -> FileResult:
        payload = FileAnalysisInput(
            file_path=path,
            file_content=record.content,
            rules=rules,
            linter_id=linter_id,
            language=record.language,
        )
        try:
            result = FileResult.from_payload(analyzer.analyze_file(payload))
        except Exception as exc:
            self._log_failure(path, exc)
            result = parsing_failure_result(failure_message(exc), failure_line(exc))
        return replace(result, language=record.language)

    def _log_failure(self, path: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.warning("Failed to analyze %s: %s", path, exc, exc_info=exc)
        else:
            self.logger.warning("Failed to analyze %s: %s", path, exc)


__all__ = ["FileAnalysisExecutor", "failure_line", "failure_message"]
