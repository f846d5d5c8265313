"""Built-in structured-data analyzer backed by PyYAML."""

from __future__ import annotations

import yaml

from ..errors import AnalysisFailure
from ..models import FileResult
from .base import FileAnalysisInput, FileAnalyzer


class YamlSyntaxAnalyzer(FileAnalyzer):
    """Reports nothing for well-formed YAML and raises on syntax errors."""

    def analyze_file(self, payload: FileAnalysisInput) -> FileResult:
        try:
            for _ in yaml.safe_load_all(payload.file_content):
                pass
        except yaml.MarkedYAMLError as exc:
            mark = exc.problem_mark or exc.context_mark
            line = mark.line + 1 if mark is not None else None
            message = exc.problem or str(exc)
            raise AnalysisFailure(f"Unable to parse file: {message}", line=line) from exc
        except yaml.YAMLError as exc:
            raise AnalysisFailure(f"Unable to parse file: {exc}") from exc
        return FileResult()


__all__ = ["YamlSyntaxAnalyzer"]
