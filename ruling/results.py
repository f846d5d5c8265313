"""Persist aggregated results as per-rule line listings for baseline comparison."""

from __future__ import annotations

import json
import shutil
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Mapping

from .logging import get_logger
from .models import AnalysisOutput, Language, to_unix_path

RuleListing = Dict[str, Dict[str, List[int]]]


def _relative_to(path: str, project_path: str) -> str:
    prefix = project_path.rstrip("/") + "/"
    return path[len(prefix):] if path.startswith(prefix) else path


def collect_issue_lines(project_name: str, project_path: str | Path, output: AnalysisOutput) -> RuleListing:
    """Group issue lines as ``{"<language>-<rule>": {"<project>:<file>": [lines]}}``."""
    base = to_unix_path(Path(project_path).absolute())
    listings: Dict[str, Dict[str, List[int]]] = defaultdict(lambda: defaultdict(list))
    for path, result in output.files.items():
        language = result.language or Language.JS
        key = f"{project_name}:{_relative_to(path, base)}"
        for issue in result.issues:
            listing = listings[f"{language.display_name}-{issue.rule_id}"]
            # Issues without a location are still listed so the file shows up.
            listing[key].append(issue.line if issue.line is not None else 0)
    return {
        name: {key: sorted(lines) for key, lines in sorted(files.items())}
        for name, files in sorted(listings.items())
    }


class ResultWriter:
    """Writes one JSON file per language and rule under ``actual_dir/<project>``."""

    def __init__(self, actual_dir: str | Path) -> None:
        self.actual_dir = Path(actual_dir)
        self.logger = get_logger("results")

    def project_dir(self, project_name: str) -> Path:
        return self.actual_dir / project_name

    def write(self, project_name: str, project_path: str | Path, output: AnalysisOutput) -> List[Path]:
        target = self.project_dir(project_name)
        if target.exists():
            shutil.rmtree(target)
        target.mkdir(parents=True, exist_ok=True)

        written: List[Path] = []
        for name, files in collect_issue_lines(project_name, project_path, output).items():
            path = target / f"{name}.json"
            path.write_text(json.dumps(files, indent=1, sort_keys=True) + "\n", encoding="utf-8")
            written.append(path)

        self.logger.info("Wrote %d rule file(s) for %s to %s", len(written), project_name, target)
        return written


def load_results(directory: str | Path) -> RuleListing:
    """Read a directory written by ``ResultWriter`` back into a listing.

    Files that are not JSON objects and entries that are not lists of line
    numbers are skipped.
    """
    listings: RuleListing = {}
    for path in sorted(Path(directory).glob("*.json")):
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, Mapping):
            continue
        listings[path.stem] = {
            str(key): list(lines)
            for key, lines in payload.items()
            if isinstance(lines, list)
            and all(isinstance(line, int) and not isinstance(line, bool) for line in lines)
        }
    return listings


__all__ = ["ResultWriter", "RuleListing", "collect_issue_lines", "load_results"]
