"""Pipeline orchestration for project analysis runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, cast

from .analyzers import AnalyzerSet, discover_analyzers
from .analyzers.base import BatchAnalyzer, FileAnalyzer, ProjectAnalysisInput, filter_rules
from .config import RulingConfig
from .discovery import ProjectScanner, count_by_family
from .exclusions import ExclusionSet
from .execution import FileAnalysisExecutor
from .filters import AcceptPredicate, ExclusionsFilter
from .logging import get_logger
from .merge import check_completeness, is_parsing_failure, merge_results
from .models import AnalysisOutput, Family, ProjectFiles, ProjectSpec, RuleConfig, to_unix_path
from .results import ResultWriter

MARKUP_LINTER_ID = "html"


@dataclass
class RunOutcome:
    """Result of one project analysis run."""

    project: ProjectSpec
    project_path: Path
    output: AnalysisOutput
    written: List[Path] = field(default_factory=list)

    @property
    def parsing_failures(self) -> List[str]:
        return sorted(path for path, result in self.output.files.items() if is_parsing_failure(result))


class ProjectOrchestrator:
    """Coordinates discovery, per-family dispatch, merge and persistence.

    Holds no state between runs: every call rediscovers the tree.
    """

    def __init__(
        self,
        config: RulingConfig,
        analyzers: Optional[AnalyzerSet] = None,
        scanner: Optional[ProjectScanner] = None,
        writer: Optional[ResultWriter] = None,
        accept: Optional[AcceptPredicate] = None,
    ) -> None:
        self.config = config
        self.analyzers = analyzers if analyzers is not None else discover_analyzers()
        self.scanner = scanner or ProjectScanner(accept or ExclusionsFilter(config.max_file_size_kb))
        self.writer = writer or ResultWriter(config.actual_dir)
        self.executor = FileAnalysisExecutor(config.max_workers)
        self.logger = get_logger("orchestrator")

    def collect_files(self, spec: ProjectSpec) -> Tuple[Path, ProjectFiles]:
        project_path = self.config.project_path(spec).absolute()
        exclusions = ExclusionSet.for_project(spec.exclusions, spec.test_dir)
        files = self.scanner.collect(spec, project_path, exclusions)
        script_count, markup_count, data_count = count_by_family(files)
        self.logger.debug(
            "Collected %d script, %d markup and %d data file(s) for %s",
            script_count,
            markup_count,
            data_count,
            spec.name,
        )
        return project_path, files

    def analyze(self, spec: ProjectSpec, rules: Sequence[RuleConfig]) -> AnalysisOutput:
        """Discover, dispatch and merge; returns one result per accepted file."""
        _, output = self._analyze(spec, rules)
        return output

    def run(self, spec: ProjectSpec, rules: Sequence[RuleConfig]) -> RunOutcome:
        """Analyze ``spec`` and write its results for baseline comparison."""
        self.logger.info("Starting analysis of %s", spec.name)
        project_path, output = self._analyze(spec, rules)
        written = self.writer.write(spec.name, project_path, output)
        outcome = RunOutcome(project=spec, project_path=project_path, output=output, written=written)
        self.logger.info(
            "Analyzed %d file(s) for %s (%d parsing failure(s))",
            len(output),
            spec.name,
            len(outcome.parsing_failures),
        )
        return outcome

    def _analyze(self, spec: ProjectSpec, rules: Sequence[RuleConfig]) -> Tuple[Path, AnalysisOutput]:
        project_path, files = self.collect_files(spec)
        rule_list = list(rules)

        script_results = self._analyze_script(project_path, files, rule_list)
        markup_results = self._analyze_per_file(
            Family.MARKUP,
            files,
            filter_rules(rule_list, self.config.markup_excluded_rules),
            linter_id=MARKUP_LINTER_ID,
        )
        data_results = self._analyze_per_file(Family.DATA, files, rule_list)

        all_files = files.all_files()
        output = merge_results(script_results, markup_results, data_results, files=all_files)

        missing, unexpected = check_completeness(output, all_files)
        if missing:
            self.logger.warning("No result reported for %d file(s): %s", len(missing), ", ".join(missing))
        if unexpected:
            self.logger.warning(
                "Results reported for %d undiscovered file(s): %s", len(unexpected), ", ".join(unexpected)
            )
        return project_path, output

    def _analyze_script(
        self,
        project_path: Path,
        files: ProjectFiles,
        rules: List[RuleConfig],
    ) -> AnalysisOutput:
        if not files.script:
            return AnalysisOutput()
        analyzer = cast(BatchAnalyzer, self.analyzers.require(Family.SCRIPT))
        payload = ProjectAnalysisInput(
            rules=rules,
            base_dir=to_unix_path(project_path),
            files=dict(files.script),
        )
        self.logger.debug("Submitting %d script file(s) to %s", len(files.script), type(analyzer).__name__)
        return AnalysisOutput.coerce(analyzer.analyze_project(payload))

    def _analyze_per_file(
        self,
        family: Family,
        files: ProjectFiles,
        rules: List[RuleConfig],
        *,
        linter_id: Optional[str] = None,
    ) -> AnalysisOutput:
        group = files.group(family)
        if not group:
            return AnalysisOutput()
        analyzer = cast(FileAnalyzer, self.analyzers.require(family))
        return self.executor.run(
            group,
            analyzer,
            rules,
            linter_id=linter_id,
            title=f"Progress of {family.value} analysis",
        )


def summarize(output: AnalysisOutput) -> Dict[str, int]:
    """Count issues per rule across an aggregated result."""
    counts: Dict[str, int] = {}
    for result in output.files.values():
        for issue in result.issues:
            counts[issue.rule_id] = counts.get(issue.rule_id, 0) + 1
    return dict(sorted(counts.items()))


__all__ = ["MARKUP_LINTER_ID", "ProjectOrchestrator", "RunOutcome", "summarize"]
