"""Core data models shared across ruling components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple


class Role(str, Enum):
    """Whether a file belongs to the main sources or to the auxiliary test tree."""

    PRIMARY = "MAIN"
    AUXILIARY = "TEST"


class Language(str, Enum):
    """Closed set of language tags attached to analyzed files."""

    JS = "js"
    TS = "ts"

    @property
    def display_name(self) -> str:
        return "typescript" if self is Language.TS else "javascript"


class Family(str, Enum):
    """Analyzer family a file is routed to."""

    SCRIPT = "script"
    MARKUP = "markup"
    DATA = "data"


def to_unix_path(path: object) -> str:
    """Return ``path`` with every separator turned into a forward slash."""
    return str(path).replace("\\", "/")


@dataclass(frozen=True)
class FileRecord:
    """A discovered source file, immutable once classified."""

    content: str
    role: Role
    language: Language


FileGroup = Dict[str, FileRecord]


@dataclass
class ProjectFiles:
    """Discovered files partitioned by analyzer family."""

    script: FileGroup = field(default_factory=dict)
    markup: FileGroup = field(default_factory=dict)
    data: FileGroup = field(default_factory=dict)

    def group(self, family: Family) -> FileGroup:
        if family is Family.SCRIPT:
            return self.script
        if family is Family.MARKUP:
            return self.markup
        return self.data

    def groups(self) -> Iterator[Tuple[Family, FileGroup]]:
        """Yield each family group in dispatch order."""
        yield Family.SCRIPT, self.script
        yield Family.MARKUP, self.markup
        yield Family.DATA, self.data

    def all_files(self) -> Dict[str, FileRecord]:
        combined: Dict[str, FileRecord] = {}
        for _, group in self.groups():
            combined.update(group)
        return combined

    def __len__(self) -> int:
        return len(self.script) + len(self.markup) + len(self.data)


@dataclass
class Diagnostic:
    """One finding reported by an analyzer, passed through untouched."""

    rule_id: str
    line: Optional[int]
    column: int
    message: str
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    secondary_locations: List[Any] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Diagnostic":
        known = {
            "ruleId",
            "rule_id",
            "line",
            "column",
            "message",
            "endLine",
            "end_line",
            "endColumn",
            "end_column",
            "secondaryLocations",
            "secondary_locations",
        }
        rule_id = _first(payload, "ruleId", "rule_id")
        secondary = _first(payload, "secondaryLocations", "secondary_locations")
        return cls(
            rule_id=str(rule_id) if rule_id is not None else "",
            line=_as_int(payload.get("line")),
            column=_as_int(payload.get("column")) or 0,
            message=str(payload.get("message", "")),
            end_line=_as_int(_first(payload, "endLine", "end_line")),
            end_column=_as_int(_first(payload, "endColumn", "end_column")),
            secondary_locations=list(secondary) if isinstance(secondary, list) else [],
            extra={key: value for key, value in payload.items() if key not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "ruleId": self.rule_id,
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "secondaryLocations": list(self.secondary_locations),
        }
        if self.end_line is not None:
            data["endLine"] = self.end_line
        if self.end_column is not None:
            data["endColumn"] = self.end_column
        data.update(self.extra)
        return data


@dataclass
class ParsingError:
    """Marker an analyzer embeds in its output instead of raising."""

    message: str
    line: Optional[int] = None
    code: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ParsingError":
        code = payload.get("code")
        return cls(
            message=str(payload.get("message", "")),
            line=_as_int(payload.get("line")),
            code=str(code) if code is not None else None,
        )


@dataclass
class FileResult:
    """Analysis outcome for a single file: diagnostics or a parsing error."""

    issues: List[Diagnostic] = field(default_factory=list)
    parsing_error: Optional[ParsingError] = None
    language: Optional[Language] = None

    @classmethod
    def from_payload(cls, payload: object) -> "FileResult":
        if isinstance(payload, FileResult):
            return payload
        if not isinstance(payload, Mapping):
            raise TypeError(f"Unsupported analysis result payload: {type(payload).__name__}")

        parsing_error = None
        raw_error = _first(payload, "parsingError", "parsing_error")
        if isinstance(raw_error, ParsingError):
            parsing_error = raw_error
        elif isinstance(raw_error, Mapping):
            parsing_error = ParsingError.from_payload(raw_error)

        issues: List[Diagnostic] = []
        for raw_issue in payload.get("issues") or []:
            if isinstance(raw_issue, Diagnostic):
                issues.append(raw_issue)
            elif isinstance(raw_issue, Mapping):
                issues.append(Diagnostic.from_payload(raw_issue))

        language = payload.get("language")
        return cls(
            issues=issues,
            parsing_error=parsing_error,
            language=Language(language) if language in {"js", "ts"} else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"issues": [issue.to_dict() for issue in self.issues]}
        if self.parsing_error is not None:
            data["parsingError"] = {
                "message": self.parsing_error.message,
                "line": self.parsing_error.line,
                "code": self.parsing_error.code,
            }
        if self.language is not None:
            data["language"] = self.language.value
        return data


@dataclass
class AnalysisOutput:
    """Path-keyed analysis results; also the shape of the aggregated result."""

    files: Dict[str, FileResult] = field(default_factory=dict)

    @classmethod
    def coerce(cls, payload: object) -> "AnalysisOutput":
        """Normalise analyzer output into an ``AnalysisOutput``."""
        if isinstance(payload, AnalysisOutput):
            return payload
        if not isinstance(payload, Mapping):
            raise TypeError(f"Unsupported analysis output: {type(payload).__name__}")
        entries = payload.get("files", payload)
        if not isinstance(entries, Mapping):
            raise TypeError("Analysis output 'files' must be a mapping")
        return cls(
            files={
                to_unix_path(path): FileResult.from_payload(result)
                for path, result in entries.items()
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"files": {path: result.to_dict() for path, result in self.files.items()}}

    def __len__(self) -> int:
        return len(self.files)


@dataclass
class RuleConfig:
    """Rule activation forwarded verbatim to analyzers."""

    key: str
    configurations: List[Any] = field(default_factory=list)
    file_type_target: List[str] = field(default_factory=list)


@dataclass
class ProjectSpec:
    """Caller-supplied parameters for one project analysis run."""

    name: str
    test_dir: Optional[str] = None
    exclusions: Optional[str] = None
    folder: Optional[str] = None

    def test_dirs(self) -> List[str]:
        if not self.test_dir:
            return []
        return [part.strip() for part in self.test_dir.split(",") if part.strip()]


def _first(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None
