"""Analyzer contracts, built-in analyzers and plug-in discovery."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata
from typing import Callable, Dict, Iterable, Optional, Union

from ..errors import ConfigError
from ..models import Family
from .base import BatchAnalyzer, FileAnalysisInput, FileAnalyzer, ProjectAnalysisInput, filter_rules
from .yaml_syntax import YamlSyntaxAnalyzer

_ENTRY_POINT_GROUP = "ruling.analyzers"

AnyAnalyzer = Union[BatchAnalyzer, FileAnalyzer]

_BUILTIN_FACTORIES: Dict[Family, Callable[[], AnyAnalyzer]] = {
    Family.DATA: YamlSyntaxAnalyzer,
}

_EXPECTED_TYPES = {
    Family.SCRIPT: BatchAnalyzer,
    Family.MARKUP: FileAnalyzer,
    Family.DATA: FileAnalyzer,
}


@dataclass
class AnalyzerSet:
    """The analyzer responsible for each file family."""

    script: Optional[BatchAnalyzer] = None
    markup: Optional[FileAnalyzer] = None
    data: Optional[FileAnalyzer] = None

    def get(self, family: Family) -> Optional[AnyAnalyzer]:
        return getattr(self, family.value)

    def require(self, family: Family) -> AnyAnalyzer:
        analyzer = self.get(family)
        if analyzer is None:
            raise ConfigError(
                f"No analyzer registered for the {family.value} family; "
                f"install a plug-in exposing the '{_ENTRY_POINT_GROUP}' entry point '{family.value}'"
            )
        return analyzer


def discover_analyzers(overrides: Optional[Dict[Family, AnyAnalyzer]] = None) -> AnalyzerSet:
    """Return the analyzer set from built-ins, entry points and explicit overrides.

    Entry points take precedence over built-ins; overrides take precedence over both.
    """
    found: Dict[Family, AnyAnalyzer] = {}
    for family, factory in _BUILTIN_FACTORIES.items():
        found[family] = factory()

    for entry in _iter_entry_points():
        try:
            family = Family(entry.name.lower())
        except ValueError as exc:
            raise ConfigError(f"Unknown analyzer family in entry point '{entry.name}'") from exc
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise ConfigError(f"Failed to load analyzer entry point '{entry.name}': {exc}") from exc
        found[family] = _coerce_analyzer(family, loaded)

    for family, analyzer in (overrides or {}).items():
        found[family] = _coerce_analyzer(family, analyzer)

    return AnalyzerSet(
        script=found.get(Family.SCRIPT),  # type: ignore[arg-type]
        markup=found.get(Family.MARKUP),  # type: ignore[arg-type]
        data=found.get(Family.DATA),  # type: ignore[arg-type]
    )


def _coerce_analyzer(family: Family, obj: object) -> AnyAnalyzer:
    expected = _EXPECTED_TYPES[family]
    if isinstance(obj, expected):
        return obj
    if isinstance(obj, type) and issubclass(obj, expected):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, expected):
            return instance
    raise ConfigError(
        f"Analyzer for the {family.value} family must be a {expected.__name__} subclass or factory"
    )


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover - defensive guard
        return []

    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]

    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "AnalyzerSet",
    "BatchAnalyzer",
    "FileAnalysisInput",
    "FileAnalyzer",
    "ProjectAnalysisInput",
    "YamlSyntaxAnalyzer",
    "discover_analyzers",
    "filter_rules",
]
