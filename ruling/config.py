"""Configuration loading for ruling runs (.ruling.yml)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .filters import DEFAULT_MAX_FILE_SIZE_KB
from .models import ProjectSpec, RuleConfig

CONFIG_FILENAME = ".ruling.yml"

DEFAULT_MAX_WORKERS = 4
DEFAULT_MARKUP_EXCLUDED_RULES = ("no-var",)


@dataclass
class RulingConfig:
    """Represents the settings defined in .ruling.yml."""

    root: Path
    sources_dir: Path
    actual_dir: Path
    max_workers: int = DEFAULT_MAX_WORKERS
    max_file_size_kb: int = DEFAULT_MAX_FILE_SIZE_KB
    markup_excluded_rules: List[str] = field(default_factory=lambda: list(DEFAULT_MARKUP_EXCLUDED_RULES))
    projects: List[ProjectSpec] = field(default_factory=list)

    def project(self, name: str) -> ProjectSpec:
        for spec in self.projects:
            if spec.name == name:
                return spec
        raise ConfigError(f"Unknown project '{name}' (configured: {', '.join(self.project_names()) or 'none'})")

    def project_names(self) -> List[str]:
        return [spec.name for spec in self.projects]

    def project_path(self, spec: ProjectSpec) -> Path:
        return self.sources_dir / (spec.folder or spec.name)


def load_config(config_path: Path) -> RulingConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return _defaults(root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = _defaults(root)
    sources_dir = _as_path(root, data.get("sources_dir")) or defaults.sources_dir
    actual_dir = _as_path(root, data.get("actual_dir")) or defaults.actual_dir

    max_workers = _as_int(data.get("max_workers"))
    if max_workers is not None and max_workers < 1:
        raise ConfigError("max_workers must be a positive integer")
    max_file_size_kb = _as_int(data.get("max_file_size_kb"))
    if max_file_size_kb is not None and max_file_size_kb < 1:
        raise ConfigError("max_file_size_kb must be a positive integer")

    excluded = data.get("markup_excluded_rules")
    markup_excluded_rules = (
        _as_str_list(excluded) if excluded is not None else list(DEFAULT_MARKUP_EXCLUDED_RULES)
    )

    projects = [_parse_project(entry) for entry in _as_list(data.get("projects"))]
    names = [spec.name for spec in projects]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ConfigError(f"Duplicate project names: {', '.join(duplicates)}")

    return RulingConfig(
        root=root,
        sources_dir=sources_dir,
        actual_dir=actual_dir,
        max_workers=max_workers or DEFAULT_MAX_WORKERS,
        max_file_size_kb=max_file_size_kb or DEFAULT_MAX_FILE_SIZE_KB,
        markup_excluded_rules=markup_excluded_rules,
        projects=projects,
    )


def load_rules(path: Path) -> List[RuleConfig]:
    """Read an already serialized rule list; entries are forwarded verbatim."""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to read rules from {path}: {exc}") from exc
    if not isinstance(payload, list):
        raise ConfigError(f"{path} must contain a list of rule configurations")

    rules: List[RuleConfig] = []
    for entry in payload:
        if not isinstance(entry, dict) or not isinstance(entry.get("key"), str):
            raise ConfigError(f"Invalid rule entry in {path}: {entry!r}")
        rules.append(
            RuleConfig(
                key=entry["key"],
                configurations=_as_list(entry.get("configurations")),
                file_type_target=_as_str_list(entry.get("fileTypeTarget", entry.get("file_type_target"))),
            )
        )
    return rules


def _defaults(root: Path) -> RulingConfig:
    return RulingConfig(
        root=root,
        sources_dir=root / "sources",
        actual_dir=root / "actual",
    )


def _parse_project(entry: Any) -> ProjectSpec:
    if isinstance(entry, str):
        return ProjectSpec(name=entry)
    if not isinstance(entry, dict):
        raise ConfigError(f"Project entries must be mappings, got {entry!r}")
    name = _as_str(entry.get("name"))
    if not name:
        raise ConfigError("Every project entry needs a name")
    return ProjectSpec(
        name=name,
        test_dir=_as_str(entry.get("testDir", entry.get("test_dir"))),
        exclusions=_as_str(entry.get("exclusions")),
        folder=_as_str(entry.get("folder")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else (root / path).resolve()


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "RulingConfig", "load_config", "load_rules"]
