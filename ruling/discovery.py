"""Source tree discovery: walk, exclude, classify and group project files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .errors import DiscoveryError
from .exclusions import ExclusionSet
from .filters import AcceptPredicate, accept as default_accept
from .languages import classify, is_candidate
from .logging import get_logger
from .models import Family, FileRecord, ProjectFiles, ProjectSpec, Role, to_unix_path

_BOM = "\ufeff"


def _raise_walk_error(error: OSError) -> None:
    raise DiscoveryError(to_unix_path(error.filename or ""), error.strerror or str(error)) from error


def _iter_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            path = current_dir / filename
            # Dangling symlinks and special files are not analyzable sources.
            if not path.is_file():
                continue
            yield path


def _read_text(path: Path) -> str:
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise DiscoveryError(to_unix_path(path), exc.strerror or str(exc)) from exc
    if content.startswith(_BOM):
        content = content[1:]
    return content


def _relative_path(absolute_path: str, prefix_length: int) -> str:
    return absolute_path[prefix_length:]


class ProjectScanner:
    """Walks a source tree and partitions its files by analyzer family."""

    def __init__(self, accept: Optional[AcceptPredicate] = None) -> None:
        self.accept = accept or default_accept
        self.logger = get_logger("discovery")

    def discover(
        self,
        root: str | Path,
        exclusions: ExclusionSet,
        role: Role = Role.PRIMARY,
        files: Optional[ProjectFiles] = None,
    ) -> ProjectFiles:
        """Add every analyzable file under ``root`` to ``files`` tagged with ``role``.

        Paths already present in ``files`` keep their original record.
        """
        root_path = Path(root).expanduser().absolute()
        if not root_path.exists():
            raise DiscoveryError(to_unix_path(root_path), "directory not found")
        if not root_path.is_dir():
            raise DiscoveryError(to_unix_path(root_path), "not a directory")

        files = files if files is not None else ProjectFiles()
        prefix_length = len(to_unix_path(root_path).rstrip("/")) + 1
        added = skipped = 0

        for path in _iter_files(root_path):
            absolute_path = to_unix_path(path)
            relative_path = _relative_path(absolute_path, prefix_length)
            if exclusions.is_excluded(relative_path, absolute_path):
                skipped += 1
                continue
            if not is_candidate(absolute_path):
                continue

            content = _read_text(path)
            classification = classify(absolute_path, content)
            if classification is None:
                skipped += 1
                continue

            if classification.family is Family.SCRIPT and not self.accept(absolute_path, content):
                self.logger.debug("Rejected generated or oversized file %s", relative_path)
                skipped += 1
                continue

            group = files.group(classification.family)
            if absolute_path in group:
                continue
            group[absolute_path] = FileRecord(
                content=content,
                role=role,
                language=classification.language,
            )
            added += 1

        self.logger.debug(
            "Discovered %d %s file(s) under %s (%d skipped)",
            added,
            role.value,
            root_path,
            skipped,
        )
        return files

    def collect(
        self,
        spec: ProjectSpec,
        project_path: str | Path,
        exclusions: Optional[ExclusionSet] = None,
    ) -> ProjectFiles:
        """Discover main sources, then each auxiliary test directory of ``spec``."""
        if exclusions is None:
            exclusions = ExclusionSet.for_project(spec.exclusions, spec.test_dir)
        project_root = Path(project_path)
        files = self.discover(project_root, exclusions, Role.PRIMARY)
        for test_dir in spec.test_dirs():
            self.discover(project_root / test_dir, exclusions, Role.AUXILIARY, files)
        return files


def count_by_family(files: ProjectFiles) -> Tuple[int, int, int]:
    return len(files.script), len(files.markup), len(files.data)


__all__ = ["ProjectScanner", "count_by_family"]
