"""Language and family classification for discovered files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from .models import Family, Language

JS_EXTENSIONS = frozenset({".js", ".jsx", ".cjs", ".mjs", ".vue"})
TS_EXTENSIONS = frozenset({".ts", ".tsx", ".cts", ".mts"})
HTML_EXTENSIONS = frozenset({".html", ".htm"})
YAML_EXTENSIONS = frozenset({".yml", ".yaml"})

# Extensions whose files may hold either plain or typed script.
_AMBIGUOUS_EXTENSIONS = frozenset({".vue"})

_TYPED_SCRIPT_BLOCK = re.compile(r"<script\b[^>]*\blang\s*=\s*[\"']tsx?[\"']", re.IGNORECASE)


@dataclass(frozen=True)
class Classification:
    """Language tag and analyzer family decided once at discovery time."""

    language: Language
    family: Family


def _extension(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).suffix.lower()


def is_ts_file(path: str, content: str) -> bool:
    extension = _extension(path)
    if extension in TS_EXTENSIONS:
        return True
    return extension in _AMBIGUOUS_EXTENSIONS and bool(_TYPED_SCRIPT_BLOCK.search(content))


def is_js_file(path: str) -> bool:
    extension = _extension(path)
    return extension in JS_EXTENSIONS or extension in HTML_EXTENSIONS or extension in YAML_EXTENSIONS


def is_html_file(path: str) -> bool:
    return _extension(path) in HTML_EXTENSIONS


def is_yaml_file(path: str) -> bool:
    return _extension(path) in YAML_EXTENSIONS


def is_candidate(path: str) -> bool:
    """Cheap extension check so unrelated files are never read."""
    extension = _extension(path)
    return extension in TS_EXTENSIONS or is_js_file(path)


def find_language(path: str, content: str) -> Optional[Language]:
    if is_ts_file(path, content):
        return Language.TS
    if is_js_file(path):
        return Language.JS
    return None


def classify(path: str, content: str) -> Optional[Classification]:
    """Return the language and family for ``path``, or None to skip the file."""
    language = find_language(path, content)
    if language is None:
        return None
    if is_html_file(path):
        return Classification(language=language, family=Family.MARKUP)
    if is_yaml_file(path):
        return Classification(language=language, family=Family.DATA)
    return Classification(language=language, family=Family.SCRIPT)


__all__ = [
    "Classification",
    "HTML_EXTENSIONS",
    "JS_EXTENSIONS",
    "TS_EXTENSIONS",
    "YAML_EXTENSIONS",
    "classify",
    "find_language",
    "is_candidate",
    "is_html_file",
    "is_js_file",
    "is_ts_file",
    "is_yaml_file",
]
