"""Tests for ruling.languages."""

from __future__ import annotations

import pytest

from ruling.languages import classify, find_language, is_candidate
from ruling.models import Family, Language


@pytest.mark.parametrize(
    ("path", "language", "family"),
    [
        ("/p/a.js", Language.JS, Family.SCRIPT),
        ("/p/a.MJS", Language.JS, Family.SCRIPT),
        ("/p/a.cjs", Language.JS, Family.SCRIPT),
        ("/p/a.jsx", Language.JS, Family.SCRIPT),
        ("/p/a.ts", Language.TS, Family.SCRIPT),
        ("/p/a.tsx", Language.TS, Family.SCRIPT),
        ("/p/a.mts", Language.TS, Family.SCRIPT),
        ("/p/index.html", Language.JS, Family.MARKUP),
        ("/p/index.htm", Language.JS, Family.MARKUP),
        ("/p/serverless.yml", Language.JS, Family.DATA),
        ("/p/template.yaml", Language.JS, Family.DATA),
    ],
)
def test_classify_by_extension(path: str, language: Language, family: Family) -> None:
    classification = classify(path, "")

    assert classification is not None
    assert classification.language is language
    assert classification.family is family


def test_vue_file_with_typed_script_block_is_typescript() -> None:
    content = '<template><div/></template>\n<script lang="ts">\nexport default {}\n</script>\n'

    assert find_language("/p/App.vue", content) is Language.TS


def test_vue_file_without_typed_script_block_is_javascript() -> None:
    content = "<template><div/></template>\n<script>\nexport default {}\n</script>\n"

    assert find_language("/p/App.vue", content) is Language.JS


def test_typed_marker_is_ignored_outside_ambiguous_extensions() -> None:
    assert find_language("/p/a.js", '<script lang="ts">') is Language.JS


@pytest.mark.parametrize("path", ["/p/README.md", "/p/style.css", "/p/Makefile", "/p/data.json"])
def test_unknown_files_are_not_classified(path: str) -> None:
    assert classify(path, "content") is None
    assert not is_candidate(path)
