"""Tests for the client script bundler."""

from __future__ import annotations

import typing as typ

import pytest

from sitesmith.config import PACKAGE_ROOT
from sitesmith.errors import FilesystemFailure, MinificationFailure
from sitesmith.pipeline import ScriptBundler
from sitesmith.pipeline.scripts import find_unterminated

if typ.TYPE_CHECKING:
    from pathlib import Path

SITE_JS = PACKAGE_ROOT / "assets" / "js" / "site.js"


def test_packaged_script_is_minified() -> None:
    bundled = ScriptBundler(SITE_JS).bundle()
    source = SITE_JS.read_text(encoding="utf-8")
    assert len(bundled) < len(source)
    assert "Client behaviour shared" not in bundled
    assert "is-visible" in bundled
    assert "alert alert-success" in bundled


def test_bundle_is_deterministic() -> None:
    bundler = ScriptBundler(SITE_JS)
    assert bundler.bundle() == bundler.bundle()


def test_bundle_accepts_explicit_source(tmp_path: Path) -> None:
    bundler = ScriptBundler(tmp_path / "unused.js")
    result = bundler.bundle("// note\nvar  answer  =  42;\n")
    assert result == "var answer=42;\n"


def test_template_literals_are_preserved(tmp_path: Path) -> None:
    bundler = ScriptBundler(tmp_path / "unused.js")
    result = bundler.bundle("var s = `a  /* kept */  b`;")
    assert "`a  /* kept */  b`" in result


def test_empty_script_bundles_to_empty_output(tmp_path: Path) -> None:
    assert ScriptBundler(tmp_path / "unused.js").bundle("/* only a comment */") == ""


@pytest.mark.parametrize(
    ("source", "kind"),
    [
        ("var a = 1; /* never closed", "block comment"),
        ('var s = "abc', "string"),
        ("var s = 'abc\nvar t = 1;", "string"),
        ("var t = `open", "template literal"),
        ("var r = /abc", "regular expression"),
    ],
)
def test_unterminated_tokens_raise(tmp_path: Path, source: str, kind: str) -> None:
    bundler = ScriptBundler(tmp_path / "unused.js")
    with pytest.raises(MinificationFailure, match=f"unterminated {kind}"):
        bundler.bundle(source)


@pytest.mark.parametrize(
    "source",
    [
        'var r = /"/g;',
        "var r = /[/]/.test(s);",
        "var x = a / b / c;",
        "var url = 'http://example.com/*';",
        "// trailing comment without newline",
    ],
)
def test_closed_tokens_are_accepted(source: str) -> None:
    assert find_unterminated(source) is None


def test_regex_literals_survive_minification(tmp_path: Path) -> None:
    bundler = ScriptBundler(tmp_path / "unused.js")
    assert '/"/g' in bundler.bundle('var quote = /"/g;\n')


def test_missing_asset_raises(tmp_path: Path) -> None:
    with pytest.raises(FilesystemFailure):
        ScriptBundler(tmp_path / "missing.js").bundle()
