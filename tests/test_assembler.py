"""Tests for fragment rendering and page assembly."""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup

from sitesmith.config import PACKAGE_ROOT
from sitesmith.errors import AssemblyFailure
from sitesmith.models import SectionDefinition
from sitesmith.pipeline import HtmlAssembler

if typ.TYPE_CHECKING:
    from pathlib import Path

TEMPLATES = PACKAGE_ROOT / "templates"


def _definition(name: str, fragment_ref: str) -> SectionDefinition:
    return SectionDefinition(
        name=name, label=name.title(), category="content", fragment_ref=fragment_ref
    )


@pytest.fixture
def assembler() -> HtmlAssembler:
    return HtmlAssembler(TEMPLATES)


def test_fragments_follow_requested_order(assembler: HtmlAssembler) -> None:
    definitions = [
        _definition("contact", "contact.jinja"),
        _definition("hero", "hero.jinja"),
    ]
    resolved = assembler.resolve(definitions, title="Acme", year=2026)
    html, sections = assembler.assemble(resolved, "Acme", year=2026)

    soup = BeautifulSoup(html, "html.parser")
    ids = [section["id"] for section in soup.select("main > section")]
    assert ids == ["contact", "hero"]
    assert [section.name for section in sections] == ["contact", "hero"]


def test_content_is_plain_concatenation(assembler: HtmlAssembler) -> None:
    resolved = assembler.resolve(
        [_definition("hero", "hero.jinja"), _definition("about", "about.jinja")],
        title="Acme",
        year=2026,
    )
    html, _ = assembler.assemble(resolved, "Acme", year=2026)
    joined = resolved[0].rendered_content + resolved[1].rendered_content
    assert joined in html


def test_fragments_are_not_escaped(assembler: HtmlAssembler) -> None:
    resolved = assembler.resolve(
        [_definition("hero", "hero.jinja")], title="Acme", year=2026
    )
    html, _ = assembler.assemble(resolved, "Acme", year=2026)
    assert '<section class="hero" id="hero">' in html
    assert "&lt;section" not in html


def test_title_and_footer_year_are_rendered(assembler: HtmlAssembler) -> None:
    resolved = assembler.resolve(
        [_definition("hero", "hero.jinja")], title="Acme", year=2031
    )
    html, _ = assembler.assemble(resolved, "Acme", year=2031)
    soup = BeautifulSoup(html, "html.parser")
    assert soup.title is not None
    assert soup.title.string == "Acme"
    assert soup.select_one("h1.display-4").get_text(strip=True) == "Acme"
    footer = soup.select_one("footer.site-footer")
    assert footer is not None
    assert "2031" in footer.get_text()


def test_empty_selection_renders_shell(assembler: HtmlAssembler) -> None:
    html, sections = assembler.assemble([], "Acme", year=2026)
    soup = BeautifulSoup(html, "html.parser")
    assert sections == []
    assert soup.select("main > section") == []
    assert soup.select_one('link[href="css/style.min.css"]') is not None
    assert soup.select_one('script[src="js/script.min.js"]') is not None


def test_assembly_is_idempotent(assembler: HtmlAssembler) -> None:
    definitions = [_definition("hero", "hero.jinja"), _definition("faq", "faq.md")]
    first = assembler.assemble(
        assembler.resolve(definitions, title="Acme", year=2026), "Acme", year=2026
    )
    second = assembler.assemble(
        assembler.resolve(definitions, title="Acme", year=2026), "Acme", year=2026
    )
    assert first == second


def test_markdown_fragment_is_converted(assembler: HtmlAssembler) -> None:
    resolved = assembler.resolve(
        [_definition("faq", "faq.md")], title="Acme", year=2026
    )
    content = resolved[0].rendered_content
    assert "<h2>Frequently asked questions</h2>" in content
    assert "<strong>Can I change the colours later?</strong>" in content


def test_missing_fragment_raises(assembler: HtmlAssembler) -> None:
    with pytest.raises(AssemblyFailure, match="missing.jinja"):
        assembler.resolve(
            [_definition("ghost", "missing.jinja")], title="Acme", year=2026
        )


def test_invalid_fragment_raises(tmp_path: Path) -> None:
    (tmp_path / "sections").mkdir()
    (tmp_path / "sections" / "broken.jinja").write_text("{% if %}", encoding="utf-8")
    (tmp_path / "base.jinja").write_text("{{ body }}", encoding="utf-8")
    assembler = HtmlAssembler(tmp_path)
    with pytest.raises(AssemblyFailure):
        assembler.resolve(
            [_definition("broken", "broken.jinja")], title="Acme", year=2026
        )
