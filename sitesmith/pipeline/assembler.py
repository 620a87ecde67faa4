"""Render catalogued fragments and wrap them in the base page template.

Fragments live under ``<templates_dir>/sections`` and are referenced from the
catalog by file name. Jinja fragments (``.jinja``, ``.html``, ``.hbs``) see the
page ``title`` and ``year``; Markdown fragments (``.md``) are converted with
Python-Markdown. Fragment bodies are pre-authored and trusted, so the
assembled content is inserted into ``base.jinja`` without escaping.
"""

from __future__ import annotations

import datetime as dt
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from markdown import Markdown
from markupsafe import Markup

from sitesmith.errors import AssemblyFailure
from sitesmith.models import ResolvedSection

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sitesmith.models import SectionDefinition

FRAGMENTS_DIR = "sections"
BASE_TEMPLATE = "base.jinja"
MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})


def footer_text(site_title: str, year: int) -> str:
    """Return the copyright line shown in every generated page."""
    return f"© {year} {site_title}. All rights reserved."


class HtmlAssembler:
    """Turn resolved sections into a complete HTML document."""

    def __init__(self, templates_dir: Path) -> None:
        """Initialize the assembler and its Jinja environment.

        Parameters
        ----------
        templates_dir : Path
            Directory containing ``base.jinja`` and the ``sections/`` fragments.
        """
        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja", "hbs"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._markdown_extensions = [
            "fenced_code",
            "tables",
            "sane_lists",
            "md_in_html",
        ]

    def render_fragment(
        self, definition: SectionDefinition, *, title: str, year: int
    ) -> str:
        """Render one fragment to HTML.

        Raises
        ------
        AssemblyFailure
            If the fragment is missing or is not a valid template.
        """
        template_name = f"{FRAGMENTS_DIR}/{definition.fragment_ref}"
        try:
            if Path(definition.fragment_ref).suffix.lower() in MARKDOWN_SUFFIXES:
                source, _filename, _uptodate = self.env.loader.get_source(  # type: ignore[union-attr]
                    self.env, template_name
                )
                return Markdown(extensions=self._markdown_extensions).convert(source)
            template = self.env.get_template(template_name)
            return template.render(title=title, year=year)
        except TemplateError as exc:
            msg = (
                f"Unable to render section '{definition.name}' "
                f"({template_name}): {exc}"
            )
            raise AssemblyFailure(msg) from exc

    def resolve(
        self,
        definitions: cabc.Iterable[SectionDefinition],
        *,
        title: str,
        year: int | None = None,
    ) -> list[ResolvedSection]:
        """Render ``definitions`` in order, attaching each fragment's HTML."""
        render_year = year if year is not None else dt.datetime.now(dt.UTC).year
        return [
            ResolvedSection(
                definition=definition,
                rendered_content=self.render_fragment(
                    definition, title=title, year=render_year
                ),
            )
            for definition in definitions
        ]

    def assemble(
        self,
        sections: cabc.Sequence[ResolvedSection],
        site_title: str,
        *,
        year: int | None = None,
    ) -> tuple[str, list[ResolvedSection]]:
        """Concatenate rendered fragments and render the base page.

        Parameters
        ----------
        sections : Sequence[ResolvedSection]
            Sections in request order; their fragments are joined without
            separators.
        site_title : str
            Value bound to ``title`` in the base template.
        year : int, optional
            Year used for the footer; defaults to the current UTC year.

        Returns
        -------
        tuple[str, list[ResolvedSection]]
            The complete HTML document and the section metadata it contains.
        """
        render_year = year if year is not None else dt.datetime.now(dt.UTC).year
        content = "".join(section.rendered_content for section in sections)
        try:
            html = self.env.get_template(BASE_TEMPLATE).render(
                title=site_title,
                body=Markup(content),  # noqa: S704 - fragments are pre-authored
                year=render_year,
                footer_text=footer_text(site_title, render_year),
            )
        except TemplateError as exc:
            msg = f"Unable to render base template '{BASE_TEMPLATE}': {exc}"
            raise AssemblyFailure(msg) from exc
        if not html.endswith("\n"):
            html += "\n"
        return html, list(sections)


__all__ = ["BASE_TEMPLATE", "FRAGMENTS_DIR", "HtmlAssembler", "footer_text"]
