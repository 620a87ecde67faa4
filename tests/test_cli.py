"""Tests for the ``sitesmith`` command line."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from sitesmith import cli
from sitesmith.sitelog import SiteLog

if typ.TYPE_CHECKING:
    from pathlib import Path

CATALOG_NAMES = ["hero", "about", "features", "faq", "contact"]


@pytest.fixture
def config_file(site_root: Path) -> Path:
    path = site_root.parent / "sitesmith.yaml"
    path.write_text(
        dedent(
            """
            root: site
            site_title: Acme
            """
        ).lstrip(),
        encoding="utf-8",
    )
    return path


def test_build_command_writes_site(
    config_file: Path, site_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.build("hero", "about", primary_color="#ff0000", config=config_file)

    [entry] = SiteLog(site_root / "sites.jsonl").entries()
    assert entry.sections == ("hero", "about")
    assert entry.theme.primary_color == "#ff0000"
    assert entry.theme.font_family == "Arial, sans-serif"
    assert (site_root / entry.output_path).is_file()
    assert "wrote" in capsys.readouterr().out


def test_build_command_exits_on_failure(
    config_file: Path, site_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.build("hero", primary_color="notacolor", config=config_file)
    assert excinfo.value.code == 1
    assert "build failed" in capsys.readouterr().out
    assert not (site_root / "sites.jsonl").exists()


def test_sections_command_lists_catalog(
    config_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.sections(config=config_file)
    lines = capsys.readouterr().out.splitlines()
    first_words = [line.split()[0] for line in lines if line.strip()]
    assert [word for word in first_words if word in CATALOG_NAMES] == CATALOG_NAMES


def test_sites_command_lists_builds(
    config_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.build("hero", config=config_file)
    capsys.readouterr()
    cli.sites(config=config_file)
    out = capsys.readouterr().out
    assert "index.html" in out
    assert "[hero]" in out


def test_sites_command_exits_on_corrupt_log(
    config_file: Path, site_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (site_root / "sites.jsonl").write_text("not json\n", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.sites(config=config_file)
    assert excinfo.value.code == 1
    assert "sites failed" in capsys.readouterr().out


def test_sections_command_exits_on_malformed_catalog(
    config_file: Path, site_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (site_root / "sections.json").write_text('{"hero": 1}', encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.sections(config=config_file)
    assert excinfo.value.code == 1
    assert "sections failed" in capsys.readouterr().out
