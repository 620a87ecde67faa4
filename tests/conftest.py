"""Shared fixtures: a throwaway site root with a small section catalog."""

from __future__ import annotations

import datetime as dt
import itertools
import json
import typing as typ

import pytest

from sitesmith.config import BuilderConfig

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

FIXED_NOW = dt.datetime(2026, 3, 14, 9, 30, tzinfo=dt.UTC)

CATALOG: list[dict[str, str]] = [
    {"name": name, "label": label, "category": category, "fragmentRef": ref}
    for name, label, category, ref in (
        ("hero", "Hero", "header", "hero.jinja"),
        ("about", "About", "content", "about.jinja"),
        ("features", "Features", "content", "features.jinja"),
        ("faq", "FAQ", "content", "faq.md"),
        ("contact", "Contact", "form", "contact.jinja"),
    )
]


def write_catalog(root: Path, entries: cabc.Sequence[typ.Mapping[str, str]]) -> Path:
    """Write ``entries`` as ``sections.json`` under ``root``."""
    path = root / "sections.json"
    path.write_text(json.dumps(list(entries)), encoding="utf-8")
    return path


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Return a site root holding the fixture catalog."""
    root = tmp_path / "site"
    root.mkdir()
    write_catalog(root, CATALOG)
    return root


@pytest.fixture
def builder_config(site_root: Path) -> BuilderConfig:
    """Packaged defaults rooted at the fixture site root."""
    return BuilderConfig.default(site_root)


@pytest.fixture
def fixed_clock() -> cabc.Callable[[], dt.datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def sequential_ids() -> cabc.Callable[[int], str]:
    """Return an id factory yielding ``00000001``, ``00000002``, ..."""
    counter = itertools.count(1)
    return lambda _nbytes: f"{next(counter):08x}"
