"""Behaviour tests for building a site through the HTTP API.

The scenarios in ``features/build_site.feature`` drive the FastAPI app with
``TestClient`` against a temporary site root, then inspect the generated
files, the ``/dist`` mount and ``/sites.json``.

Usage:
    Run these behaviour tests with pytest, for example:

        pytest tests/bdd/test_build_site.py -v
"""

from __future__ import annotations

import re
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from fastapi.testclient import TestClient
from pytest_bdd import given, parsers, scenarios, then, when

from sitesmith.config import BuilderConfig
from sitesmith.server import create_app

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "build_site.feature"
scenarios(FEATURE_FILE)

OUTPUT_PATH = re.compile(r"dist/([0-9a-f]+)/index\.html")


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a generator server for a site root with a section catalog")
def given_server(
    builder_config: BuilderConfig, scenario_state: dict[str, object]
) -> None:
    """Create the app for the fixture site root and keep a client for it."""
    scenario_state["config"] = builder_config
    scenario_state["client"] = TestClient(create_app(builder_config))


@when(parsers.parse('I request a build of "{names}" with primary colour "{colour}"'))
def when_build(scenario_state: dict[str, object], names: str, colour: str) -> None:
    client: TestClient = scenario_state["client"]  # type: ignore[assignment]
    response = client.post(
        "/build",
        json={
            "sections": names.split(","),
            "bootstrapConfig": {"primaryColor": colour},
        },
    )
    scenario_state["response"] = response


@then("the build succeeds with an output path under dist")
def then_build_succeeds(scenario_state: dict[str, object]) -> None:
    response = scenario_state["response"]
    assert response.status_code == 200, response.text  # type: ignore[attr-defined]
    body = response.json()  # type: ignore[attr-defined]
    assert body["success"] is True
    match = OUTPUT_PATH.fullmatch(body["output"])
    assert match is not None, f"unexpected output path {body['output']!r}"
    scenario_state["output"] = body["output"]
    scenario_state["site_id"] = match.group(1)


@then("the generated page contains only the hero section")
def then_page_has_hero(scenario_state: dict[str, object]) -> None:
    """Fetch the page through the ``/dist`` mount and inspect its sections."""
    client: TestClient = scenario_state["client"]  # type: ignore[assignment]
    page = client.get(f"/{scenario_state['output']}")
    assert page.status_code == 200
    soup = BeautifulSoup(page.text, "html.parser")
    assert [section.get("id") for section in soup.select("main > section")] == ["hero"]


@then("the stylesheet uses the requested primary colour")
def then_css_has_colour(scenario_state: dict[str, object]) -> None:
    config: BuilderConfig = scenario_state["config"]  # type: ignore[assignment]
    site_dir = config.dist_dir / str(scenario_state["site_id"])
    css_path = site_dir / "css" / "style.min.css"
    css = css_path.read_text(encoding="utf-8").lower()
    assert re.search(r"#ff0000|#f00\b|:red\b", css), "expected the red primary colour"


@then(parsers.parse('the site log lists the build with sections "{names}"'))
def then_log_lists_build(scenario_state: dict[str, object], names: str) -> None:
    client: TestClient = scenario_state["client"]  # type: ignore[assignment]
    sites = client.get("/sites.json").json()
    assert [site["id"] for site in sites] == [scenario_state["site_id"]]
    assert sites[0]["sections"] == names.split(",")
    assert sites[0]["themeConfig"]["primaryColor"] == "#ff0000"


@then("the build fails with a JSON error")
def then_build_fails(scenario_state: dict[str, object]) -> None:
    response = scenario_state["response"]
    assert response.status_code == 500  # type: ignore[attr-defined]
    body = response.json()  # type: ignore[attr-defined]
    assert body["success"] is False
    assert body["error"]


@then("the site log is empty")
def then_log_empty(scenario_state: dict[str, object]) -> None:
    client: TestClient = scenario_state["client"]  # type: ignore[assignment]
    assert client.get("/sites.json").json() == []


@then("no site directory remains")
def then_no_site_dir(scenario_state: dict[str, object]) -> None:
    config: BuilderConfig = scenario_state["config"]  # type: ignore[assignment]
    assert list(config.dist_dir.iterdir()) == []
