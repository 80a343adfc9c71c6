"""Behaviour tests for rewriting relative ``.md`` links during a load.

The scenarios in ``relative_links.feature`` write a small content tree,
load it with :func:`sitegraph.site.load_all`, and check either the rewritten
anchor in the rendered body or the :class:`LinkResolutionError` raised for a
dangling link.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from sitegraph.config import SiteConfig
from sitegraph.errors import LinkResolutionError
from sitegraph.site import load_all

if typ.TYPE_CHECKING:
    from sitegraph.graph.builder import SiteGraph

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "relative_links.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _content_dir(scenario_state: dict[str, object]) -> Path:
    return typ.cast("SiteConfig", scenario_state["config"]).content_dir


@given(parsers.parse('a site with "{relative}" linking to "{target}"'))
def given_linking_page(
    tmp_path: Path, scenario_state: dict[str, object], relative: str, target: str
) -> None:
    config = SiteConfig(
        base_url="https://example.com", content_dir=tmp_path / "content"
    )
    path = config.content_dir / relative
    path.parent.mkdir(parents=True)
    index = path.parent / "_index.md"
    index.write_text("---\ntitle: Guide\n---\n", encoding="utf-8")
    path.write_text(f"See [the next step]({target}).\n", encoding="utf-8")
    scenario_state["config"] = config


@given(parsers.parse('the file "{relative}" exists'))
def given_file_exists(scenario_state: dict[str, object], relative: str) -> None:
    path = _content_dir(scenario_state) / relative
    path.write_text("---\ntitle: Setup\n---\n## Install\n", encoding="utf-8")


@when("the site is loaded")
def when_loaded(scenario_state: dict[str, object]) -> None:
    config = typ.cast("SiteConfig", scenario_state["config"])
    try:
        scenario_state["graph"] = load_all(config.content_dir, config)
    except LinkResolutionError as exc:
        scenario_state["error"] = exc


@then(parsers.parse('"{relative}" links to "{url}"'))
def then_links_to(scenario_state: dict[str, object], relative: str, url: str) -> None:
    graph = typ.cast("SiteGraph", scenario_state["graph"])
    page = graph.pages[graph.content_root / relative]
    anchor = BeautifulSoup(page.content, "html.parser").find("a")
    assert anchor is not None, "expected the rendered body to contain a link"
    assert anchor["href"] == url


@then(parsers.parse('loading fails naming "{relative}" and "{target}"'))
def then_load_fails(
    scenario_state: dict[str, object], relative: str, target: str
) -> None:
    error = scenario_state.get("error")
    assert isinstance(error, LinkResolutionError), "expected a LinkResolutionError"
    assert error.path == relative
    assert error.target == target
