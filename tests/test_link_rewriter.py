"""Tests for body rendering and relative ``.md`` link rewriting."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from sitegraph.errors import LinkResolutionError
from sitegraph.generator import HtmlContentRenderer

PERMALINKS = {
    "about.md": "https://example.com/about/",
    "posts/a.md": "https://example.com/posts/a/",
    "posts/b.md": "https://example.com/posts/b/",
    "posts/_index.md": "https://example.com/posts/",
}


def _hrefs(html: str) -> list[str]:
    soup = BeautifulSoup(html, "html.parser")
    return [anchor["href"] for anchor in soup.find_all("a")]


@pytest.mark.parametrize(
    ("markdown", "expected"),
    [
        ("[b](./b.md)", "https://example.com/posts/b/"),
        ("[b](b.md#usage)", "https://example.com/posts/b/#usage"),
        ("[b](b.md?x=1#top)", "https://example.com/posts/b/?x=1#top"),
        ("[about](../about.md)", "https://example.com/about/"),
        ("[posts](_index.md)", "https://example.com/posts/"),
    ],
)
def test_relative_links_resolve_against_the_linking_file(
    markdown: str, expected: str
) -> None:
    html = HtmlContentRenderer().render(markdown, PERMALINKS, source="posts/a.md")
    assert _hrefs(html) == [expected]


@pytest.mark.parametrize(
    "href",
    [
        "https://other.example/page.md",
        "/absolute/page.md",
        "#section",
        "mailto:someone@example.com",
        "image.png",
    ],
)
def test_other_links_are_left_alone(href: str) -> None:
    html = HtmlContentRenderer().render(
        f"[x]({href})", PERMALINKS, source="posts/a.md"
    )
    assert _hrefs(html) == [href]


def test_missing_target_raises_link_resolution_error() -> None:
    """A dangling link names both the target and the file containing it."""
    with pytest.raises(LinkResolutionError) as excinfo:
        HtmlContentRenderer().render(
            "See [gone](./gone.md).", PERMALINKS, source="posts/a.md"
        )
    assert excinfo.value.target == "./gone.md"
    assert excinfo.value.path == "posts/a.md"
    assert "gone.md" in str(excinfo.value)


def test_link_escaping_the_content_root_raises() -> None:
    with pytest.raises(LinkResolutionError):
        HtmlContentRenderer().render(
            "[up](../../about.md)", PERMALINKS, source="posts/a.md"
        )


def test_blank_body_renders_empty() -> None:
    assert HtmlContentRenderer().render("  \n", PERMALINKS, source="posts/a.md") == ""


def test_fenced_code_is_highlighted_with_language() -> None:
    html = HtmlContentRenderer().render(
        "```python\nprint('hi')\n```\n", PERMALINKS, source="posts/a.md"
    )
    soup = BeautifulSoup(html, "html.parser")
    block = soup.select_one("div.codehilite")
    assert block is not None, "expected a codehilite block"
    assert block.get("data-language") == "python"
    assert "print" in block.get_text()


def test_stylesheet_targets_codehilite() -> None:
    assert ".codehilite" in HtmlContentRenderer("monokai").stylesheet
