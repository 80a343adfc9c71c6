"""Tests for the tag and category indexes."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from sitegraph.content.models import PageMeta
from sitegraph.errors import TaxonomyError
from sitegraph.graph.taxonomies import ListItem, build_taxonomies, slugify


def _page(
    name: str, *, tags: tuple[str, ...] = (), category: str | None = None
) -> SimpleNamespace:
    return SimpleNamespace(
        file_path=Path(f"/content/{name}.md"),
        meta=PageMeta(tags=frozenset(tags), category=category),
    )


PAGES = [
    _page("a", tags=("python", "web"), category="news"),
    _page("b", tags=("python",)),
    _page("c", tags=("rust",), category="news"),
    _page("d", category="Release Notes"),
]


def test_buckets_hold_sorted_source_paths() -> None:
    index = build_taxonomies(PAGES)

    assert list(index.tags) == ["python", "rust", "web"]
    assert index.tags["python"] == (Path("/content/a.md"), Path("/content/b.md"))
    assert index.categories == {
        "Release Notes": (Path("/content/d.md"),),
        "news": (Path("/content/a.md"), Path("/content/c.md")),
    }


def test_rebuilding_is_independent_of_page_order() -> None:
    """Building twice, in any order, gives the same index."""
    assert build_taxonomies(PAGES) == build_taxonomies(reversed(PAGES))
    assert build_taxonomies(PAGES) == build_taxonomies(PAGES)


def test_list_items_sort_by_count_then_name() -> None:
    index = build_taxonomies(PAGES)
    assert index.tag_items() == [
        ListItem("python", "python", 2),
        ListItem("rust", "rust", 1),
        ListItem("web", "web", 1),
    ]
    assert [item.slug for item in index.category_items()] == ["news", "release-notes"]


def test_pages_without_taxonomies_produce_empty_index() -> None:
    index = build_taxonomies([_page("plain")])
    assert index.tags == {}
    assert index.categories == {}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("Hello World", "hello-world"),
        ("  C++ & Rust!  ", "c-rust"),
        ("already-slugged", "already-slugged"),
        ("Café Crème", "cafe-creme"),
        ("日本", "日本"),
        ("snake_case", "snake-case"),
    ],
)
def test_slugify(value: str, expected: str) -> None:
    assert slugify(value) == expected


def test_non_ascii_names_get_their_own_slug() -> None:
    index = build_taxonomies([_page("a", tags=("日本",)), _page("b", tags=("python",))])
    assert [item.slug for item in index.tag_items()] == ["python", "日本"]


def test_names_sharing_a_slug_are_rejected() -> None:
    """``C`` and ``C++`` would both be written to ``tags/c/``."""
    with pytest.raises(TaxonomyError, match="'C\\+\\+' and 'C'") as excinfo:
        build_taxonomies([_page("a", tags=("C++",)), _page("b", tags=("C",))])
    assert excinfo.value.path == Path("/content/a.md")


def test_category_without_url_characters_is_rejected() -> None:
    with pytest.raises(TaxonomyError, match="category '\\+\\+\\+'"):
        build_taxonomies([_page("a", category="+++")])
