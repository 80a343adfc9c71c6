"""Shared fixtures for sitegraph tests.

``blog_site`` lays out a small site on disk:

* ``_index.md`` (root section) and ``about.md``
* ``posts/_index.md`` sorted by date, two posts per pager
* ``posts/first.md``, ``posts/second.md``, ``posts/third.md`` (dated, with
  tags and a category) and ``posts/undated.md`` (left out of the ordering)
* ``misc/note.md`` (no ``_index.md`` in ``misc``, so an orphan)

``graph`` loads it with :class:`~sitegraph.graph.builder.GraphBuilder`.
"""

from __future__ import annotations

import typing as typ

import pytest

from sitegraph.config import SiteConfig
from sitegraph.graph.builder import GraphBuilder

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from sitegraph.graph.builder import SiteGraph

BASE_URL = "https://example.com"


def _write_content(
    root: Path, relative: str, front_matter: str = "", body: str = ""
) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    text = f"---\n{front_matter}---\n{body}" if front_matter else body
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def write_content() -> cabc.Callable[..., Path]:
    """Return a helper that writes a content file with optional front matter."""
    return _write_content


@pytest.fixture
def site_config(tmp_path: Path) -> SiteConfig:
    """Return a config rooted in ``tmp_path`` with every directory below it."""
    return SiteConfig(
        base_url=BASE_URL,
        title="Example",
        root=tmp_path,
        content_dir=tmp_path / "content",
        output_dir=tmp_path / "public",
        static_dir=tmp_path / "static",
        templates_dir=tmp_path / "templates",
    )


@pytest.fixture
def blog_site(site_config: SiteConfig) -> Path:
    """Write the sample site and return its content directory."""
    content = site_config.content_dir
    _write_content(content, "_index.md", "title: Home\n", "Welcome home.\n")
    _write_content(content, "about.md", "title: About\n", "About us.\n")
    _write_content(
        content,
        "posts/_index.md",
        "title: Posts\nsort_by: date\npaginate_by: 2\n",
        "All the posts.\n",
    )
    _write_content(
        content,
        "posts/first.md",
        "title: First\ndate: 2024-01-01\ntags: [python]\ncategory: news\n",
        "The first post.\n",
    )
    _write_content(
        content,
        "posts/second.md",
        "title: Second\ndate: 2024-02-01\ntags: [python, web]\n",
        "The second post.\n\n<!-- more -->\n\nMore of the second post.\n",
    )
    _write_content(
        content,
        "posts/third.md",
        "title: Third\ndate: 2024-03-01\n",
        "Follows [the first post](./first.md#intro).\n",
    )
    _write_content(content, "posts/undated.md", "title: Undated\n", "No date.\n")
    _write_content(
        content, "misc/note.md", "title: Note\ntags: [x]\n", "A loose note.\n"
    )
    return content


@pytest.fixture
def graph(blog_site: Path, site_config: SiteConfig) -> SiteGraph:
    """Return the fully loaded graph of ``blog_site``."""
    return GraphBuilder(site_config).load()
