"""End-to-end tests for rendering a site graph to disk.

The ``generated`` fixture renders the ``blog_site`` fixture with the built-in
templates and returns the output root; tests then read individual artefacts
back with ``BeautifulSoup``.
"""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup
from jinja2 import TemplateNotFound

from sitegraph.generator import OutputWriter
from sitegraph.generator.site_generator import SiteGenerator
from sitegraph.site import build, load_all

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from sitegraph.config import SiteConfig
    from sitegraph.graph.builder import SiteGraph


def _soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def _hrefs(path: Path) -> list[str]:
    return [anchor["href"] for anchor in _soup(path).find_all("a")]


@pytest.fixture
def generated(graph: SiteGraph, site_config: SiteConfig) -> Path:
    """Build the sample site and return the output root."""
    build(graph, site_config.output_dir)
    return site_config.output_dir


def test_full_build_writes_every_artefact(generated: Path) -> None:
    expected = [
        "index.html",
        "about/index.html",
        "posts/index.html",
        "posts/page/1/index.html",
        "posts/page/2/index.html",
        "posts/first/index.html",
        "posts/second/index.html",
        "posts/third/index.html",
        "posts/undated/index.html",
        "misc/note/index.html",
        "sitemap.xml",
        "robots.txt",
        "tags/index.html",
        "tags/python/index.html",
        "tags/web/index.html",
        "tags/x/index.html",
        "categories/index.html",
        "categories/news/index.html",
    ]
    missing = [name for name in expected if not (generated / name).is_file()]
    assert missing == [], f"missing outputs: {missing}"
    assert not (generated / "rss.xml").exists(), "rss is disabled by default"


def test_pagers_split_the_ordered_pages(generated: Path) -> None:
    first_pager = _hrefs(generated / "posts" / "index.html")
    second_pager = _hrefs(generated / "posts" / "page" / "2" / "index.html")

    assert "https://example.com/posts/third/" in first_pager
    assert "https://example.com/posts/second/" in first_pager
    assert "https://example.com/posts/first/" not in first_pager
    assert "https://example.com/posts/page/2/" in first_pager
    assert "https://example.com/posts/first/" in second_pager
    assert "https://example.com/posts/" in second_pager


def test_first_pager_alias_redirects_to_section(generated: Path) -> None:
    soup = _soup(generated / "posts" / "page" / "1" / "index.html")
    refresh = soup.find("meta", attrs={"http-equiv": "refresh"})
    assert refresh is not None
    assert refresh["content"] == "0;url=https://example.com/posts/"


def test_page_links_to_neighbours_and_taxonomies(generated: Path) -> None:
    soup = _soup(generated / "posts" / "second" / "index.html")

    assert soup.find("a", rel="prev")["href"] == "https://example.com/posts/third/"
    assert soup.find("a", rel="next")["href"] == "https://example.com/posts/first/"
    tag_links = [a["href"] for a in soup.select("ul.tags a")]
    assert tag_links == [
        "https://example.com/tags/python/",
        "https://example.com/tags/web/",
    ]
    assert "The second post." in soup.get_text()


def test_root_index_lists_pages_and_subsections(generated: Path) -> None:
    hrefs = _hrefs(generated / "index.html")
    assert "https://example.com/about/" in hrefs
    assert "https://example.com/posts/" in hrefs


def test_taxonomy_pages(generated: Path) -> None:
    listing = _soup(generated / "tags" / "index.html")
    assert [a.get_text() for a in listing.select("ul.tags a")] == [
        "python",
        "web",
        "x",
    ]
    python = _hrefs(generated / "tags" / "python" / "index.html")
    assert "https://example.com/posts/second/" in python
    assert "https://example.com/posts/first/" in python
    news = _hrefs(generated / "categories" / "news" / "index.html")
    assert "https://example.com/posts/first/" in news


def test_non_ascii_tag_keeps_the_tag_listing(
    site_config: SiteConfig, blog_site: Path, write_content: cabc.Callable[..., Path]
) -> None:
    write_content(blog_site, "posts/kyoto.md", "title: Kyoto\ntags: [日本]\n")

    build(load_all(site_config.content_dir, site_config), site_config.output_dir)

    tags = site_config.output_dir / "tags"
    listing = _soup(tags / "index.html")
    assert [a.get_text() for a in listing.select("ul.tags a")] == [
        "python",
        "web",
        "x",
        "日本",
    ], "every tag should appear on the listing page"
    assert "https://example.com/posts/kyoto/" in _hrefs(tags / "日本" / "index.html")


def test_sitemap_lists_every_permalink(generated: Path, graph: SiteGraph) -> None:
    soup = BeautifulSoup(
        (generated / "sitemap.xml").read_text(encoding="utf-8"), "html.parser"
    )
    locations = {loc.get_text() for loc in soup.find_all("loc")}

    assert set(graph.permalinks.values()) <= locations
    assert "https://example.com/tags/" in locations
    assert "https://example.com/tags/python/" in locations
    assert "https://example.com/categories/news/" in locations


def test_robots_points_at_sitemap(generated: Path) -> None:
    robots = (generated / "robots.txt").read_text(encoding="utf-8")
    assert "Sitemap: https://example.com/sitemap.xml" in robots


def test_rss_feed_lists_newest_dated_pages(
    graph: SiteGraph, site_config: SiteConfig
) -> None:
    site_config.generate_rss = True
    site_config.rss_limit = 2

    build(graph, site_config.output_dir)

    soup = BeautifulSoup(
        (site_config.output_dir / "rss.xml").read_text(encoding="utf-8"),
        "html.parser",
    )
    titles = [item.find("title").get_text() for item in soup.find_all("item")]
    assert titles == ["Third", "Second"]


def test_disabled_taxonomies_are_not_rendered(
    graph: SiteGraph, site_config: SiteConfig
) -> None:
    site_config.generate_tags_pages = False

    build(graph, site_config.output_dir)

    assert not (site_config.output_dir / "tags").exists()
    sitemap = (site_config.output_dir / "sitemap.xml").read_text(encoding="utf-8")
    assert "/tags/" not in sitemap


def test_unrendered_and_empty_sections(
    site_config: SiteConfig, blog_site: Path, write_content: cabc.Callable[..., Path]
) -> None:
    """``render: false`` skips the listing; an empty paginated section has one."""
    write_content(blog_site, "hidden/_index.md", "render: false\n")
    write_content(blog_site, "hidden/secret.md", "title: Secret\n")
    write_content(blog_site, "empty/_index.md", "title: Empty\npaginate_by: 2\n")

    build(load_all(site_config.content_dir, site_config), site_config.output_dir)

    output = site_config.output_dir
    assert not (output / "hidden" / "index.html").exists()
    assert (output / "hidden" / "secret" / "index.html").is_file()
    assert (output / "empty" / "index.html").is_file()
    assert not (output / "empty" / "page").exists()


def test_bundle_assets_are_copied_beside_the_page(
    site_config: SiteConfig, blog_site: Path, write_content: cabc.Callable[..., Path]
) -> None:
    index = write_content(blog_site, "posts/trip/index.md", "title: Trip\n")
    (index.parent / "photo.jpg").write_bytes(b"\xff\xd8")

    build(load_all(site_config.content_dir, site_config), site_config.output_dir)

    copied = site_config.output_dir / "posts" / "trip" / "photo.jpg"
    assert copied.read_bytes() == b"\xff\xd8"


def test_static_directory_is_copied(graph: SiteGraph, site_config: SiteConfig) -> None:
    css = site_config.static_dir / "css" / "site.css"
    css.parent.mkdir(parents=True)
    css.write_text("body {}\n", encoding="utf-8")

    build(graph, site_config.output_dir)

    copied = site_config.output_dir / "css" / "site.css"
    assert copied.read_text(encoding="utf-8") == "body {}\n"


def test_site_templates_override_builtins(
    graph: SiteGraph, site_config: SiteConfig
) -> None:
    site_config.templates_dir.mkdir()
    (site_config.templates_dir / "page.html").write_text(
        '<p class="custom">{{ page.title }}</p>', encoding="utf-8"
    )

    build(graph, site_config.output_dir)

    soup = _soup(site_config.output_dir / "about" / "index.html")
    assert soup.select_one("p.custom").get_text() == "About"
    assert (site_config.output_dir / "index.html").is_file()


def test_missing_template_fails_before_cleaning(
    site_config: SiteConfig, blog_site: Path, write_content: cabc.Callable[..., Path]
) -> None:
    """A missing template leaves the previous build untouched."""
    keep = site_config.output_dir / "keep.html"
    keep.parent.mkdir(parents=True)
    keep.write_text("old build", encoding="utf-8")
    write_content(blog_site, "about.md", "title: About\ntemplate: nowhere.html\n")
    graph = load_all(site_config.content_dir, site_config)

    with pytest.raises(TemplateNotFound):
        build(graph, site_config.output_dir)

    assert keep.read_text(encoding="utf-8") == "old build"


def test_full_build_cleans_stale_output(generated: Path, graph: SiteGraph) -> None:
    stale = generated / "stale" / "index.html"
    stale.parent.mkdir()
    stale.write_text("stale", encoding="utf-8")

    written = SiteGenerator(graph, generated).run()

    assert not stale.exists()
    assert generated / "index.html" in written


def test_template_helpers_look_up_content(
    graph: SiteGraph, site_config: SiteConfig
) -> None:
    site_config.templates_dir.mkdir()
    (site_config.templates_dir / "index.html").write_text(
        "{{ get_page('posts/first.md').permalink }}|"
        "{{ get_section('posts/_index.md').title }}",
        encoding="utf-8",
    )

    build(graph, site_config.output_dir)

    text = (site_config.output_dir / "index.html").read_text(encoding="utf-8")
    assert text.strip() == "https://example.com/posts/first/|Posts"


def test_writer_appends_trailing_newline_and_tracks_files(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path / "out")

    path = writer.write_file(tmp_path / "out" / "a" / "b.txt", "hello")

    assert path.read_text(encoding="utf-8") == "hello\n"
    assert writer.written == [path]
    writer.clean()
    assert not (tmp_path / "out").exists()
    assert writer.written == []
