"""Render a resolved site graph into static files.

This module turns a :class:`~sitegraph.graph.builder.SiteGraph` into the output
tree: one ``index.html`` per page and section, paginated section listings,
tag and category pages, ``sitemap.xml``, ``rss.xml``, ``robots.txt``, and a
copy of the static directory. Templates come from the site's ``templates/``
directory first and fall back to the defaults shipped in
``sitegraph/templates``.

:meth:`SiteGenerator.run` performs a full build. Before deleting the previous
output it loads every template the build needs, so a missing or broken
template fails without touching the last good build. A failure while writing
can still leave a partial tree behind, which the next build's clean removes.

Example
-------
>>> from pathlib import Path
>>> from sitegraph.site import load_all
>>> from sitegraph.generator.site_generator import SiteGenerator
>>> graph = load_all(Path("content"), config)  # doctest: +SKIP
>>> SiteGenerator(graph, Path("public")).run()  # doctest: +SKIP
[PosixPath('public/index.html'), ...]
"""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import typing as typ
from pathlib import Path

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, select_autoescape

from sitegraph._constants import (
    ALIAS_TEMPLATE,
    ROBOTS_TEMPLATE,
    RSS_TEMPLATE,
    SITEMAP_TEMPLATE,
)
from sitegraph.content.models import SortBy
from sitegraph.graph.pagination import Paginator
from sitegraph.graph.sorting import sort_pages
from sitegraph.graph.taxonomies import slugify

from .renderer import HtmlContentRenderer
from .writer import OutputWriter

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sitegraph.content.models import Page, Section
    from sitegraph.graph.builder import SiteGraph
    from sitegraph.graph.taxonomies import ListItem

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


@dc.dataclass(slots=True, frozen=True)
class TaxonomyKind:
    """Names used when rendering one kind of taxonomy."""

    name: str
    variable: str
    list_template: str
    single_template: str


TAGS = TaxonomyKind("tags", "tag", "tags.html", "tag.html")
CATEGORIES = TaxonomyKind("categories", "category", "categories.html", "category.html")


class SiteGenerator:
    """Render every output artefact of a site graph."""

    def __init__(
        self,
        graph: SiteGraph,
        output_root: Path | None = None,
        *,
        templates_dir: Path | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        """Initialize the generator with a graph and template context.

        Parameters
        ----------
        graph : SiteGraph
            Fully loaded graph to render.
        output_root : Path, optional
            Directory to write into; defaults to ``config.output_dir``.
        templates_dir : Path, optional
            Site template directory; defaults to ``config.templates_dir``.
            Built-in templates fill in whatever it does not provide.
        writer : OutputWriter, optional
            Filesystem collaborator; defaults to one rooted at
            ``output_root``.
        """
        self.graph = graph
        self.config = graph.config
        self.output_root = Path(output_root or self.config.output_dir)
        self.templates_dir = Path(templates_dir or self.config.templates_dir)
        self.writer = writer or OutputWriter(self.output_root)
        self.pygments_css = HtmlContentRenderer(self.config.pygments_style).stylesheet
        self.env = self._build_environment()

    def _build_environment(self) -> Environment:
        env = Environment(
            loader=ChoiceLoader(
                [
                    FileSystemLoader(str(self.templates_dir)),
                    FileSystemLoader(str(BUILTIN_TEMPLATES_DIR)),
                ]
            ),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["slugify"] = slugify
        env.globals["get_page"] = self._get_page
        env.globals["get_section"] = self._get_section
        return env

    def reload_templates(self) -> None:
        """Drop every cached template so edits on disk are picked up."""
        self.env = self._build_environment()

    def run(self) -> list[Path]:
        """Clean the output root and render every artefact.

        Returns
        -------
        list[Path]
            Every file written, in write order.

        Raises
        ------
        jinja2.TemplateError
            If a template is missing or invalid (before anything is deleted)
            or fails while rendering.
        OSError
            If the output tree cannot be written.
        """
        self.preflight()
        self.writer.clean()
        self.render_sections()
        self.render_orphan_pages()
        self.render_sitemap()
        if self.config.generate_rss:
            self.render_rss_feed()
        self.render_robots()
        if self.config.generate_categories_pages:
            self.render_taxonomy(CATEGORIES)
        if self.config.generate_tags_pages:
            self.render_taxonomy(TAGS)
        self.copy_static_directory()
        logger.info(
            "Wrote %d file(s) to %s", len(self.writer.written), self.output_root
        )
        return list(self.writer.written)

    def preflight(self) -> None:
        """Load every template a full build will use."""
        for name in sorted(self._required_templates()):
            self.env.get_template(name)

    def _required_templates(self) -> set[str]:
        names = {SITEMAP_TEMPLATE, ROBOTS_TEMPLATE}
        names.update(page.template_name for page in self.graph.pages.values())
        for section in self.graph.sections.values():
            if section.should_render:
                names.add(section.template_name)
                if section.is_paginated and section.pages:
                    names.add(ALIAS_TEMPLATE)
        if self.config.generate_rss:
            names.add(RSS_TEMPLATE)
        taxonomies = self.graph.taxonomies
        if self.config.generate_categories_pages and taxonomies.categories:
            names.update({CATEGORIES.list_template, CATEGORIES.single_template})
        if self.config.generate_tags_pages and taxonomies.tags:
            names.update({TAGS.list_template, TAGS.single_template})
        return names

    def render_page(self, page: Page) -> Path:
        """Render one page to ``<path>/index.html`` and copy its assets."""
        directory = self._output_dir(page.path)
        parent = self.graph.sections.get(page.section_key)
        context = {
            "page": page,
            "section": parent,
            "previous": self._neighbour(page.previous),
            "next": self._neighbour(page.next),
            "current_url": page.permalink,
            "current_path": _current_path(page.path),
        }
        output = self.writer.write_file(
            directory / "index.html", self._render(page.template_name, context)
        )
        for asset in page.assets:
            self.writer.copy_file(asset, directory / asset.name)
        return output

    def render_section(self, section: Section) -> None:
        """Render a section's pages and, unless disabled, its listing."""
        for page in self.graph.pages_for(section.all_page_paths()):
            self.render_page(page)

        if not section.should_render:
            return

        pages = self.graph.section_pages(section)
        if section.is_paginated and pages:
            self._render_paginated(section, pages)
            return
        context = self._section_context(section, pages)
        self.writer.write_file(
            self._output_dir(section.path) / "index.html",
            self._render(section.template_name, context),
        )

    def _render_paginated(self, section: Section, pages: list[Page]) -> None:
        paginator = Paginator(section, pages, self.config)
        for pager in paginator:
            context = self._section_context(
                section, list(pager.items), paginator=paginator.context(pager)
            )
            html = self._render(section.template_name, context)
            target = self._output_dir(paginator.path_for(pager.index))
            self.writer.write_file(target / "index.html", html)
            if pager.index == 1:
                alias = self._render(ALIAS_TEMPLATE, {"url": section.permalink})
                alias_dir = self._output_dir(paginator.alias_path())
                self.writer.write_file(alias_dir / "index.html", alias)

    def render_sections(self) -> None:
        for section in self.graph.sections.values():
            self.render_section(section)

    def render_orphan_pages(self) -> None:
        for page in self.graph.orphan_pages():
            self.render_page(page)

    def render_sitemap(self) -> Path:
        """Render ``sitemap.xml`` listing every page, section and taxonomy."""
        context = {
            "pages": sorted(self.graph.pages.values(), key=lambda p: p.permalink),
            "sections": sorted(
                self.graph.sections.values(), key=lambda s: s.permalink
            ),
            "categories": self._taxonomy_urls(
                CATEGORIES,
                self.graph.taxonomies.categories,
                enabled=self.config.generate_categories_pages,
            ),
            "tags": self._taxonomy_urls(
                TAGS,
                self.graph.taxonomies.tags,
                enabled=self.config.generate_tags_pages,
            ),
        }
        return self.writer.write_file(
            self.output_root / SITEMAP_TEMPLATE, self._render(SITEMAP_TEMPLATE, context)
        )

    def render_rss_feed(self) -> Path | None:
        """Render ``rss.xml`` from the newest dated pages.

        Returns ``None`` without writing when no page has a date.
        """
        dated, _undated = sort_pages(self.graph.pages.values(), SortBy.DATE)
        if not dated:
            logger.info("No dated pages; skipping %s", RSS_TEMPLATE)
            return None
        pages = dated[: self.config.rss_limit]
        context = {
            "pages": pages,
            "last_build_date": pages[0].meta.date,
            "feed_url": self.config.make_url(RSS_TEMPLATE),
        }
        return self.writer.write_file(
            self.output_root / RSS_TEMPLATE, self._render(RSS_TEMPLATE, context)
        )

    def render_robots(self) -> Path:
        return self.writer.write_file(
            self.output_root / ROBOTS_TEMPLATE, self._render(ROBOTS_TEMPLATE, {})
        )

    def render_taxonomy(self, kind: TaxonomyKind) -> None:
        """Render the listing page and one page per tag or category."""
        taxonomies = self.graph.taxonomies
        buckets = taxonomies.tags if kind is TAGS else taxonomies.categories
        if not buckets:
            return
        items: list[ListItem] = (
            taxonomies.tag_items() if kind is TAGS else taxonomies.category_items()
        )
        listing = self._render(
            kind.list_template,
            {
                kind.name: items,
                "current_url": self.config.make_permalink(kind.name),
                "current_path": _current_path(kind.name),
            },
        )
        self.writer.write_file(self._output_dir(kind.name) / "index.html", listing)

        for item in items:
            ordered, undated = sort_pages(
                self.graph.pages_for(buckets[item.name]), SortBy.DATE
            )
            path = f"{kind.name}/{item.slug}"
            single = self._render(
                kind.single_template,
                {
                    kind.variable: item.name,
                    f"{kind.variable}_slug": item.slug,
                    "pages": [*ordered, *undated],
                    "current_url": self.config.make_permalink(path),
                    "current_path": _current_path(path),
                },
            )
            self.writer.write_file(self._output_dir(path) / "index.html", single)

    def copy_static_directory(self) -> None:
        """Copy the static directory into the output root, if it exists."""
        static_dir = self.config.static_dir
        if not static_dir.is_dir():
            return
        for dirpath, _dirnames, filenames in os.walk(static_dir):
            for name in sorted(filenames):
                self.copy_static_file(Path(dirpath) / name)

    def copy_static_file(self, path: Path) -> Path:
        """Copy one file from the static directory to the same relative path."""
        relative = path.absolute().relative_to(self.config.static_dir.absolute())
        return self.writer.copy_file(path, self.output_root / relative)

    def _section_context(
        self,
        section: Section,
        pages: list[Page],
        *,
        paginator: dict[str, typ.Any] | None = None,
    ) -> dict[str, typ.Any]:
        return {
            "section": section,
            "pages": pages,
            "ignored_pages": self.graph.pages_for(section.ignored_pages),
            "subsections": self.graph.subsections_of(section),
            "paginator": paginator,
            "current_url": (
                paginator["permalink"] if paginator else section.permalink
            ),
            "current_path": _current_path(section.path),
        }

    def _taxonomy_urls(
        self,
        kind: TaxonomyKind,
        buckets: cabc.Mapping[str, typ.Any],
        *,
        enabled: bool,
    ) -> list[str]:
        if not enabled or not buckets:
            return []
        urls = [self.config.make_permalink(kind.name)]
        urls.extend(
            self.config.make_permalink(f"{kind.name}/{slugify(name)}")
            for name in buckets
        )
        return urls

    def _render(self, template_name: str, context: dict[str, typ.Any]) -> str:
        template = self.env.get_template(template_name)
        return template.render(
            config=self.config,
            pygments_css=self.pygments_css,
            **context,
        )

    def _output_dir(self, url_path: str) -> Path:
        parts = [part for part in url_path.split("/") if part]
        return self.output_root.joinpath(*parts)

    def _neighbour(self, path: Path | None) -> Page | None:
        if path is None:
            return None
        return self.graph.pages.get(path)

    def _get_page(self, relative_path: str) -> Page | None:
        """Template helper returning the page at ``relative_path``."""
        for page in self.graph.pages.values():
            if page.relative_path == relative_path:
                return page
        return None

    def _get_section(self, relative_path: str) -> Section | None:
        """Template helper returning the section at ``relative_path``."""
        for section in self.graph.sections.values():
            if section.relative_path == relative_path:
                return section
        return None


def _current_path(url_path: str) -> str:
    trimmed = url_path.strip("/")
    return f"/{trimmed}/" if trimmed else "/"


__all__ = ["CATEGORIES", "TAGS", "SiteGenerator", "TaxonomyKind"]
