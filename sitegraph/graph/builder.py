"""Discover content files and assemble them into a linked site graph.

The graph is a pair of flat dictionaries (pages and sections keyed by source
path) plus state derived from them: the permalink table, each section's
ordered/ignored child pages and subsections, the orphan list, and the tag and
category indexes. Derived state is recomputed wholesale by :func:`link` and
:meth:`SiteGraph.relink`; nothing patches a section's child lists in place.

A full load runs in a fixed order because each stage consumes the complete
output of the previous one:

1. discover every ``*.md`` file and parse its front matter,
2. insert a synthetic root section when ``_index.md`` is absent,
3. build the permalink table,
4. render every body (relative links resolve through the table),
5. link sections to pages and subsections and sort each section,
6. build the tag and category indexes.

Example
-------
>>> from pathlib import Path
>>> from sitegraph.config import load_site_config
>>> from sitegraph.graph.builder import GraphBuilder
>>> config = load_site_config(Path("config.yaml"))  # doctest: +SKIP
>>> graph = GraphBuilder(config).load()  # doctest: +SKIP
>>> [page.relative_path for page in graph.orphan_pages()]  # doctest: +SKIP
['about.md']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import typing as typ
from pathlib import Path

from sitegraph._constants import (
    CONTENT_SUFFIX,
    PAGE_BUNDLE_STEM,
    SECTION_INDEX_FILENAME,
    SUMMARY_SEPARATOR,
)
from sitegraph.content.front_matter import (
    page_meta_from_mapping,
    parse_front_matter,
    section_meta_from_mapping,
)
from sitegraph.content.models import Page, Section, SectionMeta
from sitegraph.generator.renderer import HtmlContentRenderer

from .permalinks import PermalinkTable
from .sorting import link_neighbours, sort_pages
from .taxonomies import TaxonomyIndex, build_taxonomies, slugify

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sitegraph.config.models import SiteConfig
    from sitegraph.content.models import ContentItem

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class SiteGraph:
    """The resolved content graph for one site.

    Attributes
    ----------
    config : SiteConfig
        Configuration the graph was built with.
    content_root : Path
        Directory the content was discovered in.
    pages : dict[Path, Page]
        Every page keyed by source path, in discovery order.
    sections : dict[Path, Section]
        Every section keyed by the path of its ``_index.md``.
    permalinks : PermalinkTable
        Relative source path to permalink for every page and section.
    taxonomies : TaxonomyIndex
        Tag and category buckets derived from page metadata.
    orphans : list[Path]
        Pages whose directory has no section, in discovery order.
    """

    config: SiteConfig
    content_root: Path
    pages: dict[Path, Page] = dc.field(default_factory=dict)
    sections: dict[Path, Section] = dc.field(default_factory=dict)
    permalinks: PermalinkTable = dc.field(default_factory=PermalinkTable)
    taxonomies: TaxonomyIndex = dc.field(default_factory=TaxonomyIndex)
    orphans: list[Path] = dc.field(default_factory=list)

    @property
    def root_section(self) -> Section:
        return self.sections[self.content_root / SECTION_INDEX_FILENAME]

    def relink(self) -> None:
        """Recompute section membership, ordering, orphans and taxonomies."""
        self.orphans = link(self.sections, self.pages)
        self.taxonomies = build_taxonomies(self.pages.values())

    def section_pages(self, section: Section) -> list[Page]:
        """Return the ordered pages of ``section`` as records."""
        return [self.pages[path] for path in section.pages]

    def orphan_pages(self) -> list[Page]:
        return [self.pages[path] for path in self.orphans]

    def ignored_pages(self) -> list[Page]:
        """Return every page some section left out of its ordering."""
        return [
            self.pages[path]
            for section in self.sections.values()
            for path in section.ignored_pages
        ]

    def subsections_of(self, section: Section) -> list[Section]:
        return [self.sections[path] for path in section.subsections]

    def pages_for(self, paths: cabc.Iterable[Path]) -> list[Page]:
        return [self.pages[path] for path in paths if path in self.pages]

    def put_page(self, page: Page) -> Page | None:
        """Insert or replace a page, returning the record it replaced."""
        previous = self.pages.get(page.file_path)
        self.pages[page.file_path] = page
        if previous is None:
            self.pages = dict(sorted(self.pages.items()))
        return previous

    def put_section(self, section: Section) -> Section | None:
        """Insert or replace a section, returning the record it replaced."""
        previous = self.sections.get(section.file_path)
        self.sections[section.file_path] = section
        if previous is None:
            self.sections = dict(sorted(self.sections.items()))
        return previous

    def item_for(self, path: Path) -> ContentItem | None:
        return self.pages.get(path) or self.sections.get(path)


class GraphBuilder:
    """Read content files into pages and sections and load a full graph."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        content_root: Path | None = None,
        renderer: HtmlContentRenderer | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : SiteConfig
            Site configuration providing the base URL and pagination defaults.
        content_root : Path, optional
            Directory to discover; defaults to ``config.content_dir``.
        renderer : HtmlContentRenderer, optional
            Body renderer; defaults to one using ``config.pygments_style``.
        """
        self.config = config
        self.content_root = Path(content_root or config.content_dir).absolute()
        self.renderer = renderer or HtmlContentRenderer(config.pygments_style)

    def load(self) -> SiteGraph:
        """Run a full discovery, permalink, render and link pass.

        Raises
        ------
        OSError
            If the content root or a content file cannot be read.
        ParseError
            If any file's front matter is malformed.
        ConfigError
            If a section declares invalid sort or pagination settings.
        LinkResolutionError
            If any body links to a document that does not exist.
        """
        pages, sections = self.discover()
        graph = SiteGraph(
            config=self.config,
            content_root=self.content_root,
            pages=pages,
            sections=sections,
        )
        self.ensure_root_section(graph)
        graph.permalinks = PermalinkTable.build(
            graph.pages.values(), graph.sections.values()
        )
        for item in (*graph.pages.values(), *graph.sections.values()):
            self.render_body(item, graph.permalinks)
        graph.relink()
        logger.info(
            "Loaded %d page(s) and %d section(s) from %s",
            len(graph.pages),
            len(graph.sections),
            self.content_root,
        )
        return graph

    def discover(self) -> tuple[dict[Path, Page], dict[Path, Section]]:
        """Read every content file below the content root.

        Files are visited in sorted path order, which is the order sections
        with ``sort_by: none`` list their pages in.
        """
        pages: dict[Path, Page] = {}
        sections: dict[Path, Section] = {}
        for path in self._content_files():
            if self.is_section_file(path):
                sections[path] = self.read_section(path)
            else:
                pages[path] = self.read_page(path)
        return pages, sections

    def _content_files(self) -> list[Path]:
        if not self.content_root.is_dir():
            msg = f"Content directory '{self.content_root}' not found."
            raise FileNotFoundError(msg)

        def _raise(error: OSError) -> typ.NoReturn:
            raise error

        found: list[Path] = []
        walker = os.walk(self.content_root, onerror=_raise)
        for dirpath, _dirnames, filenames in walker:
            found.extend(
                Path(dirpath) / name
                for name in filenames
                if name.endswith(CONTENT_SUFFIX)
            )
        return sorted(found)

    @staticmethod
    def is_section_file(path: Path) -> bool:
        return path.name == SECTION_INDEX_FILENAME

    def is_content_file(self, path: Path) -> bool:
        """Return whether ``path`` is a markdown file below the content root."""
        return path.suffix == CONTENT_SUFFIX and path.is_relative_to(
            self.content_root
        )

    def read_page(self, path: Path) -> Page:
        """Parse one page file; the body is rendered separately."""
        relative_path = self._relative(path)
        raw, body = parse_front_matter(path.read_text(encoding="utf-8"), relative_path)
        meta = page_meta_from_mapping(raw, relative_path)

        assets: list[Path] = []
        if path.stem == PAGE_BUNDLE_STEM and path.parent != self.content_root:
            parent_path = path.parent.parent
            file_slug = path.parent.name
            assets = sorted(
                entry
                for entry in path.parent.iterdir()
                if entry.is_file() and entry.suffix != CONTENT_SUFFIX
            )
        else:
            parent_path = path.parent
            file_slug = path.stem

        components = list(parent_path.relative_to(self.content_root).parts)
        slug = meta.slug or slugify(file_slug) or file_slug
        if meta.url:
            url_path = meta.url.strip("/")
        else:
            url_path = "/".join([*components, slug])
        return Page(
            file_path=path,
            relative_path=relative_path,
            parent_path=parent_path,
            components=components,
            slug=slug,
            path=url_path,
            permalink=self.config.make_permalink(url_path),
            meta=meta,
            raw_content=body,
            assets=assets,
        )

    def read_section(self, path: Path) -> Section:
        """Parse one ``_index.md`` file; the body is rendered separately."""
        relative_path = self._relative(path)
        raw, body = parse_front_matter(path.read_text(encoding="utf-8"), relative_path)
        meta = section_meta_from_mapping(raw, relative_path)
        components = list(path.parent.relative_to(self.content_root).parts)
        return self._section(path, components, meta, raw_content=body)

    def ensure_root_section(self, graph: SiteGraph) -> Section | None:
        """Insert a synthetic root section when ``_index.md`` is missing.

        Returns the inserted section, or ``None`` when a root already exists.
        """
        key = self.content_root / SECTION_INDEX_FILENAME
        if key in graph.sections:
            return None
        root = self._section(key, [], SectionMeta(), synthetic=True)
        graph.put_section(root)
        logger.debug("No %s at the content root; using a default", key.name)
        return root

    def render_body(self, item: ContentItem, permalinks: PermalinkTable) -> None:
        """Render ``item``'s markdown body (and summary) into HTML."""
        item.content = self.renderer.render(
            item.raw_content, permalinks, source=item.relative_path
        )
        if isinstance(item, Page):
            head, marker, _rest = item.raw_content.partition(SUMMARY_SEPARATOR)
            item.summary = (
                self.renderer.render(head, permalinks, source=item.relative_path)
                if marker
                else None
            )

    def _section(
        self,
        path: Path,
        components: list[str],
        meta: SectionMeta,
        *,
        raw_content: str = "",
        synthetic: bool = False,
    ) -> Section:
        url_path = "/".join(components)
        paginate_by = meta.paginate_by
        if paginate_by is None:
            paginate_by = self.config.paginate_by
        return Section(
            file_path=path,
            relative_path=self._relative(path),
            parent_path=path.parent,
            components=components,
            path=url_path,
            permalink=self.config.make_permalink(url_path),
            meta=meta,
            paginate_by=paginate_by,
            paginate_path=meta.paginate_path or self.config.paginate_path,
            raw_content=raw_content,
            synthetic=synthetic,
        )

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.content_root).as_posix()


def link(sections: dict[Path, Section], pages: dict[Path, Page]) -> list[Path]:
    """Attach pages and subsections to sections and order each section.

    Every section's child lists and every page's neighbour links are cleared
    and rebuilt from ``sections`` and ``pages``.

    Returns
    -------
    list[Path]
        Source paths of the pages that belong to no section.
    """
    for section in sections.values():
        section.reset_children()
    for page in pages.values():
        page.previous = None
        page.next = None

    children: dict[Path, list[Page]] = {}
    orphans: list[Path] = []
    for page in pages.values():
        if page.section_key in sections:
            children.setdefault(page.section_key, []).append(page)
        else:
            orphans.append(page.file_path)

    by_grandparent: dict[Path, list[Section]] = {}
    for section in sections.values():
        by_grandparent.setdefault(section.parent_path.parent, []).append(section)

    for key, section in sections.items():
        ordered, ignored = sort_pages(children.get(key, []), section.meta.sort_by)
        link_neighbours(ordered)
        section.pages = [page.file_path for page in ordered]
        section.ignored_pages = [page.file_path for page in ignored]
        section.subsections = [
            candidate.file_path
            for candidate in sorted(
                by_grandparent.get(section.parent_path, []),
                key=lambda item: item.relative_path,
            )
            if candidate is not section
        ]
    return orphans


__all__ = ["GraphBuilder", "SiteGraph", "link"]
