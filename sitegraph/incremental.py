"""Apply single-file changes to a loaded site graph and its output tree.

A long-running process (a file watcher or dev server) keeps one
:class:`~sitegraph.graph.builder.SiteGraph` in memory and calls
:meth:`IncrementalController.apply` once per changed path. Each call picks the
cheapest rebuild that keeps the graph and the output consistent:

============================  ==========================================
change                        action
============================  ==========================================
``sitemap.xml``/``rss.xml``   re-render that one file
any other template            full build
section ``_index.md``         re-link, re-render that section
page, metadata unchanged      re-render that page
page, metadata changed/new    re-link, full build
content file deleted          drop it, re-link, full build
file in the static directory  copy that file
anything else                 nothing
============================  ==========================================

Calls must be serialized by the caller. Errors propagate and leave whatever
was already updated in place; the next full build repairs the output.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import typing as typ
from pathlib import Path

from sitegraph._constants import (
    RSS_TEMPLATE,
    SINGLE_PURPOSE_TEMPLATES,
    SITEMAP_TEMPLATE,
)
from sitegraph.content.models import Section
from sitegraph.graph.builder import GraphBuilder

if typ.TYPE_CHECKING:
    from sitegraph.generator.site_generator import SiteGenerator
    from sitegraph.graph.builder import SiteGraph

logger = logging.getLogger(__name__)


class RebuildAction(enum.Enum):
    """The rebuild path taken for one change."""

    NONE = "none"
    PAGE = "page"
    SECTION = "section"
    SINGLE_TEMPLATE = "single_template"
    FULL = "full"
    STATIC = "static"


@dc.dataclass(slots=True, frozen=True)
class ChangeOutcome:
    """Result of :meth:`IncrementalController.apply`.

    Attributes
    ----------
    action : RebuildAction
        Which rebuild path ran.
    path : Path
        The absolute path that changed.
    written : tuple[Path, ...]
        Files written or copied while handling the change.
    """

    action: RebuildAction
    path: Path
    written: tuple[Path, ...] = ()


class IncrementalController:
    """Keep a graph and its rendered output in step with file changes."""

    def __init__(
        self,
        graph: SiteGraph,
        generator: SiteGenerator,
        *,
        builder: GraphBuilder | None = None,
    ) -> None:
        """Initialize the controller.

        Parameters
        ----------
        graph : SiteGraph
            Loaded graph; it is updated in place.
        generator : SiteGenerator
            Generator rendering ``graph`` into the output tree.
        builder : GraphBuilder, optional
            Reader used to re-parse changed files; defaults to one rooted at
            ``graph.content_root``.
        """
        self.graph = graph
        self.generator = generator
        self.builder = builder or GraphBuilder(
            graph.config, content_root=graph.content_root
        )

    def apply(self, changed_path: Path | str) -> ChangeOutcome:
        """Bring the graph and output up to date with one changed path.

        Raises
        ------
        ParseError, ConfigError, LinkResolutionError, TaxonomyError
            If the changed content cannot be read back into the graph.
        jinja2.TemplateError
            If a template fails to load or render.
        OSError
            If reading or writing files fails.
        """
        path = Path(changed_path).absolute()
        start = len(self.generator.writer.written)

        action = self._dispatch(path)

        written = self.generator.writer.written
        if action is not RebuildAction.FULL:
            written = written[start:]
        logger.info("%s: %s rebuild", path, action.value)
        return ChangeOutcome(action=action, path=path, written=tuple(written))

    def _dispatch(self, path: Path) -> RebuildAction:
        if path.is_relative_to(self.generator.templates_dir.absolute()):
            return self.template_changed(path)
        if self.builder.is_content_file(path):
            if not path.exists():
                return self.content_deleted(path)
            if self.builder.is_section_file(path):
                return self.section_changed(path)
            return self.page_changed(path)
        if path.is_relative_to(self.graph.config.static_dir.absolute()):
            return self.static_changed(path)
        return RebuildAction.NONE

    def template_changed(self, path: Path) -> RebuildAction:
        """Reload templates and re-render what depends on ``path``."""
        self.generator.reload_templates()
        name = path.relative_to(self.generator.templates_dir.absolute()).as_posix()
        if name not in SINGLE_PURPOSE_TEMPLATES:
            self.generator.run()
            return RebuildAction.FULL
        if name == SITEMAP_TEMPLATE:
            self.generator.render_sitemap()
        elif name == RSS_TEMPLATE and self.graph.config.generate_rss:
            self.generator.render_rss_feed()
        return RebuildAction.SINGLE_TEMPLATE

    def section_changed(self, path: Path) -> RebuildAction:
        """Re-read a section and re-render its listing and pages."""
        section = self.builder.read_section(path)
        self.graph.put_section(section)
        self.graph.permalinks.patch(section)
        self.builder.render_body(section, self.graph.permalinks)
        self.graph.relink()
        self.generator.render_section(section)
        return RebuildAction.SECTION

    def page_changed(self, path: Path) -> RebuildAction:
        """Re-read a page; rebuild everything only if its metadata changed.

        Metadata drives ordering, taxonomy membership and the page's URL, so
        any difference (or a page that was not in the graph before) needs a
        re-link and a full build. Otherwise only the page is re-rendered and
        it keeps its neighbours.
        """
        page = self.builder.read_page(path)
        previous = self.graph.put_page(page)
        self.graph.permalinks.patch(page)
        self.builder.render_body(page, self.graph.permalinks)

        if previous is not None and previous.meta == page.meta:
            page.previous = previous.previous
            page.next = previous.next
            self.generator.render_page(page)
            return RebuildAction.PAGE

        self.graph.relink()
        self.generator.run()
        return RebuildAction.FULL

    def content_deleted(self, path: Path) -> RebuildAction:
        """Drop a deleted page or section and rebuild everything."""
        item = self.graph.item_for(path)
        if item is None:
            logger.debug("%s was never loaded; nothing to remove", path)
            return RebuildAction.NONE

        self.graph.permalinks.remove(item.relative_path)
        if isinstance(item, Section):
            del self.graph.sections[path]
            root = self.builder.ensure_root_section(self.graph)
            if root is not None:
                self.graph.permalinks.patch(root)
        else:
            del self.graph.pages[path]

        self.graph.relink()
        self.generator.run()
        return RebuildAction.FULL

    def static_changed(self, path: Path) -> RebuildAction:
        """Copy one static file; deletions wait for the next full build."""
        if not path.is_file():
            return RebuildAction.NONE
        self.generator.copy_static_file(path)
        return RebuildAction.STATIC


__all__ = ["ChangeOutcome", "IncrementalController", "RebuildAction"]
