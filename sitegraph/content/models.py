"""Passive records for pages, sections, and their front-matter metadata.

Pages and sections live in flat dictionaries keyed by source path (see
:class:`~sitegraph.graph.builder.SiteGraph`). A section refers to its children
by path and a page refers to its neighbours by path, so the records never form
object cycles and can be recomputed wholesale.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import enum
import typing as typ
from pathlib import Path  # noqa: TC003 - used for runtime type metadata

from sitegraph._constants import (
    INDEX_TEMPLATE,
    PAGE_TEMPLATE,
    SECTION_INDEX_FILENAME,
    SECTION_TEMPLATE,
)


class SortBy(enum.Enum):
    """Ordering applied to a section's child pages."""

    NONE = "none"
    DATE = "date"
    ORDER = "order"
    WEIGHT = "weight"


@dc.dataclass(slots=True)
class PageMeta:
    """Typed page front matter.

    Equality is field-by-field; ``tags`` is a frozenset so two records that
    list the same tags in a different order compare equal.
    """

    title: str | None = None
    description: str | None = None
    date: dt.datetime | None = None
    order: int | None = None
    weight: int | None = None
    tags: frozenset[str] = frozenset()
    category: str | None = None
    template: str | None = None
    draft: bool = False
    slug: str | None = None
    url: str | None = None
    extra: dict[str, typ.Any] = dc.field(default_factory=dict)

    @property
    def sorted_tags(self) -> list[str]:
        """Return the tags in lexical order for stable rendering."""
        return sorted(self.tags)

    def has_sort_key(self, sort_by: SortBy) -> bool:
        """Return whether this page can be placed under ``sort_by``."""
        match sort_by:
            case SortBy.DATE:
                return self.date is not None
            case SortBy.ORDER:
                return self.order is not None
            case SortBy.WEIGHT:
                return self.weight is not None
            case _:
                return True


@dc.dataclass(slots=True)
class SectionMeta:
    """Typed section front matter as declared in ``_index.md``."""

    title: str | None = None
    description: str | None = None
    sort_by: SortBy = SortBy.NONE
    paginate_by: int | None = None
    paginate_path: str | None = None
    render: bool = True
    template: str | None = None
    extra: dict[str, typ.Any] = dc.field(default_factory=dict)


@dc.dataclass(slots=True, eq=False)
class Page:
    """A single content page.

    Attributes
    ----------
    file_path : Path
        Absolute source path; the page's identity.
    relative_path : str
        POSIX path relative to the content root, used as the cross-reference
        key in the permalink table.
    parent_path : Path
        Directory whose ``_index.md`` would own this page.
    components : list[str]
        Directory components of ``parent_path`` below the content root.
    slug : str
        Last URL segment of the page.
    path : str
        URL path below the base URL, without leading or trailing slashes.
    permalink : str
        Canonical absolute URL.
    meta : PageMeta
        Parsed front matter.
    raw_content : str
        Markdown body.
    assets : list[Path]
        Co-located files copied next to the rendered page.
    content : str
        Rendered HTML body.
    summary : str or None
        Rendered HTML of the text before the summary marker, if present.
    previous, next : Path or None
        Neighbours in the parent section's sort order.
    """

    file_path: Path
    relative_path: str
    parent_path: Path
    components: list[str]
    slug: str
    path: str
    permalink: str
    meta: PageMeta
    raw_content: str = ""
    assets: list[Path] = dc.field(default_factory=list)
    content: str = ""
    summary: str | None = None
    previous: Path | None = None
    next: Path | None = None

    @property
    def title(self) -> str:
        return self.meta.title or ""

    @property
    def section_key(self) -> Path:
        """Return the ``_index.md`` path of the section owning this page."""
        return self.parent_path / SECTION_INDEX_FILENAME

    @property
    def template_name(self) -> str:
        return self.meta.template or PAGE_TEMPLATE


@dc.dataclass(slots=True, eq=False)
class Section:
    """A directory of content described by its ``_index.md`` file.

    ``pages``, ``ignored_pages`` and ``subsections`` hold source paths and are
    rebuilt from scratch by :func:`~sitegraph.graph.builder.link`.
    """

    file_path: Path
    relative_path: str
    parent_path: Path
    components: list[str]
    path: str
    permalink: str
    meta: SectionMeta
    paginate_by: int = 0
    paginate_path: str = "page"
    raw_content: str = ""
    content: str = ""
    synthetic: bool = False
    pages: list[Path] = dc.field(default_factory=list)
    ignored_pages: list[Path] = dc.field(default_factory=list)
    subsections: list[Path] = dc.field(default_factory=list)

    @property
    def title(self) -> str:
        return self.meta.title or ""

    @property
    def is_index(self) -> bool:
        """Return whether this is the content root's section."""
        return not self.components

    @property
    def is_paginated(self) -> bool:
        return self.paginate_by > 0

    @property
    def should_render(self) -> bool:
        return self.meta.render

    @property
    def template_name(self) -> str:
        if self.meta.template:
            return self.meta.template
        return INDEX_TEMPLATE if self.is_index else SECTION_TEMPLATE

    def all_page_paths(self) -> list[Path]:
        """Return ordered and ignored child pages together."""
        return [*self.pages, *self.ignored_pages]

    def reset_children(self) -> None:
        self.pages = []
        self.ignored_pages = []
        self.subsections = []


ContentItem = Page | Section


__all__ = ["ContentItem", "Page", "PageMeta", "Section", "SectionMeta", "SortBy"]
