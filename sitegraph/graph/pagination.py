"""Split an ordered page sequence into fixed-size pagers.

Pagers are derived on demand from a section's ordered pages and are never
stored on the graph, so re-deriving them after an update always reflects the
current ordering.

Example
-------
>>> [(pager.index, pager.items) for pager in paginate(["a", "b", "c"], 2)]
[(1, ('a', 'b')), (2, ('c',))]
>>> list(paginate([], 2))
[]
"""

from __future__ import annotations

import dataclasses as dc
import math
import typing as typ

from sitegraph.config.models import ConfigError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sitegraph.config.models import SiteConfig
    from sitegraph.content.models import Page, Section

T = typ.TypeVar("T")


@dc.dataclass(slots=True, frozen=True)
class Pager(typ.Generic[T]):
    """One page-of-pages.

    Attributes
    ----------
    index : int
        1-based position of the pager.
    items : tuple
        The slice of the input this pager shows.
    previous, next : int or None
        Indexes of the neighbouring pagers.
    """

    index: int
    items: tuple[T, ...]
    previous: int | None
    next: int | None


def paginate(items: cabc.Sequence[T], page_size: int) -> cabc.Iterator[Pager[T]]:
    """Yield pagers of ``page_size`` items; the last one may be short.

    Raises
    ------
    ConfigError
        If ``page_size`` is smaller than 1.
    """
    if page_size < 1:
        msg = f"Page size must be at least 1, got {page_size}."
        raise ConfigError(msg)
    return _iter_pagers(items, page_size)


def _iter_pagers(items: cabc.Sequence[T], page_size: int) -> cabc.Iterator[Pager[T]]:
    total = math.ceil(len(items) / page_size)
    for number in range(1, total + 1):
        start = (number - 1) * page_size
        yield Pager(
            index=number,
            items=tuple(items[start : start + page_size]),
            previous=number - 1 if number > 1 else None,
            next=number + 1 if number < total else None,
        )


class Paginator:
    """Re-iterable pagination of a section's ordered pages.

    Iterating a paginator always re-derives the pagers from the page list it
    was given, so it can be walked any number of times.
    """

    def __init__(
        self, section: Section, pages: cabc.Sequence[Page], config: SiteConfig
    ) -> None:
        self.section = section
        self.pages = pages
        self.config = config
        self.page_size = section.paginate_by
        if self.page_size < 1:
            msg = f"{section.relative_path}: section is not paginated."
            raise ConfigError(msg)

    def __iter__(self) -> cabc.Iterator[Pager[Page]]:
        return paginate(self.pages, self.page_size)

    def __len__(self) -> int:
        return math.ceil(len(self.pages) / self.page_size)

    def path_for(self, index: int) -> str:
        """Return the URL path of pager ``index`` below the base URL."""
        segments = [self.section.path] if self.section.path else []
        if index > 1:
            segments.extend([self.section.paginate_path, str(index)])
        return "/".join(segments)

    def permalink_for(self, index: int) -> str:
        return self.config.make_permalink(self.path_for(index))

    def alias_path(self) -> str:
        """Return the URL path of ``<paginate_path>/1``, which redirects."""
        segments = [self.section.path] if self.section.path else []
        segments.extend([self.section.paginate_path, "1"])
        return "/".join(segments)

    def context(self, pager: Pager[Page]) -> dict[str, typ.Any]:
        """Return the template variables describing ``pager``."""
        total = len(self)
        return {
            "pages": list(pager.items),
            "current_index": pager.index,
            "number_pagers": total,
            "paginate_by": self.page_size,
            "permalink": self.permalink_for(pager.index),
            "first": self.permalink_for(1),
            "last": self.permalink_for(max(total, 1)),
            "previous": (
                self.permalink_for(pager.previous) if pager.previous else None
            ),
            "next": self.permalink_for(pager.next) if pager.next else None,
        }


__all__ = ["Pager", "Paginator", "paginate"]
