"""Order a section's pages and thread previous/next links through them."""

from __future__ import annotations

import logging
import typing as typ

from sitegraph.content.models import SortBy

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sitegraph.content.models import Page

logger = logging.getLogger(__name__)


def sort_pages(
    pages: cabc.Iterable[Page], sort_by: SortBy
) -> tuple[list[Page], list[Page]]:
    """Split ``pages`` into those ordered by ``sort_by`` and those it ignores.

    Parameters
    ----------
    pages : Iterable[Page]
        Pages in discovery order.
    sort_by : SortBy
        ``DATE`` sorts newest first, ``ORDER`` ascending by ``order``,
        ``WEIGHT`` descending by ``weight``, and ``NONE`` keeps discovery
        order.

    Returns
    -------
    tuple[list[Page], list[Page]]
        The ordered pages and the pages lacking the key the mode needs. Both
        keep discovery order among equal keys.
    """
    sortable: list[Page] = []
    ignored: list[Page] = []
    for page in pages:
        if page.meta.has_sort_key(sort_by):
            sortable.append(page)
        else:
            ignored.append(page)

    match sort_by:
        case SortBy.DATE:
            sortable.sort(key=lambda page: page.meta.date, reverse=True)
        case SortBy.ORDER:
            sortable.sort(key=lambda page: page.meta.order)
        case SortBy.WEIGHT:
            sortable.sort(key=lambda page: page.meta.weight, reverse=True)
        case _:
            pass

    if ignored:
        logger.info(
            "%d page(s) lack a '%s' value and were left out of the ordering: %s",
            len(ignored),
            sort_by.value,
            ", ".join(page.relative_path for page in ignored),
        )
    return sortable, ignored


def link_neighbours(pages: cabc.Sequence[Page]) -> None:
    """Point each page at its predecessor and successor in ``pages``."""
    last = len(pages) - 1
    for index, page in enumerate(pages):
        page.previous = pages[index - 1].file_path if index > 0 else None
        page.next = pages[index + 1].file_path if index < last else None


__all__ = ["link_neighbours", "sort_pages"]
