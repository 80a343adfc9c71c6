"""Derive tag and category indexes from page metadata.

The indexes are never edited in place: every structural change rebuilds them
from the current page collection. Buckets hold page source paths, not pages, so
they cannot drift from the graph's canonical records.

Example
-------
>>> from pathlib import Path
>>> from types import SimpleNamespace
>>> from sitegraph.content.models import PageMeta
>>> page = SimpleNamespace(
...     file_path=Path("a.md"), meta=PageMeta(tags=frozenset({"x"}), category="news")
... )
>>> index = build_taxonomies([page])
>>> index.tags
{'x': (PosixPath('a.md'),)}
>>> [item.name for item in index.category_items()]
['news']
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
import unicodedata

from sitegraph.errors import TaxonomyError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from sitegraph.content.models import Page


def slugify(value: str) -> str:
    """Convert a string into a lowercase hyphen-separated slug.

    Accents are stripped and other letters are kept, so ``"Café"`` becomes
    ``"cafe"`` while names in scripts without an ASCII form keep their
    characters. Punctuation and whitespace collapse into single hyphens.
    """
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[\W_]+", "-", stripped.lower()).strip("-")


@dc.dataclass(slots=True, frozen=True)
class ListItem:
    """One tag or category as shown on a listing page."""

    name: str
    slug: str
    count: int


@dc.dataclass(slots=True)
class TaxonomyIndex:
    """Tag and category buckets keyed by name."""

    tags: dict[str, tuple[Path, ...]] = dc.field(default_factory=dict)
    categories: dict[str, tuple[Path, ...]] = dc.field(default_factory=dict)

    def tag_items(self) -> list[ListItem]:
        return _list_items(self.tags)

    def category_items(self) -> list[ListItem]:
        return _list_items(self.categories)


def build_taxonomies(pages: cabc.Iterable[Page]) -> TaxonomyIndex:
    """Return tag and category buckets for ``pages``.

    The result does not depend on iteration order: names are sorted and each
    bucket is sorted by source path.
    """
    tags: dict[str, set[Path]] = {}
    categories: dict[str, set[Path]] = {}
    for page in pages:
        for tag in page.meta.tags:
            tags.setdefault(tag, set()).add(page.file_path)
        if page.meta.category:
            categories.setdefault(page.meta.category, set()).add(page.file_path)
    _check_slugs(tags, "tag")
    _check_slugs(categories, "category")
    return TaxonomyIndex(tags=_freeze(tags), categories=_freeze(categories))


def _check_slugs(buckets: dict[str, set[Path]], kind: str) -> None:
    """Raise if a name has an empty slug or shares its slug with another name."""
    seen: dict[str, str] = {}
    for name in sorted(buckets):
        source = min(buckets[name])
        slug = slugify(name)
        if not slug:
            msg = f"{kind} {name!r} has no characters usable in a URL"
            raise TaxonomyError(msg, path=source)
        other = seen.setdefault(slug, name)
        if other != name:
            msg = f"{kind} {name!r} and {other!r} would share the URL slug {slug!r}"
            raise TaxonomyError(msg, path=source)


def _freeze(buckets: dict[str, set[Path]]) -> dict[str, tuple[Path, ...]]:
    return {name: tuple(sorted(buckets[name])) for name in sorted(buckets)}


def _list_items(buckets: cabc.Mapping[str, tuple[Path, ...]]) -> list[ListItem]:
    """Return listing entries, largest bucket first, ties by name."""
    items = [
        ListItem(name, slugify(name), len(paths)) for name, paths in buckets.items()
    ]
    items.sort(key=lambda item: (-item.count, item.name))
    return items


__all__ = ["ListItem", "TaxonomyIndex", "build_taxonomies", "slugify"]
