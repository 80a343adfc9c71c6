"""Versioned lookup from a content file's relative path to its permalink.

The table is built once per full load, before any body is rendered, because
relative links inside bodies are resolved through it. Incremental updates
patch or remove exactly one entry so every other cross-reference stays valid.
The table is an ordinary object passed around explicitly; there is no
process-wide instance.

Example
-------
>>> table = PermalinkTable({"posts/a.md": "https://example.com/posts/a/"})
>>> table.resolve("posts/a.md")
'https://example.com/posts/a/'
>>> table.remove("posts/a.md")
>>> "posts/a.md" in table, table.version
(False, 1)
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

if typ.TYPE_CHECKING:
    from sitegraph.content.models import ContentItem, Page, Section


class PermalinkTable(cabc.Mapping[str, str]):
    """Read-mostly mapping of relative source path to canonical URL."""

    def __init__(self, entries: cabc.Mapping[str, str] | None = None) -> None:
        self._entries: dict[str, str] = dict(entries or {})
        self.version = 0

    @classmethod
    def build(
        cls, pages: cabc.Iterable[Page], sections: cabc.Iterable[Section]
    ) -> PermalinkTable:
        """Return a table holding one entry for every page and section."""
        table = cls()
        for item in (*pages, *sections):
            table._entries[item.relative_path] = item.permalink
        return table

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, relative_path: str) -> str | None:
        """Return the permalink for ``relative_path`` or ``None`` if unknown."""
        return self._entries.get(relative_path)

    def patch(self, item: ContentItem) -> None:
        """Insert or replace the entry for ``item``."""
        self._entries[item.relative_path] = item.permalink
        self.version += 1

    def remove(self, relative_path: str) -> None:
        """Drop the entry for a deleted item; unknown keys are ignored."""
        if self._entries.pop(relative_path, None) is not None:
            self.version += 1

    def as_dict(self) -> dict[str, str]:
        """Return a sorted plain-dict snapshot of the table."""
        return dict(sorted(self._entries.items()))


__all__ = ["PermalinkTable"]
