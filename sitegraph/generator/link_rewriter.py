"""Rewrite relative markdown links to the permalinks of the documents they name.

A link counts as internal when it has no scheme or host, is not rooted at
``/``, and its path ends in ``.md``. It is resolved against the directory of
the linking document (so ``./sibling.md`` and ``../other/post.md`` both work),
looked up in the :class:`~sitegraph.graph.permalinks.PermalinkTable`, and
replaced by the target's permalink with any query and fragment preserved. A
target missing from the table raises
:class:`~sitegraph.errors.LinkResolutionError`.
"""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from sitegraph._constants import CONTENT_SUFFIX
from sitegraph.errors import LinkResolutionError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "tel:", "data:", "javascript:")


def _build_link_rewriter(
    permalinks: cabc.Mapping[str, str], source: str
) -> RelativeLinkExtension:
    """Return a RelativeLinkExtension for the document at ``source``."""
    return RelativeLinkExtension(permalinks, posixpath.dirname(source), source)


class RelativeLinkExtension(Extension):
    """Rewrite relative ``.md`` links to canonical permalinks.

    Insert this extension into a ``markdown.Markdown`` instance so links such
    as ``[next](./part-2.md#setup)`` render as
    ``https://example.com/guide/part-2/#setup``.
    """

    def __init__(
        self, permalinks: cabc.Mapping[str, str], base_dir: str, source: str
    ) -> None:
        super().__init__()
        self.permalinks = permalinks
        self.base_dir = base_dir
        self.source = source

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the relative-link treeprocessor on the Markdown instance."""
        processor = RelativeLinkTreeprocessor(
            md, self.permalinks, self.base_dir, self.source
        )
        md.treeprocessors.register(processor, "sitegraph_relative_links", 15)


class RelativeLinkTreeprocessor(Treeprocessor):
    """Resolve relative document links in the parsed markdown tree."""

    def __init__(
        self,
        md: Markdown,
        permalinks: cabc.Mapping[str, str],
        base_dir: str,
        source: str,
    ) -> None:
        super().__init__(md)
        self.permalinks = permalinks
        self.base_dir = base_dir
        self.source = source

    def run(self, root: Element) -> Element:
        """Rewrite every internal anchor, failing on the first unknown target."""
        for element in root.iter("a"):
            rewritten = self._rewrite(element.get("href"))
            if rewritten:
                element.set("href", rewritten)
        return root

    def _rewrite(self, target: str | None) -> str | None:
        """Return the permalink for an internal link, or None to leave it."""
        if not target:
            return None
        if target.lower().startswith(EXTERNAL_PREFIXES):
            return None
        if target.startswith(("#", "//", "/")) or "://" in target:
            return None

        parsed = urlsplit(target)
        if parsed.scheme or parsed.netloc:
            return None
        if not parsed.path.endswith(CONTENT_SUFFIX):
            return None

        joined = posixpath.normpath(posixpath.join(self.base_dir, parsed.path))
        permalink = self.permalinks.get(joined)
        if permalink is None or joined.startswith("../"):
            raise LinkResolutionError(target, path=self.source)

        url = permalink
        if parsed.query:
            url = f"{url}?{parsed.query}"
        if parsed.fragment:
            url = f"{url}#{parsed.fragment}"
        return url


__all__ = [
    "RelativeLinkExtension",
    "RelativeLinkTreeprocessor",
    "_build_link_rewriter",
]
