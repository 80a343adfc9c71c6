"""Build static sites from a tree of markdown content.

The package loads ``content/`` into a graph of sections and pages, resolves
permalinks and relative links, orders and paginates sections, indexes tags and
categories, and renders the result with Jinja2 templates. A long-running
process can keep the graph in memory and apply single-file changes without a
full reload.

Exports
-------
- ``app``: Cyclopts application behind the ``sitegraph`` command.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``load_all``, ``build``, ``apply_change``: programmatic entry points.

Examples
--------
>>> from sitegraph import main
>>> main()  # doctest: +SKIP
>>> from sitegraph import load_all
>>> graph = load_all(Path("content"), config)  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main
from .site import apply_change, build, load_all

__all__ = ["app", "apply_change", "build", "load_all", "main"]
