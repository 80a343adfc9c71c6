"""Entry points for loading, building and incrementally updating a site.

Examples
--------
>>> from pathlib import Path
>>> from sitegraph.config import load_site_config
>>> from sitegraph.site import apply_change, build, load_all
>>> config = load_site_config(Path("config.yaml"))  # doctest: +SKIP
>>> graph = load_all(config.content_dir, config)  # doctest: +SKIP
>>> build(graph, config.output_dir)  # doctest: +SKIP
>>> graph = apply_change(  # doctest: +SKIP
...     graph, Path("content/posts/hello.md"), config.output_dir
... )
"""

from __future__ import annotations

import typing as typ

from .generator.site_generator import SiteGenerator
from .graph.builder import GraphBuilder
from .incremental import IncrementalController

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config.models import SiteConfig
    from .graph.builder import SiteGraph


def load_all(content_root: Path, config: SiteConfig) -> SiteGraph:
    """Discover, link and render every content file below ``content_root``."""
    return GraphBuilder(config, content_root=content_root).load()


def build(graph: SiteGraph, output_root: Path) -> None:
    """Clean ``output_root`` and render ``graph`` into it."""
    SiteGenerator(graph, output_root).run()


def apply_change(graph: SiteGraph, changed_path: Path, output_root: Path) -> SiteGraph:
    """Update ``graph`` and ``output_root`` for one changed file.

    Parameters
    ----------
    graph : SiteGraph
        Graph previously returned by :func:`load_all`; updated in place.
    changed_path : Path
        File that was created, modified or deleted.
    output_root : Path
        Directory the graph was built into.

    Returns
    -------
    SiteGraph
        The updated graph.
    """
    controller = IncrementalController(graph, SiteGenerator(graph, output_root))
    controller.apply(changed_path)
    return graph


__all__ = ["apply_change", "build", "load_all"]
