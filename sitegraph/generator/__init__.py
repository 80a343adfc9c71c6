"""Markdown rendering, link rewriting and output writing for sitegraph builds.

:class:`~sitegraph.generator.site_generator.SiteGenerator` is imported from its
own module; the graph builder depends on the renderer exported here.
"""

from .link_rewriter import RelativeLinkExtension
from .renderer import HtmlContentRenderer
from .writer import OutputWriter

__all__ = ["HtmlContentRenderer", "OutputWriter", "RelativeLinkExtension"]
