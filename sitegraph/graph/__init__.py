"""Build, link and query the site content graph."""

from .builder import GraphBuilder, SiteGraph, link
from .pagination import Pager, Paginator, paginate
from .permalinks import PermalinkTable
from .sorting import link_neighbours, sort_pages
from .taxonomies import ListItem, TaxonomyIndex, build_taxonomies, slugify

__all__ = [
    "GraphBuilder",
    "ListItem",
    "Pager",
    "Paginator",
    "PermalinkTable",
    "SiteGraph",
    "TaxonomyIndex",
    "build_taxonomies",
    "link",
    "link_neighbours",
    "paginate",
    "slugify",
    "sort_pages",
]
