"""Content records and the front-matter collaborator that fills them."""

from .front_matter import (
    page_meta_from_mapping,
    parse_front_matter,
    section_meta_from_mapping,
)
from .models import ContentItem, Page, PageMeta, Section, SectionMeta, SortBy

__all__ = [
    "ContentItem",
    "Page",
    "PageMeta",
    "Section",
    "SectionMeta",
    "SortBy",
    "page_meta_from_mapping",
    "parse_front_matter",
    "section_meta_from_mapping",
]
