"""Common literal values used across sitegraph.

These constants keep reserved filenames and template names centralized so the
graph builder, the incremental controller, and tests agree on them.

Examples
--------
>>> from sitegraph import _constants
>>> _constants.SECTION_INDEX_FILENAME
'_index.md'
>>> "sitemap.xml" in _constants.SINGLE_PURPOSE_TEMPLATES
True
"""

CONTENT_SUFFIX = ".md"
SECTION_INDEX_FILENAME = "_index.md"
PAGE_BUNDLE_STEM = "index"
SUMMARY_SEPARATOR = "<!-- more -->"

INDEX_TEMPLATE = "index.html"
SECTION_TEMPLATE = "section.html"
PAGE_TEMPLATE = "page.html"
ALIAS_TEMPLATE = "internal/alias.html"
SITEMAP_TEMPLATE = "sitemap.xml"
RSS_TEMPLATE = "rss.xml"
ROBOTS_TEMPLATE = "robots.txt"

SINGLE_PURPOSE_TEMPLATES = frozenset({SITEMAP_TEMPLATE, RSS_TEMPLATE})
