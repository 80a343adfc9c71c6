"""Typed dataclasses describing sitegraph site configuration."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path


class ConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SiteConfig:
    """Site-wide settings loaded from ``config.yaml``.

    Attributes
    ----------
    base_url : str
        Absolute URL every permalink is joined onto.
    title : str
        Site title exposed to templates and the RSS feed.
    description : str
        Site description exposed to templates and the RSS feed.
    language_code : str
        Language tag written into the RSS feed.
    root : Path
        Directory containing the configuration file; relative directories
        below are resolved against it.
    content_dir : Path
        Directory walked for markdown content.
    output_dir : Path
        Directory the full build writes into.
    static_dir : Path
        Directory copied verbatim into the output.
    templates_dir : Path
        Directory holding site templates that override the built-in ones.
    paginate_by : int
        Default page size for sections that do not set ``paginate_by``;
        ``0`` disables pagination.
    paginate_path : str
        Default URL segment used for pager URLs.
    generate_tags_pages : bool
        Whether ``tags/`` listing pages are rendered.
    generate_categories_pages : bool
        Whether ``categories/`` listing pages are rendered.
    generate_rss : bool
        Whether ``rss.xml`` is rendered.
    rss_limit : int
        Maximum number of entries in the feed.
    pygments_style : str
        Pygments style used for highlighted code blocks.
    extra : dict[str, Any]
        Free-form values passed through to templates.
    """

    base_url: str
    title: str = ""
    description: str = ""
    language_code: str = "en"
    root: Path = dc.field(default_factory=Path)
    content_dir: Path = Path("content")
    output_dir: Path = Path("public")
    static_dir: Path = Path("static")
    templates_dir: Path = Path("templates")
    paginate_by: int = 0
    paginate_path: str = "page"
    generate_tags_pages: bool = True
    generate_categories_pages: bool = True
    generate_rss: bool = False
    rss_limit: int = 15
    pygments_style: str = "monokai"
    extra: dict[str, typ.Any] = dc.field(default_factory=dict)

    def make_permalink(self, path: str) -> str:
        """Join ``path`` onto the base URL, always ending with a slash.

        >>> SiteConfig(base_url="https://example.com/").make_permalink("/posts")
        'https://example.com/posts/'
        >>> SiteConfig(base_url="https://example.com").make_permalink("")
        'https://example.com/'
        """
        base = self.base_url.rstrip("/")
        trimmed = path.strip("/")
        if not trimmed:
            return f"{base}/"
        return f"{base}/{trimmed}/"

    def make_url(self, filename: str) -> str:
        """Return the absolute URL of a root-level file such as ``rss.xml``."""
        return f"{self.base_url.rstrip('/')}/{filename.lstrip('/')}"


__all__ = ["ConfigError", "SiteConfig"]
