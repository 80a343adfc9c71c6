"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import logging
import typing as typ

from ruamel.yaml import YAML

from .helpers import (
    _coerce_bool,
    _coerce_mapping,
    _coerce_non_negative_int,
    _optional_str,
    _resolve_dir,
)
from .models import ConfigError, SiteConfig

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the site to build.

    Parameters
    ----------
    path : Path
        Filesystem path to the site configuration file (usually
        ``config.yaml`` at the site root). Relative directories in the file
        are resolved against its parent directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    ConfigError
        If ``base_url`` is missing or a value has the wrong type.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from sitegraph.config import load_site_config
    >>> config = load_site_config(Path("config.yaml"))  # doctest: +SKIP
    >>> config.make_permalink("posts")  # doctest: +SKIP
    'https://example.com/posts/'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    config = build_site_config(dict(loaded), root=path.resolve().parent)
    logger.debug("Loaded site config from %s", path)
    return config


def build_site_config(raw: typ.Mapping[str, typ.Any], *, root: Path) -> SiteConfig:
    """Build a :class:`SiteConfig` from an already parsed mapping."""
    base_url = _optional_str(raw.get("base_url"))
    if not base_url:
        msg = "Configuration is missing 'base_url'."
        raise ConfigError(msg)

    raw_paginate_path = _optional_str(raw.get("paginate_path")) or "page"
    paginate_path = raw_paginate_path.strip("/")
    if not paginate_path or "/" in paginate_path:
        msg = (
            "'paginate_path' must be a single path segment, "
            f"got {raw_paginate_path!r}."
        )
        raise ConfigError(msg)

    return SiteConfig(
        base_url=base_url,
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        language_code=_optional_str(raw.get("language_code")) or "en",
        root=root,
        content_dir=_resolve_dir(
            root, raw.get("content_dir"), key="content_dir", default="content"
        ),
        output_dir=_resolve_dir(
            root, raw.get("output_dir"), key="output_dir", default="public"
        ),
        static_dir=_resolve_dir(
            root, raw.get("static_dir"), key="static_dir", default="static"
        ),
        templates_dir=_resolve_dir(
            root, raw.get("templates_dir"), key="templates_dir", default="templates"
        ),
        paginate_by=_coerce_non_negative_int(
            raw.get("paginate_by"), key="paginate_by", default=0
        ),
        paginate_path=paginate_path,
        generate_tags_pages=_coerce_bool(
            raw.get("generate_tags_pages"), key="generate_tags_pages", default=True
        ),
        generate_categories_pages=_coerce_bool(
            raw.get("generate_categories_pages"),
            key="generate_categories_pages",
            default=True,
        ),
        generate_rss=_coerce_bool(
            raw.get("generate_rss"), key="generate_rss", default=False
        ),
        rss_limit=_coerce_non_negative_int(
            raw.get("rss_limit"), key="rss_limit", default=15
        ),
        pygments_style=_optional_str(raw.get("pygments_style")) or "monokai",
        extra=_coerce_mapping(raw.get("extra"), key="extra"),
    )


__all__ = ["build_site_config", "load_site_config"]
