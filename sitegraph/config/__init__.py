"""Load and validate the site configuration YAML for sitegraph builds.

This subpackage parses the site's ``config.yaml``, applies defaults, resolves
the content/output/static/templates directories against the file's location,
and returns a :class:`SiteConfig` that the graph builder and generator consume.

Examples
--------
>>> from pathlib import Path
>>> from sitegraph.config import load_site_config
>>> site = load_site_config(Path("config.yaml"))  # doctest: +SKIP
>>> site.content_dir.name  # doctest: +SKIP
'content'
"""

from .loader import build_site_config, load_site_config
from .models import ConfigError, SiteConfig

__all__ = ["ConfigError", "SiteConfig", "build_site_config", "load_site_config"]
