"""Cyclopts CLI entrypoint for building sitegraph sites.

The ``sitegraph`` console script loads ``config.yaml``, builds the content
graph, and renders it into the output directory. ``sitegraph check`` loads the
graph without writing anything, so broken front matter and dangling relative
links surface quickly, and lists the pages no section will display.

Examples
--------
Build the site described by ``config.yaml`` in the current directory:

>>> from sitegraph.cli import main
>>> main()  # doctest: +SKIP

Build into a scratch directory with a local base URL:

>>> from sitegraph.cli import app
>>> app.run(
...     ["build", "--output-dir", "dist", "--base-url", "http://localhost:8000"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_site_config
from .site import build as build_site
from .site import load_all

DEFAULT_CONFIG = Path("config.yaml")

app = App(name="sitegraph", config=cyclopts.config.Env("SITEGRAPH_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command(help="Render the whole site into the output directory.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="SITEGRAPH_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="SITEGRAPH_OUTPUT_DIR"),
    ] = None,
    base_url: typ.Annotated[
        str | None,
        Parameter(help="Override the site base URL", env_var="SITEGRAPH_BASE_URL"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log every file operation")
    ] = False,
) -> None:
    """Load the content graph and render it.

    Parameters
    ----------
    config : Path, optional
        Path to ``config.yaml``; content, static and template directories are
        resolved relative to it.
    output_dir : Path or None, optional
        Directory to write into instead of the configured ``output_dir``.
    base_url : str or None, optional
        Base URL to use instead of the configured ``base_url``, e.g. for a
        local preview.
    verbose : bool, optional
        Enable debug logging.

    Raises
    ------
    ConfigError
        If the configuration or a section's settings are invalid.
    SiteError
        If a content file cannot be parsed or links to a missing document.
    """
    _configure_logging(verbose=verbose)
    site_config = load_site_config(config)
    overrides: dict[str, typ.Any] = {}
    if output_dir is not None:
        overrides["output_dir"] = output_dir
    if base_url is not None:
        overrides["base_url"] = base_url
    if overrides:
        site_config = dc.replace(site_config, **overrides)

    graph = load_all(site_config.content_dir, site_config)
    build_site(graph, site_config.output_dir)
    print(
        f"wrote {len(graph.pages)} page(s) and {len(graph.sections)} section(s) "
        f"to {_format_path(site_config.output_dir)}"
    )


@app.command(help="Load the site and report pages no section displays.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="SITEGRAPH_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: typ.Annotated[
        bool, Parameter(help="Enable debug logging")
    ] = False,
) -> None:
    """Load the content graph without writing output.

    Orphan pages (no ``_index.md`` in their directory) and pages a section
    left out of its ordering (missing ``date``/``order``/``weight``) are
    printed one per line.
    """
    _configure_logging(verbose=verbose)
    site_config = load_site_config(config)
    graph = load_all(site_config.content_dir, site_config)
    for page in graph.orphan_pages():
        print(f"orphan {page.relative_path}")
    for page in graph.ignored_pages():
        print(f"ignored {page.relative_path}")
    print(f"ok {len(graph.pages)} page(s), {len(graph.sections)} section(s)")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``sitegraph`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
