"""Error taxonomy shared by the content graph and its collaborators.

Every error raised while loading or rendering content carries the offending
source path so callers can point authors at the file to fix. File-system
failures surface as the builtin ``OSError`` and template failures as
``jinja2.TemplateError``; neither is wrapped.
"""

from __future__ import annotations

import typing as typ

from .config.models import ConfigError

if typ.TYPE_CHECKING:
    from pathlib import Path


class SiteError(Exception):
    """Base class for content errors tied to a source file."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class ParseError(SiteError):
    """Raised when a front-matter block is malformed or ill-typed."""


class TaxonomyError(SiteError):
    """Raised when tag or category names cannot be given distinct URLs."""


class LinkResolutionError(SiteError):
    """Raised when a relative link points at content that does not exist."""

    def __init__(self, target: str, *, path: Path | str | None = None) -> None:
        self.target = target
        super().__init__(f"relative link '{target}' not found", path=path)


__all__ = [
    "ConfigError",
    "LinkResolutionError",
    "ParseError",
    "SiteError",
    "TaxonomyError",
]
