"""Filesystem operations used to persist a rendered site.

All methods let ``OSError`` propagate; a failed write aborts the build.
"""

from __future__ import annotations

import logging
import shutil
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class OutputWriter:
    """Write rendered artefacts below an output root and keep a tally."""

    def __init__(self, output_root: Path) -> None:
        self.output_root = output_root
        self.written: list[Path] = []

    def write_file(self, path: Path, content: str) -> Path:
        """Write UTF-8 ``content`` to ``path``, creating parent directories."""
        self.ensure_directory(path.parent)
        if content and not content.endswith("\n"):
            content += "\n"
        path.write_text(content, encoding="utf-8")
        self.written.append(path)
        logger.debug("wrote %s", path)
        return path

    def copy_file(self, source: Path, destination: Path) -> Path:
        """Copy ``source`` to ``destination``, creating parent directories."""
        self.ensure_directory(destination.parent)
        shutil.copy2(source, destination)
        self.written.append(destination)
        logger.debug("copied %s -> %s", source, destination)
        return destination

    def ensure_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def delete_directory_recursive(self, path: Path) -> None:
        """Remove ``path`` and everything below it if it exists."""
        if path.exists():
            shutil.rmtree(path)
            logger.debug("removed %s", path)

    def clean(self) -> None:
        """Delete the whole output root so a build starts fresh."""
        self.delete_directory_recursive(self.output_root)
        self.written.clear()


__all__ = ["OutputWriter"]
