"""Load a directory tree into an in-memory :class:`SourceFile` snapshot."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import AbstractSet, List, Optional, Set, Union

from .models import SourceFile

logger = logging.getLogger(__name__)

SKIP_DIRS: Set[str] = {
    "node_modules", ".git", ".next", ".turbo", ".vercel", ".cache",
    "dist", "build", "out", "coverage", ".venv", "venv", "__pycache__",
}


def virtual_path(root: Path, file_path: Path) -> str:
    """``<root>/src/a.ts`` -> ``/src/a.ts``."""
    return "/" + file_path.relative_to(root).as_posix()


def load_source_files(root: Path, skip_dirs: Optional[AbstractSet[str]] = None) -> List[SourceFile]:
    """Read every file below *root* into a snapshot with absolute virtual paths.

    Files that are not valid UTF-8 are kept as raw ``bytes`` so the graph
    still gets a node for them. Unreadable files are skipped.
    """
    if skip_dirs is None:
        skip_dirs = SKIP_DIRS
    root = root.resolve()
    files: List[SourceFile] = []

    for file_path in sorted(root.rglob("*")):
        rel_parts = file_path.relative_to(root).parts
        if any(part in skip_dirs for part in rel_parts[:-1]):
            continue
        if not file_path.is_file():
            continue
        try:
            raw = file_path.read_bytes()
        except OSError as exc:
            logger.warning("Failed to read %s: %s", file_path, exc)
            continue
        try:
            content: Union[str, bytes] = raw.decode("utf-8")
        except UnicodeDecodeError:
            content = raw
        files.append(SourceFile(path=virtual_path(root, file_path), content=content))

    logger.debug("Loaded %d files from %s", len(files), root)
    return files
