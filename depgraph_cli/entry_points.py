"""Detect conventional application entry points by file name."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .config import ENTRY_PATTERNS, compile_patterns
from .models import SourceFile


class EntryPointDetector:
    """Matches paths against page / layout / route / app-root naming patterns.

    Only paths are inspected, never file content.
    """

    def __init__(self, patterns: Optional[Iterable[str]] = None) -> None:
        self.patterns = compile_patterns(
            patterns if patterns is not None else ENTRY_PATTERNS, "entry pattern"
        )

    def is_entry_point(self, path: str) -> bool:
        return any(p.search(path) for p in self.patterns)

    def detect(self, files: Iterable[SourceFile]) -> List[str]:
        """Paths of every entry point in *files*, in input order."""
        return [f.path for f in files if self.is_entry_point(f.path)]
