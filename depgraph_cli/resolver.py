"""Lexical module resolution over a virtual set of project paths.

Resolution never touches a filesystem: a specifier is turned into a
candidate path by alias substitution or relative joining, then probed
against the known paths in bundler order.

    exact match  >  candidate + extension  >  candidate/index-file

Within each step the configured list order breaks ties.
"""

from __future__ import annotations

from typing import AbstractSet, List, Optional

from .config import AnalysisConfig


def collapse_path(base_dir: str, relative: str) -> str:
    """Join *relative* onto *base_dir* and collapse ``.`` / ``..`` segments.

    ``..`` above the root stays at the root. The result is always absolute.
    """
    parts: List[str] = [p for p in base_dir.split("/") if p]
    for part in relative.split("/"):
        if not part or part == ".":
            continue
        if part == "..":
            if parts:
                parts.pop()
        else:
            parts.append(part)
    return "/" + "/".join(parts)


def dirname(path: str) -> str:
    return path[: path.rfind("/")] if "/" in path else ""


class PathResolver:
    """Resolve raw import specifiers to project-local file paths."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        self.config = config or AnalysisConfig()
        # Longest prefix first so "@/lib/" wins over "@/"
        self._aliases = sorted(self.config.aliases.items(), key=lambda kv: len(kv[0]), reverse=True)

    def _alias_for(self, specifier: str) -> Optional[tuple]:
        for prefix, root in self._aliases:
            if specifier.startswith(prefix):
                return prefix, root
        return None

    def is_external(self, specifier: str) -> bool:
        """True for bare package specifiers such as ``react`` or ``@scope/pkg``."""
        return not specifier.startswith(".") and self._alias_for(specifier) is None

    def candidate_path(self, specifier: str, importing_path: str) -> Optional[str]:
        """The collapsed path a specifier points at, before probing extensions."""
        if specifier.startswith("."):
            return collapse_path(dirname(importing_path), specifier)
        alias = self._alias_for(specifier)
        if alias is None:
            return None
        prefix, root = alias
        return collapse_path(root, specifier[len(prefix):])

    def resolve(
        self,
        specifier: str,
        importing_path: str,
        known_paths: AbstractSet[str],
    ) -> Optional[str]:
        """Return the project file *specifier* refers to, or ``None``.

        ``None`` covers both external packages and local targets that do not
        exist in *known_paths*.
        """
        target = self.candidate_path(specifier, importing_path)
        if target is None:
            return None

        if target in known_paths:
            return target

        for ext in self.config.resolve_extensions:
            with_ext = target + ext
            if with_ext in known_paths:
                return with_ext

        base = target.rstrip("/")
        for index_file in self.config.index_files:
            with_index = f"{base}/{index_file}"
            if with_index in known_paths:
                return with_index

        return None
