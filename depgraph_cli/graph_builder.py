"""Build a bidirectional import graph from an in-memory file snapshot."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .config import AnalysisConfig
from .extractor import ImportExtractor, get_extractor
from .models import DependencyGraph, DependencyNode, SourceFile
from .resolver import PathResolver

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Runs extraction and resolution over every file and links the nodes.

    Extraction is independent per file and may run on a thread pool.
    Edge insertion always happens on the calling thread, in input order, so a
    parallel build produces exactly the same graph as a sequential one.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        extractor: Optional[ImportExtractor] = None,
        resolver: Optional[PathResolver] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.extractor = extractor or get_extractor(self.config.extractor)
        self.resolver = resolver or PathResolver(self.config)
        self.max_workers = max_workers if max_workers is not None else self.config.max_workers

    def build(self, files: Iterable[SourceFile]) -> DependencyGraph:
        unique = self._unique_files(files)
        known_paths: Set[str] = {f.path for f in unique}

        imports: Dict[str, List[str]] = {f.path: [] for f in unique}
        imported_by: Dict[str, List[str]] = {f.path: [] for f in unique}

        code_files = [f for f in unique if self.config.is_code_file(f.path)]

        for path, specifiers in self._extract_all(code_files):
            for specifier in specifiers:
                resolved = self.resolver.resolve(specifier, path, known_paths)
                if resolved is None:
                    logger.debug("Dropped unresolved import %r in %s", specifier, path)
                    continue
                imports[path].append(resolved)
                imported_by[resolved].append(path)

        nodes = {
            f.path: DependencyNode(
                file=f.path,
                imports=tuple(imports[f.path]),
                imported_by=tuple(imported_by[f.path]),
            )
            for f in unique
        }
        graph = DependencyGraph(nodes)
        logger.debug("Built graph: %d nodes, %d edges", len(graph), graph.edge_count)
        return graph

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _unique_files(files: Iterable[SourceFile]) -> List[SourceFile]:
        seen: Set[str] = set()
        unique: List[SourceFile] = []
        for f in files:
            if f.path in seen:
                logger.warning("Duplicate path %s in input; keeping the first copy", f.path)
                continue
            seen.add(f.path)
            unique.append(f)
        return unique

    def _extract_one(self, source: SourceFile) -> Tuple[str, List[str]]:
        try:
            return source.path, self.extractor.extract_content(source.content, source.path)
        except Exception as exc:
            logger.warning("Import extraction failed for %s: %s", source.path, exc)
            return source.path, []

    def _extract_all(self, files: Sequence[SourceFile]) -> List[Tuple[str, List[str]]]:
        if self.max_workers <= 1 or len(files) < 2:
            return [self._extract_one(f) for f in files]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            # map() yields in submission order
            return list(pool.map(self._extract_one, files))
