"""Facade coordinating graph construction, traversal, and discovery."""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from .analysis import impact_tree, impacted_files, reachable_files
from .config import AnalysisConfig
from .discovery import DiscoveryScanner, PurposeInferrer
from .entry_points import EntryPointDetector
from .graph_builder import GraphBuilder
from .models import DependencyGraph, DiscoveryReport, ImpactReport, SourceFile


class GraphOrchestrator:
    """Single entry point for callers that only hold a file snapshot.

    Holds configuration only; every call builds what it needs from scratch.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        max_workers: Optional[int] = None,
        purpose_inferrer: Optional[PurposeInferrer] = None,
    ):
        self.config = config or AnalysisConfig()
        self.builder = GraphBuilder(self.config, max_workers=max_workers)
        self.detector = EntryPointDetector(self.config.entry_patterns)
        self.scanner = DiscoveryScanner(
            self.config, builder=self.builder, purpose_inferrer=purpose_inferrer,
        )

    def build_graph(self, files: Iterable[SourceFile]) -> DependencyGraph:
        return self.builder.build(files)

    def entry_points(self, files: Iterable[SourceFile]) -> List[str]:
        return self.detector.detect(files)

    def reachable(self, graph: DependencyGraph, entry_points: Iterable[str]) -> Set[str]:
        return reachable_files(graph, entry_points)

    def impacted(
        self,
        graph: DependencyGraph,
        changed_file: str,
        max_depth: Optional[int] = None,
    ) -> List[str]:
        return impacted_files(graph, changed_file, max_depth=max_depth)

    def impact_report(
        self,
        graph: DependencyGraph,
        changed_file: str,
        max_depth: Optional[int] = None,
    ) -> ImpactReport:
        return ImpactReport(
            root=changed_file,
            impacted=impacted_files(graph, changed_file, max_depth=max_depth),
            ascii_graph=impact_tree(graph, changed_file, max_depth=max_depth),
        )

    def scan(
        self,
        files: Iterable[SourceFile],
        entry_points: Optional[Iterable[str]] = None,
    ) -> DiscoveryReport:
        return self.scanner.scan(files, entry_points=entry_points)
