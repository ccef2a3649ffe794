"""Feature discovery: find orphaned, disconnected, or partially wired features.

A scan works in stages:

1. Build the dependency graph for the whole snapshot.
2. Take the supplied entry points, or detect them from file names.
3. Compute everything reachable from those entry points.
4. Pick out "feature" files (``*Service.ts``, ``*Manager.ts``, ``*Agent.ts``, ...).
5. Classify each feature file:

   - ``ACTIVE``: reachable from an entry point
   - ``PARTIALLY_CONNECTED``: imported somewhere, but not from an entry point
   - ``DISCONNECTED``: never imported by anything

6. Optionally ask a purpose inferrer to describe non-active features.
7. Attach a suggested action to every non-active feature.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Callable, Dict, Iterable, List, Optional, Set

from .analysis import reachable_files
from .config import MAX_INFERENCES, AnalysisConfig, compile_patterns
from .entry_points import EntryPointDetector
from .graph_builder import GraphBuilder
from .models import (
    DependencyGraph,
    DiscoveredFeature,
    DiscoveryReport,
    FeatureStatus,
    SourceFile,
)

logger = logging.getLogger(__name__)

PurposeInferrer = Callable[[SourceFile], str]

INFERENCE_FAILED = "Purpose inference failed"
PURPOSE_UNKNOWN = "Purpose could not be determined"

_SIGNATURE_PREFIXES = (
    "export ",
    "class ",
    "interface ",
    "type ",
    "function ",
    "async function",
    "const ",
    "/**",
    "import ",
    "// ==",
    "// --",
)


class FeatureClassifier:
    """Feature-file filter plus the three-state connectivity decision table."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        config = config or AnalysisConfig()
        self.feature_patterns = compile_patterns(config.feature_patterns, "feature pattern")
        self.excluded_patterns = compile_patterns(config.excluded_patterns, "excluded pattern")

    def is_feature_file(self, path: str) -> bool:
        if not any(p.search(path) for p in self.feature_patterns):
            return False
        return not any(p.search(path) for p in self.excluded_patterns)

    def feature_files(self, files: Iterable[SourceFile]) -> List[SourceFile]:
        """Matching files in input order, one entry per path."""
        seen: Set[str] = set()
        matched: List[SourceFile] = []
        for f in files:
            if f.path in seen or not self.is_feature_file(f.path):
                continue
            seen.add(f.path)
            matched.append(f)
        return matched

    @staticmethod
    def classify(path: str, graph: DependencyGraph, reachable: Set[str]) -> FeatureStatus:
        if path in reachable:
            return FeatureStatus.ACTIVE
        node = graph.get(path)
        if node is not None and node.imported_by:
            return FeatureStatus.PARTIALLY_CONNECTED
        return FeatureStatus.DISCONNECTED

    @staticmethod
    def consumers(path: str, graph: DependencyGraph) -> List[str]:
        node = graph.get(path)
        return list(node.imported_by) if node is not None else []


class DiscoveryScanner:
    """Runs a full discovery scan over a file snapshot.

    The scanner keeps no state between scans; every call builds a fresh
    graph and report.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        builder: Optional[GraphBuilder] = None,
        purpose_inferrer: Optional[PurposeInferrer] = None,
        max_inferences: int = MAX_INFERENCES,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.builder = builder or GraphBuilder(self.config)
        self.detector = EntryPointDetector(self.config.entry_patterns)
        self.classifier = FeatureClassifier(self.config)
        self.purpose_inferrer = purpose_inferrer
        self.max_inferences = max_inferences

    def scan(
        self,
        files: Iterable[SourceFile],
        entry_points: Optional[Iterable[str]] = None,
    ) -> DiscoveryReport:
        """Scan *files* for feature connectivity.

        Args:
            files: The full snapshot.
            entry_points: Explicit entry paths. Auto-detected when ``None``.

        Returns:
            A :class:`DiscoveryReport` with one discovery per feature file.
        """
        started = time.monotonic()
        timestamp = time.time()
        files = list(files)

        graph = self.builder.build(files)
        entries = list(entry_points) if entry_points is not None else self.detector.detect(files)
        if not entries:
            logger.warning("No entry points found; every feature will be reported as non-active")
        reachable = reachable_files(graph, entries)

        feature_files = self.classifier.feature_files(files)
        discoveries = [
            DiscoveredFeature(
                file=f.path,
                status=self.classifier.classify(f.path, graph, reachable),
                consumers=self.classifier.consumers(f.path, graph),
            )
            for f in feature_files
        ]

        self._fill_purposes(discoveries, {f.path: f for f in feature_files})
        for d in discoveries:
            d.suggested_action = suggested_action(d)

        return DiscoveryReport(
            scanned_files=len(files),
            discoveries=tuple(discoveries),
            entry_points=tuple(entries),
            timestamp=timestamp,
            duration=time.monotonic() - started,
        )

    def _fill_purposes(
        self,
        discoveries: List[DiscoveredFeature],
        files_by_path: Dict[str, SourceFile],
    ) -> None:
        if self.purpose_inferrer is not None:
            pending = [d for d in discoveries if d.status != FeatureStatus.ACTIVE]
            for d in pending[: self.max_inferences]:
                try:
                    purpose = self.purpose_inferrer(files_by_path[d.file])
                except Exception as exc:
                    logger.warning("Purpose inference failed for %s: %s", d.file, exc)
                    purpose = INFERENCE_FAILED
                d.inferred_purpose = (purpose or "").strip() or PURPOSE_UNKNOWN

        for d in discoveries:
            if d.status == FeatureStatus.ACTIVE and not d.inferred_purpose:
                d.inferred_purpose = quick_purpose_from_name(d.file)


# ===================================================================
# Helpers
# ===================================================================

def file_name(path: str) -> str:
    return path.rsplit("/", 1)[-1] or path


def quick_purpose_from_name(path: str) -> str:
    """Readable purpose from the file name alone, e.g. ``User Service``."""
    name = re.sub(r"\.(ts|tsx|js|jsx)$", "", file_name(path))
    words = re.sub(r"([A-Z])", r" \1", name).strip()
    return f"{words} (active, fully connected)"


def suggested_action(discovery: DiscoveredFeature) -> str:
    name = file_name(discovery.file)
    if discovery.status == FeatureStatus.DISCONNECTED:
        return f"Wire {name} into the application. {discovery.inferred_purpose}".strip()
    if discovery.status == FeatureStatus.PARTIALLY_CONNECTED:
        return (
            f"Complete integration of {name} - imported by {len(discovery.consumers)} file(s) "
            "but not reachable from any entry point."
        )
    return ""


def extract_signatures(content: str, max_chars: int = 2000) -> str:
    """Keep the lines that describe a file: exports, declarations, doc comments.

    Output stops once roughly *max_chars* characters have been collected.
    """
    significant: List[str] = []
    char_count = 0
    for line in content.splitlines():
        trimmed = line.strip()
        # "*" lines are JSDoc continuations
        if trimmed.startswith(_SIGNATURE_PREFIXES) or trimmed.startswith("*"):
            significant.append(trimmed)
            char_count += len(trimmed)
            if char_count > max_chars:
                break
    return "\n".join(significant)
