"""Core data models shared by graph construction, analysis, and discovery."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union


@dataclass(frozen=True)
class SourceFile:
    """One file of the analysed snapshot.

    ``content`` may be ``bytes`` when the supplier could not decode the file;
    extraction then treats it as opaque.
    """

    path: str
    content: Union[str, bytes]


@dataclass(frozen=True)
class DependencyNode:
    file: str
    imports: Tuple[str, ...] = ()
    imported_by: Tuple[str, ...] = ()


class DependencyGraph:
    """Read-only import graph keyed by file path.

    Edges reference other nodes by path, so the graph holds no object cycles
    even when the imports themselves are cyclic.
    """

    def __init__(self, nodes: Mapping[str, DependencyNode]) -> None:
        self._nodes: Dict[str, DependencyNode] = dict(nodes)
        self.nodes: Mapping[str, DependencyNode] = MappingProxyType(self._nodes)

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, path: str) -> Optional[DependencyNode]:
        return self._nodes.get(path)

    @property
    def edge_count(self) -> int:
        return sum(len(node.imports) for node in self._nodes.values())

    def impacted(self, changed_file: str, max_depth: Optional[int] = None) -> List[str]:
        """Files that transitively import *changed_file* (seed excluded)."""
        from .analysis import impacted_files

        return impacted_files(self, changed_file, max_depth=max_depth)

    def reachable(self, entry_points: Iterable[str]) -> Set[str]:
        """Files transitively imported from *entry_points* (entries included)."""
        from .analysis import reachable_files

        return reachable_files(self, entry_points)


class FeatureStatus(str, Enum):
    """Connectivity of a feature file relative to the entry points."""

    ACTIVE = "ACTIVE"
    PARTIALLY_CONNECTED = "PARTIALLY_CONNECTED"
    DISCONNECTED = "DISCONNECTED"


@dataclass
class DiscoveredFeature:
    file: str
    status: FeatureStatus
    consumers: List[str] = field(default_factory=list)
    inferred_purpose: str = ""
    suggested_action: str = ""


@dataclass(frozen=True)
class DiscoveryReport:
    scanned_files: int
    discoveries: Tuple[DiscoveredFeature, ...]
    entry_points: Tuple[str, ...]
    timestamp: float
    duration: float

    def by_status(self, status: FeatureStatus) -> List[DiscoveredFeature]:
        return [d for d in self.discoveries if d.status == status]

    def counts(self) -> Dict[FeatureStatus, int]:
        return {status: len(self.by_status(status)) for status in FeatureStatus}


@dataclass
class WiringGoal:
    """A queued work item asking for a feature to be connected."""

    id: str
    prompt: str
    created_at: float
    status: str = "PENDING"
    source: str = "discovery"


@dataclass
class ImpactReport:
    root: str
    impacted: List[str]
    ascii_graph: str
