"""Breadth-first queries over a finished :class:`DependencyGraph`.

Both traversals mark nodes visited when they are enqueued, so cycles and
self-imports terminate and every path is reported at most once.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Deque, Iterable, List, Optional, Set, Tuple

if TYPE_CHECKING:
    from .models import DependencyGraph


def reachable_files(graph: "DependencyGraph", entry_points: Iterable[str]) -> Set[str]:
    """All files reachable over ``imports`` edges from *entry_points*.

    Entry points present in the graph are part of the result; unknown entry
    points are skipped.
    """
    visited: Set[str] = set()
    queue: Deque[str] = deque()

    for entry in entry_points:
        if entry in graph and entry not in visited:
            visited.add(entry)
            queue.append(entry)

    while queue:
        node = graph.nodes[queue.popleft()]
        for imported in node.imports:
            if imported not in visited:
                visited.add(imported)
                queue.append(imported)

    return visited


def impacted_files(
    graph: "DependencyGraph",
    changed_file: str,
    max_depth: Optional[int] = None,
) -> List[str]:
    """Files that transitively import *changed_file*, in BFS order.

    The changed file itself is never part of the result. With *max_depth*
    only dependents at most that many reverse hops away are returned.
    """
    if changed_file not in graph:
        return []

    seen: Set[str] = {changed_file}
    impacted: List[str] = []
    queue: Deque[Tuple[str, int]] = deque([(changed_file, 0)])

    while queue:
        current, depth = queue.popleft()
        if max_depth is not None and depth >= max_depth:
            continue
        for dependent in graph.nodes[current].imported_by:
            if dependent not in seen:
                seen.add(dependent)
                impacted.append(dependent)
                queue.append((dependent, depth + 1))

    return impacted


def impact_tree(graph: "DependencyGraph", changed_file: str, max_depth: Optional[int] = None) -> str:
    """Indented ASCII tree of the reverse traversal from *changed_file*.

    Rendered depth-first, so every dependent sits directly below the file it
    imports. A file reached a second time is printed with ``(seen)`` and not
    expanded again.
    """
    if changed_file not in graph:
        return f"{changed_file} (not in graph)"

    lines: List[str] = [changed_file]
    seen = {changed_file}
    stack: List[Tuple[str, int]] = []
    if max_depth is None or max_depth >= 1:
        stack.extend((d, 1) for d in reversed(graph.nodes[changed_file].imported_by))

    while stack:
        current, depth = stack.pop()
        prefix = "  " * depth
        if current in seen:
            lines.append(f"{prefix}|- imported by -> {current} (seen)")
            continue
        seen.add(current)
        lines.append(f"{prefix}|- imported by -> {current}")
        if max_depth is None or depth < max_depth:
            stack.extend((d, depth + 1) for d in reversed(graph.nodes[current].imported_by))
    return "\n".join(lines)
