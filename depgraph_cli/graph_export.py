"""Graph export helpers for DOT, standalone HTML, and JSON-ready dicts."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from .models import DependencyGraph, DiscoveryReport


def export_dot(graph: DependencyGraph, output_file: Path, focus: str = "") -> None:
    selected = _focused_subgraph(graph, focus)

    lines = ["digraph DependencyGraph {"]
    lines.append("  rankdir=LR;")
    lines.append("  node [shape=box];")

    for path in selected["nodes"]:
        lines.append(f'  "{_esc(path)}";')

    for src, dst in selected["edges"]:
        lines.append(f'  "{_esc(src)}" -> "{_esc(dst)}";')

    lines.append("}")
    output_file.write_text("\n".join(lines), encoding="utf-8")


def export_html(
    graph: DependencyGraph,
    output_file: Path,
    focus: str = "",
    reachable: Optional[Set[str]] = None,
) -> None:
    """Export graph to an interactive HTML page using vis.js.

    Nodes in *reachable* are drawn green, everything else grey.
    """
    selected = _focused_subgraph(graph, focus)
    reachable = reachable or set()
    graph_payload = {
        "nodes": [
            {
                "id": path,
                "label": path.rsplit("/", 1)[-1],
                "title": path,
                "color": "#7bd389" if path in reachable else "#d0d0d0",
            }
            for path in selected["nodes"]
        ],
        "edges": [{"from": src, "to": dst, "arrows": "to"} for src, dst in selected["edges"]],
    }
    output_file.write_text(_html_document(graph_payload), encoding="utf-8")


def _html_document(graph_payload: dict) -> str:
    return f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>DepGraph Export</title>
  <script src="https://unpkg.com/vis-network/standalone/umd/vis-network.min.js"></script>
  <style>
    body {{ font-family: ui-monospace, SFMono-Regular, Menlo, monospace; margin: 20px; }}
    #graph {{ width: 100%; height: 85vh; border: 1px solid #ddd; border-radius: 8px; }}
  </style>
</head>
<body>
  <h1>DepGraph Export</h1>
  <div id="graph"></div>
  <script>
    const graph = {_script_json(graph_payload)};
    new vis.Network(
      document.getElementById('graph'),
      {{ nodes: new vis.DataSet(graph.nodes), edges: new vis.DataSet(graph.edges) }},
      {{ layout: {{ improvedLayout: graph.nodes.length < 300 }}, physics: {{ stabilization: true }} }}
    );
  </script>
</body>
</html>
"""


def _script_json(payload: dict) -> str:
    # "</" would end the surrounding <script> element
    return json.dumps(payload, indent=2).replace("</", "<\\/")


def report_to_dict(report: DiscoveryReport) -> Dict[str, Any]:
    return {
        "scanned_files": report.scanned_files,
        "entry_points": list(report.entry_points),
        "timestamp": report.timestamp,
        "duration": report.duration,
        "discoveries": [
            {
                "file": d.file,
                "status": d.status.value,
                "consumers": list(d.consumers),
                "inferred_purpose": d.inferred_purpose,
                "suggested_action": d.suggested_action,
            }
            for d in report.discoveries
        ],
    }


def _focused_subgraph(graph: DependencyGraph, focus: str) -> Dict[str, List]:
    all_edges = [(path, dst) for path, node in graph.nodes.items() for dst in node.imports]
    if not focus:
        return {"nodes": list(graph.nodes), "edges": all_edges}

    focus_ids = {path for path in graph.nodes if focus in path}
    if not focus_ids:
        return {"nodes": list(graph.nodes), "edges": all_edges}

    edge_subset = [e for e in all_edges if e[0] in focus_ids or e[1] in focus_ids]
    node_subset = set(focus_ids)
    for src, dst in edge_subset:
        node_subset.add(src)
        node_subset.add(dst)
    return {"nodes": sorted(node_subset), "edges": edge_subset}


def _esc(text: str) -> str:
    return text.replace('"', '\\"')
