"""Typer-based CLI for DepGraph import-graph analysis."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Container, List, Optional, Tuple

import toml
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__, config_manager
from .config import AnalysisConfig, ConfigError
from .extractor import ExtractorUnavailableError
from .goals import generate_wiring_goals
from .graph_export import export_dot, export_html, report_to_dict
from .loader import load_source_files, virtual_path
from .models import DependencyGraph, FeatureStatus, SourceFile
from .orchestrator import GraphOrchestrator

console = Console()

app = typer.Typer(
    help="🕸️  DepGraph CLI — change impact and orphaned-feature discovery for JS/TS trees.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="⚙️  Configuration — analysis settings stored in TOML.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config")

STATUS_STYLES = {
    FeatureStatus.ACTIVE: "green",
    FeatureStatus.PARTIALLY_CONNECTED: "yellow",
    FeatureStatus.DISCONNECTED: "red",
}

# Shared option declarations
_PROJECT_ARG = typer.Argument(..., exists=True, file_okay=False, help="Path to the source tree.")
_CONFIG_OPT = typer.Option(None, "--config", "-c", help="Config TOML (default: $DEPGRAPH_HOME/config.toml).")
_WORKERS_OPT = typer.Option(None, "--workers", "-w", min=1, help="Threads used for import extraction.")
_ENTRY_OPT = typer.Option(None, "--entry", "-e", help="Entry point path (repeatable). Auto-detected if omitted.")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"DepGraph CLI v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """DepGraph CLI: which files a change touches, and which features are wired in."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _load_config(config_path: Optional[Path]) -> AnalysisConfig:
    try:
        return config_manager.load_analysis_config(config_path)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _prepare(
    project_path: Path,
    config_path: Optional[Path],
    workers: Optional[int],
) -> Tuple[GraphOrchestrator, List[SourceFile]]:
    analysis_config = _load_config(config_path)
    try:
        orchestrator = GraphOrchestrator(analysis_config, max_workers=workers)
    except (ExtractorUnavailableError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    return orchestrator, load_source_files(project_path)


def _to_virtual(file_arg: str, project_path: Path, known: Container[str]) -> str:
    """Accept ``/src/a.ts``, ``src/a.ts`` or a real path below the project."""
    if file_arg in known:
        return file_arg
    candidate = Path(file_arg)
    if candidate.is_absolute():
        try:
            return virtual_path(project_path.resolve(), candidate.resolve())
        except ValueError:
            return file_arg
    return "/" + candidate.as_posix().lstrip("/")


def _entry_paths(
    entry: Optional[List[str]],
    project_path: Path,
    files: List[SourceFile],
) -> Optional[List[str]]:
    """Normalise --entry values like FILE arguments; ``None`` means auto-detect."""
    if not entry:
        return None
    known = {f.path for f in files}
    return [_to_virtual(e, project_path, known) for e in entry]


def _require_in_graph(path: str, graph: DependencyGraph) -> None:
    if path not in graph:
        console.print(f"[red]✗[/red] File '{path}' is not part of the scanned tree.")
        raise typer.Exit(code=1)


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------

@app.command("scan")
def scan(
    project_path: Path = _PROJECT_ARG,
    entry: Optional[List[str]] = _ENTRY_OPT,
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
    config_path: Optional[Path] = _CONFIG_OPT,
    workers: Optional[int] = _WORKERS_OPT,
):
    """🔍 Classify feature files as active, partially connected, or disconnected."""
    orchestrator, files = _prepare(project_path, config_path, workers)
    report = orchestrator.scan(files, entry_points=_entry_paths(entry, project_path, files))

    if as_json:
        typer.echo(json.dumps(report_to_dict(report), indent=2))
        return

    table = Table(title="Feature Discovery", show_header=True, show_lines=False)
    table.add_column("Status", width=20)
    table.add_column("File", style="cyan", overflow="fold")
    table.add_column("Consumers", justify="right", width=9)
    table.add_column("Suggested action", overflow="fold")

    for d in report.discoveries:
        style = STATUS_STYLES[d.status]
        table.add_row(
            f"[{style}]{d.status.value}[/{style}]",
            d.file,
            str(len(d.consumers)),
            d.suggested_action or "-",
        )

    console.print(table)
    counts = report.counts()
    console.print(
        Panel.fit(
            f"Scanned {report.scanned_files} files, {len(report.entry_points)} entry points\n"
            f"[green]ACTIVE {counts[FeatureStatus.ACTIVE]}[/green]  "
            f"[yellow]PARTIAL {counts[FeatureStatus.PARTIALLY_CONNECTED]}[/yellow]  "
            f"[red]DISCONNECTED {counts[FeatureStatus.DISCONNECTED]}[/red]",
            title="[bold]Summary[/bold]",
        )
    )


@app.command("impact")
def impact(
    project_path: Path = _PROJECT_ARG,
    file: str = typer.Argument(..., help="Changed file (virtual /path or path relative to the project)."),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", min=1, help="Maximum reverse hops (default: unlimited)."),
    show_graph: bool = typer.Option(False, "--show-graph/--no-graph", help="Include ASCII impact tree."),
    config_path: Optional[Path] = _CONFIG_OPT,
    workers: Optional[int] = _WORKERS_OPT,
):
    """💥 List every file that transitively imports FILE."""
    orchestrator, files = _prepare(project_path, config_path, workers)
    graph = orchestrator.build_graph(files)
    target = _to_virtual(file, project_path, graph)
    _require_in_graph(target, graph)

    report = orchestrator.impact_report(graph, target, max_depth=depth)
    typer.echo(f"Root: {report.root}")
    if report.impacted:
        typer.echo(f"Impacted files ({len(report.impacted)}):")
        for path in report.impacted:
            typer.echo(f"- {path}")
    else:
        typer.echo("Impacted files: none found")

    if show_graph:
        typer.echo("\nASCII graph:")
        typer.echo(report.ascii_graph)


@app.command("reachable")
def reachable(
    project_path: Path = _PROJECT_ARG,
    entry: Optional[List[str]] = _ENTRY_OPT,
    config_path: Optional[Path] = _CONFIG_OPT,
    workers: Optional[int] = _WORKERS_OPT,
):
    """🌱 List files reachable from the entry points."""
    orchestrator, files = _prepare(project_path, config_path, workers)
    graph = orchestrator.build_graph(files)
    entries = _entry_paths(entry, project_path, files) or orchestrator.entry_points(files)
    result = orchestrator.reachable(graph, entries)

    typer.echo(f"Entry points: {len(entries)} | Reachable: {len(result)} of {len(graph)} files")
    for path in sorted(result):
        typer.echo(path)


@app.command("entries")
def entries(
    project_path: Path = _PROJECT_ARG,
    config_path: Optional[Path] = _CONFIG_OPT,
):
    """🚪 Show detected entry points."""
    orchestrator, files = _prepare(project_path, config_path, None)
    found = orchestrator.entry_points(files)
    if not found:
        typer.echo("No entry points detected. Pass --entry to scan/reachable explicitly.")
        raise typer.Exit(code=0)
    for path in found:
        typer.echo(path)


@app.command("deps")
def deps(
    project_path: Path = _PROJECT_ARG,
    file: str = typer.Argument(..., help="File to inspect."),
    config_path: Optional[Path] = _CONFIG_OPT,
):
    """🔗 Show what FILE imports and what imports it."""
    orchestrator, files = _prepare(project_path, config_path, None)
    graph = orchestrator.build_graph(files)
    target = _to_virtual(file, project_path, graph)
    _require_in_graph(target, graph)

    node = graph.nodes[target]
    typer.echo(target)
    typer.echo(f"Imports ({len(node.imports)}):")
    for path in node.imports:
        typer.echo(f"  -> {path}")
    typer.echo(f"Imported by ({len(node.imported_by)}):")
    for path in node.imported_by:
        typer.echo(f"  <- {path}")


@app.command("goals")
def goals(
    project_path: Path = _PROJECT_ARG,
    entry: Optional[List[str]] = _ENTRY_OPT,
    config_path: Optional[Path] = _CONFIG_OPT,
    workers: Optional[int] = _WORKERS_OPT,
):
    """🎯 Print wiring goals for every non-active feature."""
    orchestrator, files = _prepare(project_path, config_path, workers)
    report = orchestrator.scan(files, entry_points=_entry_paths(entry, project_path, files))
    wiring = generate_wiring_goals(report)

    if not wiring:
        typer.echo("All features are wired in. Nothing to queue.")
        raise typer.Exit(code=0)

    for goal in wiring:
        typer.echo(f"[{goal.id}] {goal.prompt}")


@app.command("export-graph")
def export_graph(
    project_path: Path = _PROJECT_ARG,
    focus: str = typer.Argument("", help="Optional path fragment to export a local subgraph."),
    fmt: str = typer.Option("html", "--format", "-f", help="Export format: html or dot."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
    config_path: Optional[Path] = _CONFIG_OPT,
):
    """📤 Export the import graph to standalone HTML or Graphviz DOT."""
    fmt = fmt.lower()
    if fmt not in {"html", "dot"}:
        raise typer.BadParameter("Format must be one of: html, dot")

    orchestrator, files = _prepare(project_path, config_path, None)
    graph = orchestrator.build_graph(files)

    if output is None:
        output = Path.cwd() / f"{project_path.resolve().name}_graph.{fmt}"

    if fmt == "html":
        live = orchestrator.reachable(graph, orchestrator.entry_points(files))
        export_html(graph, output, focus=focus, reachable=live)
    else:
        export_dot(graph, output, focus=focus)

    typer.echo(f"Exported graph to {output}")


# ------------------------------------------------------------------
# Config group
# ------------------------------------------------------------------

@config_app.command("show")
def config_show(config_path: Optional[Path] = _CONFIG_OPT):
    """Print the effective configuration as TOML."""
    analysis_config = _load_config(config_path)
    typer.echo(toml.dumps(config_manager.config_to_dict(analysis_config)))


@config_app.command("init")
def config_init(
    config_path: Optional[Path] = _CONFIG_OPT,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
):
    """Write the default configuration to a TOML file."""
    target = config_path or config_manager.CONFIG_FILE
    if target.exists() and not force:
        raise typer.BadParameter(f"{target} already exists. Use --force to overwrite.")
    if not config_manager.save_analysis_config(AnalysisConfig(), target):
        console.print(f"[red]✗[/red] Could not write {target}")
        raise typer.Exit(code=1)
    typer.echo(f"Wrote default configuration to {target}")


if __name__ == "__main__":
    app()
