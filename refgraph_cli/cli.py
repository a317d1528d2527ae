"""Typer-based CLI for RefGraph build dependency trees."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__, config
from .config_manager import load_tree_config, render_options, save_tree_config
from .errors import NoEdgesAvailable, NoRootsMatched, SnapshotError
from .graph_export import export_dot, export_html
from .ingest import Snapshot, load_snapshot
from .models import MAX_DEPTH_LIMIT
from .report import build_report, edge_statistics, find_orphans

app = typer.Typer(
    help="🌳 RefGraph CLI — dependency trees for solutions, projects and assemblies.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="⚙️  Configuration — tree depth and assembly nesting defaults.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config")

console = Console()

SNAPSHOT_HELP = "Directory of extracted CSV records or a JSON snapshot file."


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"RefGraph CLI v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr."),
):
    """RefGraph CLI: render build reference trees from extracted records."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _open_snapshot(snapshot_path: Path) -> Snapshot:
    try:
        return load_snapshot(snapshot_path)
    except SnapshotError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("tree")
def tree(
    snapshot_path: Path = typer.Argument(..., exists=True, help=SNAPSHOT_HELP),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        "-d",
        min=0,
        max=MAX_DEPTH_LIMIT,
        help="Deepest level to expand (default from config).",
    ),
    assemblies: Optional[bool] = typer.Option(
        None,
        "--assemblies/--no-assemblies",
        help="Nest assembly dependency trees under projects (default from config).",
    ),
    root: Optional[str] = typer.Option(None, "--root", "-r", help="Only render the solution with this exact name."),
    revision: Optional[str] = typer.Option(None, "--revision", help="Source-control revision for the header."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the report to this file."),
):
    """Render the dependency tree of every solution."""
    snapshot = _open_snapshot(snapshot_path)
    options = render_options(max_depth, assemblies)

    try:
        report = build_report(
            snapshot.catalog,
            snapshot.edges,
            options,
            root_name=root,
            revision=revision,
        )
    except NoEdgesAvailable as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=0)
    except NoRootsMatched as exc:
        typer.echo(f"❌ {exc}", err=True)
        if exc.available:
            typer.echo("💡 Available solutions:", err=True)
            for name in exc.available:
                typer.echo(f"   - {name}", err=True)
        raise typer.Exit(code=1)

    if output is None:
        typer.echo(report.text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.text, encoding="utf-8")
    typer.echo(f"Wrote {len(report.trees)} tree(s) to {output}")


@app.command("orphans")
def orphans(snapshot_path: Path = typer.Argument(..., exists=True, help=SNAPSHOT_HELP)):
    """List projects that no solution references."""
    snapshot = _open_snapshot(snapshot_path)
    found = find_orphans(snapshot.catalog, snapshot.edges)
    if not found:
        typer.echo("No orphaned projects.")
        raise typer.Exit(code=0)
    for project in found:
        typer.echo(f"{project.name}\t{project.file_path}")


@app.command("stats")
def stats(snapshot_path: Path = typer.Argument(..., exists=True, help=SNAPSHOT_HELP)):
    """Show reference counts by type and the orphan count."""
    snapshot = _open_snapshot(snapshot_path)
    catalog = snapshot.catalog
    statistics = edge_statistics(snapshot.edges, find_orphans(catalog, snapshot.edges))

    table = Table(title="Reference Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right", style="bold")
    table.add_row("Solutions", str(len(catalog.solutions())))
    table.add_row("Projects", str(len(catalog.projects())))
    table.add_row("Assemblies", str(len(catalog.assemblies())))
    for label, value in statistics.items():
        table.add_row(label, str(value))
    console.print(table)


@app.command("export-graph")
def export_graph(
    snapshot_path: Path = typer.Argument(..., exists=True, help=SNAPSHOT_HELP),
    fmt: str = typer.Option("dot", "--format", "-f", help="Export format: dot or html."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
    focus: str = typer.Option("", "--focus", help="Only export nodes matching this text and their neighbours."),
):
    """Export the reference graph to Graphviz DOT or standalone HTML."""
    fmt = fmt.lower()
    if fmt not in {"html", "dot"}:
        raise typer.BadParameter("Format must be one of: html, dot")

    snapshot = _open_snapshot(snapshot_path)
    if output is None:
        output = Path.cwd() / f"references.{fmt}"

    if fmt == "html":
        export_html(snapshot.catalog, snapshot.edges, output, focus=focus)
    else:
        export_dot(snapshot.catalog, snapshot.edges, output, focus=focus)
    typer.echo(f"Exported graph to {output}")


@config_app.command("show")
def show_config():
    """Show the effective tree configuration."""
    tree_config = load_tree_config()
    table = Table(title=f"Configuration ({config.CONFIG_FILE})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="bold")
    for key, value in tree_config.items():
        table.add_row(key, str(value).lower() if isinstance(value, bool) else str(value))
    console.print(table)


@config_app.command("set")
def set_config(
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", "-d", min=0, max=MAX_DEPTH_LIMIT, help="Default expansion depth."
    ),
    assemblies: Optional[bool] = typer.Option(
        None, "--assemblies/--no-assemblies", help="Nest assembly dependency trees by default."
    ),
):
    """Persist tree defaults to the config file."""
    if max_depth is None and assemblies is None:
        raise typer.BadParameter("Nothing to set. Use --max-depth or --assemblies/--no-assemblies.")
    saved = save_tree_config(max_depth=max_depth, include_assembly_dependencies=assemblies)
    typer.echo(
        f"Saved: max_depth={saved['max_depth']}, "
        f"include_assembly_dependencies={str(saved['include_assembly_dependencies']).lower()}"
    )


if __name__ == "__main__":
    app()
