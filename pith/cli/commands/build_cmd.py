"""``pith build`` — build a project once.

Syncs the source tree, builds every artifact, and prints a summary.
Exits with code 1 if any artifact failed and 2 on a configuration
error.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from pith.core.config_runner import ConfigurationError
from pith.core.project import Project
from pith.models.reports import BuildReport

console = Console()


def open_project(
    source: Path,
    output: Path | None,
    ignore: list[str] | None = None,
    content_negotiation: bool = False,
    directory_index: bool = False,
) -> Project:
    """Construct a Project from CLI arguments, exiting with code 2 on bad config."""
    options = {
        "ignore": ignore or [],
        "assume_content_negotiation": content_negotiation,
        "assume_directory_index": directory_index,
    }
    try:
        return Project(source, output, options)
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=2) from exc


def render_failures(report: BuildReport) -> Table:
    """Rich table with one row per failed artifact."""
    table = Table(title=f"Build {report.generation}: failures")
    table.add_column("Artifact", style="cyan")
    table.add_column("Error", style="red")
    for path, message in sorted(report.failures.items()):
        table.add_row(path, message)
    return table


def print_report(report: BuildReport) -> None:
    if report.failures:
        console.print(render_failures(report))
    status = "[green]OK[/green]" if report.ok else "[bold red]FAILED[/bold red]"
    console.print(
        f"{status} built {len(report.built)} artifact(s), "
        f"{len(report.failures)} failure(s) in {report.duration_seconds:.2f}s"
    )


def build_cmd(
    source: Path = typer.Argument(..., exists=True, file_okay=False, help="Source directory."),
    output: Path = typer.Option(
        None, "--output", "-o", help="Output directory (default: SOURCE/_out). Wiped first."
    ),
    ignore: list[str] = typer.Option(
        None, "--ignore", "-i", help="Extra ignore glob; may be repeated."
    ),
    content_negotiation: bool = typer.Option(
        False, "--content-negotiation", help="Drop .html from generated links."
    ),
    directory_index: bool = typer.Option(
        False, "--directory-index", help="Drop index.html from generated links."
    ),
) -> None:
    """Build SOURCE into its output directory."""
    project = open_project(source, output, ignore, content_negotiation, directory_index)
    try:
        report = project.build()
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    print_report(report)
    if project.has_errors():
        raise typer.Exit(code=1)
