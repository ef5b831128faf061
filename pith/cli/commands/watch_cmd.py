"""``pith watch`` — rebuild whenever the source tree changes."""

from __future__ import annotations

from pathlib import Path

import typer

from pith.cli.commands.build_cmd import console, open_project, print_report
from pith.config import settings
from pith.watch import Watcher


def watch_cmd(
    source: Path = typer.Argument(..., exists=True, file_okay=False, help="Source directory."),
    output: Path = typer.Option(
        None, "--output", "-o", help="Output directory (default: SOURCE/_out). Wiped first."
    ),
    interval: float = typer.Option(
        settings.watch_interval, "--interval", help="Seconds between polls."
    ),
    cycles: int = typer.Option(
        None, "--cycles", help="Stop after this many polls (default: run until Ctrl-C)."
    ),
) -> None:
    """Watch SOURCE and rebuild it when files are added, removed, or edited."""
    project = open_project(source, output)
    console.print(f"[bold]Watching[/bold] {source} -> {project.output_root}")
    builds = Watcher(project, interval, on_build=print_report).run(cycles)
    console.print(f"[dim]{builds} build(s)[/dim]")
