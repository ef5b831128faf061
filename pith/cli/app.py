"""Main Typer application — imports and registers all CLI commands.

Entry point: ``pith`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from pith.cli.commands.build_cmd import build_cmd
from pith.cli.commands.watch_cmd import watch_cmd
from pith.config import settings

app = typer.Typer(
    name="pith",
    help="Pith: build a tree of source files into a tree of generated artifacts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="build", help="Build the project once.")(build_cmd)
app.command(name="watch", help="Poll the source tree and rebuild on change.")(watch_cmd)


def configure_logging(level: str) -> None:
    """Route all log records through a single Rich handler."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=settings.debug, rich_tracebacks=settings.debug)],
        force=True,
    )


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        settings.log_level, "--log-level", help="Logging level (DEBUG, INFO, WARNING...)."
    ),
) -> None:
    """Pith: build a tree of source files into a tree of generated artifacts."""
    configure_logging(log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
