"""Pith CLI — Typer-based command-line interface.

Provides the ``pith`` command with subcommands for one-shot builds and
a polling rebuild loop.

All output uses Rich for formatted terminal display.
"""
