"""Pith data models — Pydantic v2."""

from pith.models.options import PROJECT_ATTRIBUTES, ProjectOptions
from pith.models.reports import BuildReport, SyncReport

__all__ = [
    # options
    "PROJECT_ATTRIBUTES",
    "ProjectOptions",
    # reports
    "SyncReport",
    "BuildReport",
]
