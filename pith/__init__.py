"""Pith: keep a tree of generated artifacts in step with a tree of sources.

A Project discovers source files, prunes the ones that vanish or become
ignored, re-runs the project's ``_pith/config.py`` control script on
every sync, and builds each artifact independently, recording failures
per artifact instead of aborting the build.
"""

__version__ = "0.1.0"
__description__ = "Poll-based static build orchestrator with Jinja2 templates"

from pith.core.config_runner import ConfigurationError
from pith.core.project import Project
from pith.cli.app import app as cli

__all__ = ["Project", "ConfigurationError", "cli", "__version__"]
