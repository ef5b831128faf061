"""Shared test fixtures for Pith."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from pith.core.project import Project


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Provide an empty source directory."""
    path = tmp_path / "site"
    path.mkdir()
    return path


@pytest.fixture
def write(source_dir: Path) -> Callable[[str, str], Path]:
    """Factory fixture: write a file below the source directory."""

    def _write(relative: str, content: str = "") -> Path:
        path = source_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_project(source_dir: Path) -> Callable[..., Project]:
    """Factory fixture: build a Project over the test source directory."""

    def _factory(output_root: Path | None = None, **kwargs: Any) -> Project:
        return Project(source_dir, output_root, **kwargs)

    return _factory


@pytest.fixture
def project(make_project: Callable[..., Project]) -> Project:
    """Convenience: a Project with default options and output root."""
    return make_project()


@pytest.fixture
def keys() -> Callable[[Project], tuple[set[str], set[str]]]:
    """Return (entry keys, artifact keys) of a project as posix strings."""

    def _keys(project: Project) -> tuple[set[str], set[str]]:
        return (
            {entry.path.as_posix() for entry in project.entries()},
            {artifact.path.as_posix() for artifact in project.artifacts()},
        )

    return _keys
