"""Source entries — one per tracked file under the source root."""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from pith.core.artifact import Artifact
from pith.core.render import is_template

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pith.core.project import Project


def is_ignored(path: PurePosixPath, patterns: Iterable[str]) -> bool:
    """Whether any component of ``path``, or the whole path, matches a pattern.

    Matching is case-sensitive glob matching, so ``_*`` hides both
    ``_partial.html`` and everything below ``_layouts/``.
    """
    candidates = (*path.parts, path.as_posix())
    return any(fnmatchcase(part, pattern) for pattern in patterns for part in candidates)


def output_path_for(path: PurePosixPath) -> PurePosixPath:
    """Output path an entry produces: templates lose their template suffix."""
    if is_template(path):
        return path.with_suffix("")
    return path


class Entry:
    """A source file known to the project.

    Parameters
    ----------
    project:
        The owning project.
    path:
        Path relative to the project's source root.
    """

    def __init__(self, project: Project, path: PurePosixPath) -> None:
        self.project = project
        self.path = PurePosixPath(path)
        self.artifact: Artifact | None = None
        if not project.is_control_file(self.path):
            self.artifact = Artifact(self, output_path_for(self.path))

    @property
    def file_path(self) -> Path:
        return self.project.source_root / self.path

    @property
    def is_template(self) -> bool:
        return is_template(self.path)

    def sync(self) -> bool:
        """Re-check the entry against the filesystem and the ignore rules.

        Returns False once the file is gone or has become ignored.
        """
        return self.file_path.is_file() and self.project.admits(self.path)

    def __repr__(self) -> str:
        return f"Entry({self.path.as_posix()!r})"
