"""Generated artifacts.

An artifact is built by rendering its entry (templates) or copying it
verbatim (everything else) into the output root.  Build failures are
recorded on the artifact rather than raised, so one broken page never
stops the rest of a build.
"""

from __future__ import annotations

import shutil
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pith.core.entry import Entry


class Artifact:
    """One output file, owned by exactly one entry.

    Parameters
    ----------
    entry:
        The entry that produces this artifact.
    path:
        Path relative to the project's output root.
    """

    def __init__(self, entry: Entry, path: PurePosixPath) -> None:
        self.entry = entry
        self.path = PurePosixPath(path)
        self.error: Exception | None = None

    @property
    def file_path(self) -> Path:
        return self.entry.project.output_root / self.path

    @property
    def error_message(self) -> str | None:
        if self.error is None:
            return None
        return f"{type(self.error).__name__}: {self.error}"

    def build(self) -> bool:
        """Generate the output file.

        Clears any error from a previous build first.  Returns True on
        success; on failure the exception is stored in ``error``.
        """
        self.error = None
        project = self.entry.project
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            if self.entry.is_template:
                self.file_path.write_text(project.renderer.render(self), encoding="utf-8")
            else:
                shutil.copyfile(self.entry.file_path, self.file_path)
        except Exception as exc:
            self.error = exc
            project.logger.warning("Failed to build %s: %s", self.path, self.error_message)
            return False
        project.logger.debug("Built %s", self.path)
        return True

    def __repr__(self) -> str:
        return f"Artifact({self.path.as_posix()!r})"
