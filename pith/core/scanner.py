"""Source tree scanner.

Enumerates files below the source root as relative posix paths, skipping
everything inside the output root.  The output root may be nested in
the source root (the default ``<source>/_out`` layout), so exclusion is
a containment check rather than a name comparison.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path, PurePosixPath


def is_within(path: Path, root: Path) -> bool:
    """Return True if ``path`` is ``root`` or lies somewhere below it."""
    path = Path(os.path.abspath(path))
    root = Path(os.path.abspath(root))
    return path == root or root in path.parents


class Scanner:
    """Lists the files that may become entries.

    Parameters
    ----------
    source_root:
        Directory to walk.
    output_root:
        Directory whose contents are never reported.
    """

    def __init__(self, source_root: Path, output_root: Path) -> None:
        self.source_root = Path(source_root)
        self.output_root = Path(output_root)

    def scan(self) -> Iterator[PurePosixPath]:
        """Yield relative paths of all regular files, in sorted order.

        Directories inside the output root are pruned without being
        descended into.
        """
        if not self.source_root.is_dir():
            return
        for dirpath, dirnames, filenames in os.walk(self.source_root):
            current = Path(dirpath)
            dirnames[:] = sorted(
                d for d in dirnames if not is_within(current / d, self.output_root)
            )
            for filename in sorted(filenames):
                file_path = current / filename
                if is_within(file_path, self.output_root) or not file_path.is_file():
                    continue
                yield PurePosixPath(file_path.relative_to(self.source_root).as_posix())
