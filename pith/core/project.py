"""Project — the build orchestrator.

The Project keeps two maps consistent with the filesystem: source
entries keyed by their path relative to the source root, and artifacts
keyed by their path relative to the output root.  Every ``sync`` runs
the same three phases in order:

1. run the control script (it may change ignore rules or attributes
   the next two phases depend on)
2. re-validate known entries, dropping those that vanished or became
   ignored together with their artifacts
3. discover files that are not yet entries

``build`` syncs, then builds every current artifact, recording per
artifact failures instead of raising them.

Concurrency
-----------
A Project has no internal locking and its methods are not reentrant.
Callers that share one between threads (request handlers in a preview
server, say) must serialize every mutating call (``sync``, ``build``,
``sync_every``, ``ignore``, attribute setters, helper registration)
behind a single owner or one lock around the whole object.
"""

from __future__ import annotations

import logging
import os
import shutil
import time
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from pathlib import Path, PurePath, PurePosixPath
from typing import Any

from pydantic import ValidationError

from pith.config import PithSettings, settings as default_settings
from pith.core.artifact import Artifact
from pith.core.config_runner import ConfigRunner, ConfigurationError
from pith.core.entry import Entry, is_ignored
from pith.core.helpers import HelperRegistry
from pith.core.render import TemplateRenderer
from pith.core.scanner import Scanner, is_within
from pith.models.options import PROJECT_ATTRIBUTES, ProjectOptions
from pith.models.reports import BuildReport, SyncReport

DEFAULT_IGNORE_PATTERNS: frozenset[str] = frozenset(
    {"_*", ".git", ".gitignore", ".svn", ".sass-cache", "*~", "*.sw[op]"}
)


def _relative(path: str | PurePath) -> PurePosixPath:
    return PurePosixPath(PurePath(path).as_posix())


class Project:
    """A source tree, its output tree, and the mapping between them.

    Parameters
    ----------
    source_root:
        Directory holding the source files.
    output_root:
        Directory to build into.  Defaults to ``source_root / "_out"``
        (the suffix comes from ``PithSettings.output_suffix``).  Its
        contents are deleted during construction.
    options:
        ``ProjectOptions`` or a mapping of the same keys.  Unknown keys
        raise ``ConfigurationError``.
    logger:
        Logger for sync and build messages.  Defaults to this module's.
    clock:
        Monotonic time source used by ``sync_every``.
    settings:
        Process settings.  Uses the module-level ``pith.config.settings``
        if not provided.

    Raises
    ------
    ConfigurationError
        If ``options`` is invalid, if the output root is (or contains)
        the source root, or if the output root cannot be cleared.
    """

    def __init__(
        self,
        source_root: str | Path,
        output_root: str | Path | None = None,
        options: ProjectOptions | Mapping[str, Any] | None = None,
        *,
        logger: logging.Logger | None = None,
        clock: Callable[[], float] | None = None,
        settings: PithSettings | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self.source_root = Path(source_root)
        self.output_root = (
            Path(output_root)
            if output_root is not None
            else self.source_root / self._settings.output_suffix
        )
        if is_within(self.source_root, self.output_root):
            raise ConfigurationError(
                f"Output root {self.output_root} would contain the source root "
                f"{self.source_root}; refusing to wipe it"
            )

        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock or time.monotonic

        self._ignore_patterns: set[str] = set(DEFAULT_IGNORE_PATTERNS)
        self.assume_content_negotiation = False
        self.assume_directory_index = False

        self._entry_map: dict[PurePosixPath, Entry] = {}
        self._artifact_map: dict[PurePosixPath, Artifact] = {}
        self._next_sync_at: float | None = None
        self._build_generation = 0
        self._collisions: set[PurePosixPath] = set()

        # Collaborators
        self.helpers = HelperRegistry()
        self.renderer = TemplateRenderer(self)
        self.scanner = Scanner(self.source_root, self.output_root)
        self._config_runner = ConfigRunner(self)

        self._apply_options(options)

        self._clear_output_root()

    def _clear_output_root(self) -> None:
        try:
            shutil.rmtree(self.output_root)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise ConfigurationError(
                f"Cannot clear output root {self.output_root}: {exc}"
            ) from exc
        self.logger.debug("Cleared output root %s", self.output_root)

    def _apply_options(self, options: ProjectOptions | Mapping[str, Any] | None) -> None:
        if options is None:
            return
        if isinstance(options, ProjectOptions):
            data = options.model_dump(exclude_unset=True)
        else:
            data = dict(options)
        try:
            validated = ProjectOptions.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid project options: {exc}") from exc

        for name in data:
            if name == "ignore":
                for pattern in validated.ignore:
                    self.ignore(pattern)
            else:
                setattr(self, name, getattr(validated, name))

    # ------------------------------------------------------------------
    # Ignore rules and attributes
    # ------------------------------------------------------------------

    @property
    def ignore_patterns(self) -> frozenset[str]:
        return frozenset(self._ignore_patterns)

    def ignore(self, pattern: str) -> None:
        """Add a glob to the ignore set.  Takes effect on the next sync."""
        if not isinstance(pattern, str) or not pattern:
            raise ConfigurationError(f"Ignore pattern must be a non-empty string, got {pattern!r}")
        self._ignore_patterns.add(pattern)

    def get_attribute(self, name: str) -> Any:
        if name not in PROJECT_ATTRIBUTES:
            raise ConfigurationError(f"Unrecognized project attribute {name!r}")
        return getattr(self, name)

    def set_attribute(self, name: str, value: Any) -> None:
        """Set a recognized attribute, validating its value.

        Raises
        ------
        ConfigurationError
            If ``name`` is not a project attribute or ``value`` has the
            wrong type.
        """
        if name not in PROJECT_ATTRIBUTES:
            raise ConfigurationError(f"Unrecognized project attribute {name!r}")
        try:
            validated = ProjectOptions.model_validate({name: value})
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid value for {name}: {value!r}") from exc
        setattr(self, name, getattr(validated, name))

    def is_control_file(self, path: PurePosixPath) -> bool:
        return path == self._config_runner.control_file

    def admits(self, path: PurePosixPath) -> bool:
        """Whether a relative path may be an entry right now.

        The control file is always admitted, even though ``_*`` matches
        its directory.
        """
        if is_within(self.source_root / path, self.output_root):
            return False
        if self.is_control_file(path):
            return True
        return not is_ignored(path, self._ignore_patterns)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def entries(self) -> list[Entry]:
        return list(self._entry_map.values())

    def artifacts(self) -> list[Artifact]:
        return list(self._artifact_map.values())

    def entry(self, path: str | PurePath) -> Entry | None:
        """Find an entry by its path relative to the source root."""
        return self._entry_map.get(_relative(path))

    def artifact(self, path: str | PurePath) -> Artifact | None:
        """Find an artifact by its path relative to the output root."""
        return self._artifact_map.get(_relative(path))

    def config_entries(self) -> list[Entry]:
        """The control script's entry, if the project has one."""
        entry = self._entry_map.get(self._config_runner.control_file)
        return [entry] if entry is not None else []

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def sync(self) -> SyncReport:
        """Reconcile the entry and artifact maps with the filesystem.

        Raises
        ------
        ConfigurationError
            If the control script fails.  Validation and discovery are
            skipped for this cycle.
        """
        self._config_runner.run()
        removed = self._validate_known_entries()
        discovered = self._find_new_entries()

        report = SyncReport(
            discovered=[p.as_posix() for p in discovered],
            removed=[p.as_posix() for p in removed],
            entry_count=len(self._entry_map),
            artifact_count=len(self._artifact_map),
        )
        if report.changed:
            self.logger.info(
                "Synced %s: %d discovered, %d removed",
                self.source_root, len(discovered), len(removed),
            )
        return report

    def sync_every(self, period: float) -> SyncReport | None:
        """Sync at most once per ``period`` seconds.

        The first call always syncs.  Returns the report when a sync ran,
        ``None`` otherwise.  If the sync raises, the schedule is left
        alone so the next call tries again.
        """
        now = self._clock()
        if self._next_sync_at is not None and now < self._next_sync_at:
            return None
        report = self.sync()
        self._next_sync_at = now + period
        return report

    def _validate_known_entries(self) -> list[PurePosixPath]:
        invalid = [entry for entry in self._entry_map.values() if not entry.sync()]
        for entry in invalid:
            del self._entry_map[entry.path]
            if entry.artifact is not None:
                self._artifact_map.pop(entry.artifact.path, None)
        return [entry.path for entry in invalid]

    def _find_new_entries(self) -> list[PurePosixPath]:
        discovered: list[PurePosixPath] = []
        collisions: set[PurePosixPath] = set()
        for path in self.scanner.scan():
            if path in self._entry_map or not self.admits(path):
                continue
            entry = Entry(self, path)
            artifact = entry.artifact
            if artifact is not None:
                owner = self._artifact_map.get(artifact.path)
                if owner is not None:
                    # Warn once per collision; repeats while it persists go to debug
                    level = logging.DEBUG if path in self._collisions else logging.WARNING
                    self.logger.log(
                        level,
                        "Skipping %s: %s is already produced by %s",
                        path, artifact.path, owner.entry.path,
                    )
                    collisions.add(path)
                    continue
                self._artifact_map[artifact.path] = artifact
            self._entry_map[path] = entry
            discovered.append(path)
        self._collisions = collisions
        return discovered

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self) -> BuildReport:
        """Sync, then build every artifact.

        Artifacts are built one at a time in output path order.  A failed
        artifact keeps its error and the loop moves on; check
        ``has_errors()`` or the returned report afterwards.
        """
        self.sync()
        self.output_root.mkdir(parents=True, exist_ok=True)

        started_at = datetime.now(timezone.utc)
        built: list[str] = []
        failures: dict[str, str] = {}
        for artifact in sorted(self._artifact_map.values(), key=lambda a: a.path):
            if artifact.build():
                built.append(artifact.path.as_posix())
            else:
                failures[artifact.path.as_posix()] = artifact.error_message or ""

        os.utime(self.output_root)
        self._build_generation += 1

        report = BuildReport(
            generation=self._build_generation,
            built=built,
            failures=failures,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )
        self.logger.info(
            "Built %d of %d artifacts into %s in %.2fs",
            len(built), len(built) + len(failures), self.output_root,
            report.duration_seconds,
        )
        return report

    def has_errors(self) -> bool:
        """True if any current artifact failed in the most recent build."""
        return any(artifact.error is not None for artifact in self._artifact_map.values())

    @property
    def build_generation(self) -> int:
        """Number of completed builds in this session."""
        return self._build_generation

    def last_built_at(self) -> datetime | None:
        """Modification time of the output root, or None before any build."""
        try:
            mtime = self.output_root.stat().st_mtime
        except FileNotFoundError:
            return None
        return datetime.fromtimestamp(mtime, tz=timezone.utc)

    def is_stale(self) -> bool:
        """True if any source file changed after the last build stamp.

        Every file under the source root counts, ignored or not: layouts
        and partials are ignored yet still feed the templates that use
        them.  Files inside the output root are never considered.
        """
        built_at = self.last_built_at()
        if built_at is None:
            return True
        stamp = built_at.timestamp()
        for path in self.scanner.scan():
            try:
                mtime = (self.source_root / path).stat().st_mtime
            except OSError:
                continue
            if mtime > stamp:
                return True
        return False

    def __repr__(self) -> str:
        return (
            f"Project(source_root={str(self.source_root)!r}, "
            f"output_root={str(self.output_root)!r}, entries={len(self._entry_map)})"
        )
