"""Polling rebuild loop.

Pith has no filesystem notifications.  The watcher polls instead: it
calls ``Project.sync_every`` on each tick and rebuilds when the sync
added or dropped entries, or when any source file is newer than the
output root's last build stamp.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from pith.core.config_runner import ConfigurationError
from pith.core.project import Project
from pith.models.reports import BuildReport

logger = logging.getLogger(__name__)


class Watcher:
    """Keeps a project's output up to date by polling.

    Parameters
    ----------
    project:
        The project to rebuild.  The watcher must be its only caller
        while it runs.
    interval:
        Minimum seconds between syncs.
    sleep:
        Sleep function, replaceable in tests.
    on_build:
        Called with every ``BuildReport`` the watcher produces.
    """

    def __init__(
        self,
        project: Project,
        interval: float = 1.0,
        *,
        sleep: Callable[[float], None] = time.sleep,
        on_build: Callable[[BuildReport], None] | None = None,
    ) -> None:
        self.project = project
        self.interval = interval
        self._sleep = sleep
        self._on_build = on_build

    def tick(self) -> BuildReport | None:
        """Run one poll.  Returns the build report if a build happened."""
        sync_report = self.project.sync_every(self.interval)
        if sync_report is None:
            return None
        if not (sync_report.changed or self.project.is_stale()):
            return None

        report = self.project.build()
        if self._on_build is not None:
            self._on_build(report)
        return report

    def run(self, cycles: int | None = None) -> int:
        """Poll until interrupted, or for ``cycles`` ticks.

        Returns the number of builds performed.
        """
        builds = 0
        ticks = 0
        logger.info("Watching %s every %.1fs", self.project.source_root, self.interval)
        try:
            while cycles is None or ticks < cycles:
                try:
                    if self.tick() is not None:
                        builds += 1
                except ConfigurationError as exc:
                    logger.error("Sync failed: %s", exc)
                ticks += 1
                if cycles is None or ticks < cycles:
                    self._sleep(self.interval)
        except KeyboardInterrupt:
            logger.info("Stopped watching %s", self.project.source_root)
        return builds
