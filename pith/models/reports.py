"""Sync and build report models — diagnostic snapshots, never state."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class SyncReport(BaseModel):
    """What one sync cycle changed in the entry map."""

    model_config = ConfigDict(frozen=True)

    discovered: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    entry_count: int = 0
    artifact_count: int = 0
    synced_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def changed(self) -> bool:
        """Whether any entry was added or dropped."""
        return bool(self.discovered or self.removed)


class BuildReport(BaseModel):
    """Outcome of one build.

    ``failures`` maps output paths to the error message recorded on the
    artifact; artifacts that built cleanly are listed in ``built``.
    """

    model_config = ConfigDict(frozen=True)

    generation: int
    built: list[str] = Field(default_factory=list)
    failures: dict[str, str] = Field(default_factory=dict)
    started_at: datetime
    finished_at: datetime

    @property
    def ok(self) -> bool:
        """True when no artifact failed."""
        return not self.failures

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()
