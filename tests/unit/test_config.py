"""Tests for runtime settings — env-driven configuration."""

from __future__ import annotations

from pith.config import PithSettings
from pith.core.project import Project


class TestPithSettings:
    """Settings come from defaults and PITH_* environment variables."""

    def test_defaults(self, monkeypatch):
        """Settings have sensible defaults without environment overrides."""
        monkeypatch.delenv("PITH_LOG_LEVEL", raising=False)
        settings = PithSettings()
        assert settings.log_level == "INFO"
        assert settings.debug is False
        assert settings.output_suffix == "_out"
        assert settings.watch_interval == 1.0

    def test_env_override(self, monkeypatch):
        """PITH_* environment variables override the defaults."""
        monkeypatch.setenv("PITH_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PITH_WATCH_INTERVAL", "0.25")
        settings = PithSettings()
        assert settings.log_level == "DEBUG"
        assert settings.watch_interval == 0.25

    def test_output_suffix_used_by_project(self, source_dir, monkeypatch):
        """The default output root uses the configured suffix."""
        monkeypatch.setenv("PITH_OUTPUT_SUFFIX", "_site")
        project = Project(source_dir, settings=PithSettings())
        assert project.output_root == source_dir / "_site"
