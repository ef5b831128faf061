"""Runtime settings — env-driven, shared by the CLI and the watcher.

Centralized settings using pydantic-settings for environment variable
support. Reads from a .env file and PITH_* environment variables.
Per-project options (ignore patterns, link assumptions) live in
``pith.models.options`` instead.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class PithSettings(BaseSettings):
    """Process-level settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export PITH_LOG_LEVEL=DEBUG
        export PITH_WATCH_INTERVAL=0.5

    Or via .env file::

        PITH_OUTPUT_SUFFIX=_site
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PITH_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    debug: bool = False

    # Directory name joined onto the source root when no output root is given
    output_suffix: str = "_out"

    # Seconds between sync attempts in `pith watch`
    watch_interval: float = 1.0


# Module-level singleton — import as `from pith.config import settings`
settings = PithSettings()
