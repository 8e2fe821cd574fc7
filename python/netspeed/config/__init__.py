"""Centralised application configuration for the netspeed backend.

All runtime code reads configuration from a single ``Settings`` object::

    from netspeed.config import get_settings, configure_logging

    settings = get_settings()
    configure_logging(settings)

Values come from environment variables prefixed with ``NETSPEED_`` (or a local
``.env`` file), e.g. ``NETSPEED_PORT=8080`` or ``NETSPEED_LOG_LEVEL=DEBUG``.
"""

from __future__ import annotations

import os
import sys
from functools import lru_cache
from pathlib import Path
from typing import Final, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

if sys.platform == "darwin":
    DEFAULT_APP_DIR: Final[Path] = Path.home() / "Library" / "Application Support" / "NetSpeed"
elif sys.platform.startswith("win"):
    DEFAULT_APP_DIR = Path(os.getenv("APPDATA", Path.home())) / "NetSpeed"
else:  # Linux and others
    DEFAULT_APP_DIR = Path.home() / ".local" / "share" / "NetSpeed"

DEFAULT_PORT: Final[int] = 2022

# ---------------------------------------------------------------------------
# Pydantic-powered Settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables (``NETSPEED_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="NETSPEED_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # --- generic -----------------------------------------------------------
    debug: bool = Field(False, description="Enable debug/auto-reload mode")
    log_level: str = Field("INFO", description="Root log level e.g. INFO | DEBUG")

    # --- paths -------------------------------------------------------------
    app_dir: Path = Field(DEFAULT_APP_DIR, description="Root application data directory")
    # Derived from app_dir in get_settings() when not set explicitly.
    db_path: Optional[Path] = Field(None, description="SQLite DB location (defaults to app_dir/netspeed.db)")
    database_url: Optional[str] = Field(None, description="Full SQLAlchemy URL; overrides db_path")

    # --- server ------------------------------------------------------------
    host: str = Field("127.0.0.1", description="Bind address for the HTTP server")
    port: int = Field(DEFAULT_PORT, gt=0, lt=65536, description="HTTP server port")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    trust_forwarded_for: bool = Field(
        False, description="Use the first X-Forwarded-For entry as the caller address"
    )

    # --- measurement -------------------------------------------------------
    test_file_size_mb: float = Field(10, gt=0, description="Payload size per transfer probe")
    test_duration_seconds: float = Field(10, gt=0, description="Upper bound for one test run")
    concurrent_connections: int = Field(4, gt=0, description="Parallel transfer streams")

    # ---------------------------------------------------------------------
    # Derived helpers
    # ---------------------------------------------------------------------

    @property
    def sqlalchemy_url(self) -> str:
        """Return the connection URL for the results database."""
        if self.database_url:
            return self.database_url
        db_path = self.db_path or (self.app_dir / "netspeed.db")
        return f"sqlite:///{db_path}"


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def build_settings(**overrides) -> Settings:
    """Instantiate a *validated* Settings object and prepare its directories.

    Keyword overrides take precedence over the environment.  The application
    directory is created so downstream code can write logs and the database
    without extra checks.
    """
    s = Settings(**overrides)  # env-driven, raises ``ValidationError`` if invalid
    s.app_dir.mkdir(parents=True, exist_ok=True)
    if s.db_path is None and not s.database_url:
        s.db_path = s.app_dir / "netspeed.db"
    return s


@lru_cache(maxsize=1)
def get_settings() -> Settings:  # noqa: D401 (simple function)
    """Return the process-wide cached Settings instance."""
    return build_settings()


from .logging import configure_logging, LOG_FORMAT  # noqa: E402  pylint: disable=C0413

__all__ = [
    "Settings",
    "build_settings",
    "get_settings",
    "configure_logging",
    "LOG_FORMAT",
    "DEFAULT_APP_DIR",
    "DEFAULT_PORT",
]
