"""Root logging configuration for the netspeed backend.

This centralises *all* logger setup so that the rest of the codebase can
simply call::

    from netspeed.config import configure_logging
    configure_logging(settings)

Repeated calls are safe – the function is idempotent unless ``force=True`` is
passed.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Final, Optional

if TYPE_CHECKING:  # pragma: no cover
    from . import Settings

LOG_FORMAT: Final[str] = (
    "%(asctime)s  %(levelname)-8s  [%(name)s]  %(filename)s:%(lineno)d  %(message)s"
)

# Simple ANSI colorizer for console output (no extra deps)
_ANSI_RESET = "\033[0m"
_COLORS = {
    "DEBUG": "\033[90m",      # bright black / grey
    "INFO": "\033[36m",       # cyan
    "WARNING": "\033[33m",    # yellow
    "ERROR": "\033[31m",      # red
    "CRITICAL": "\033[35m",   # magenta
}


class ColorFormatter(logging.Formatter):
    def __init__(self, fmt: str, use_color: bool = True) -> None:
        super().__init__(fmt)
        self._use_color = use_color and sys.stdout.isatty()
        # Precompute default record keys so we can identify custom extras
        self._default_keys = set(
            logging.LogRecord(name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None).__dict__.keys()
        )
        self._default_keys.update({"message", "asctime"})

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        if self._use_color:
            color = _COLORS.get(record.levelname, "")
            original_levelname = record.levelname
            original_name = record.name
            try:
                record.levelname = f"{color}{record.levelname}{_ANSI_RESET}"
                # Emphasize our package logs
                if original_name.startswith("netspeed"):
                    record.name = f"\033[36m{original_name}{_ANSI_RESET}"
                base_msg = super().format(record)
            finally:
                record.levelname = original_levelname
                record.name = original_name
        else:
            base_msg = super().format(record)

        # Append any custom extras (safe JSON) for visibility
        extras = {k: v for k, v in record.__dict__.items() if k not in self._default_keys}
        if extras:
            safe = {k: (v if isinstance(v, (str, int, float, bool, type(None))) else str(v)) for k, v in extras.items()}
            base_msg = f"{base_msg}  |  {json.dumps(safe, ensure_ascii=False)}"
        return base_msg


def _attach_handler(root: logging.Logger, handler: logging.Handler, *, replace: bool = False) -> None:
    """Utility to (optionally) replace an already-installed handler of same type."""
    if replace:
        for h in tuple(root.handlers):
            if isinstance(h, type(handler)):
                root.removeHandler(h)
    root.addHandler(handler)


def configure_logging(settings: Optional["Settings"] = None, *, force: bool = False) -> None:  # noqa: D401
    """Initialise the root logger with console + rotating-file handlers.

    Parameters
    ----------
    settings
        Settings to read the level and log directory from; defaults to the
        cached process settings.
    force
        Remove any pre-existing handlers even if they weren't added by a
        previous call to ``configure_logging``.  Useful in reload contexts.
    """
    if settings is None:
        from . import get_settings

        settings = get_settings()

    root = logging.getLogger()

    # Short-circuit if already configured
    if root.handlers and not force:
        return

    if force:
        for h in tuple(root.handlers):
            h.flush()
            root.removeHandler(h)

    root.setLevel(settings.log_level.upper())

    # ------------------------------------------------------------------
    # File handler
    # ------------------------------------------------------------------
    log_file: Path = settings.app_dir / "netspeed.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=5_000_000,  # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # ------------------------------------------------------------------
    # Console handler
    # ------------------------------------------------------------------
    log_to_stderr = os.getenv("NETSPEED_LOG_TO_STDERR", "0").lower() in ("1", "true", "yes", "on")
    console_handler = logging.StreamHandler(sys.stderr if log_to_stderr else sys.stdout)
    console_handler.setFormatter(ColorFormatter(LOG_FORMAT, use_color=True))

    _attach_handler(root, file_handler, replace=force)
    _attach_handler(root, console_handler, replace=force)

    # Duplicate ERROR-and-above to stderr so process supervisors capture them
    attach_stderr = os.getenv("NETSPEED_STDERR_ERRORS", "1").lower() in ("1", "true", "yes")
    if attach_stderr and not log_to_stderr:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.ERROR)
        stderr_handler.setFormatter(ColorFormatter(LOG_FORMAT, use_color=True))
        _attach_handler(root, stderr_handler, replace=False)

    # Noisy third-party loggers to WARNING
    for noisy in ("httpx", "httpcore", "sqlalchemy.engine", "alembic.runtime.migration"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    # Make uvicorn log through the root logger so everything follows the same
    # format.  Strip handlers and propagate.
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers = []  # type: ignore[attr-defined]
        uv_logger.propagate = True
