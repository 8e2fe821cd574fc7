"""Database engine, session scope and raw-SQL helpers."""

from .session_manager import Database
from .database import init_engine, init_session_factory

__all__ = ["Database", "init_engine", "init_session_factory"]
