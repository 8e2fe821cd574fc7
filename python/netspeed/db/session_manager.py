import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from .database import init_engine, init_session_factory


class Database:
    """Owns the engine and session factory for one results database.

    Constructed once by the application factory and handed to the services
    that need it; nothing in the package reaches for a global instance.
    """

    def __init__(self, database_url: Optional[str] = None, *, engine: Optional[Engine] = None) -> None:
        if engine is None:
            if not database_url:
                raise ValueError("Database requires a database_url or an engine")
            engine = init_engine(database_url)
        self.engine = engine
        self._session_factory = init_session_factory(engine)

    @property
    def url(self) -> str:
        return self.engine.url.render_as_string(hide_password=True)

    @property
    def session(self) -> Session:
        """Get a NEW short-lived session each call."""
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations."""
        session = self.session
        try:
            yield session
            session.commit()
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> Dict[str, Any]:
        """Run ``SELECT 1`` and report success, error text and response time."""
        result: Dict[str, Any] = {"success": False, "error": None, "response_time": None}
        start = time.time()
        try:
            with self.session_scope() as session:
                session.execute(text("SELECT 1 AS test")).fetchone()
            result["success"] = True
        except Exception as exc:  # noqa: BLE001 - reported to the caller, not swallowed
            result["error"] = str(exc)
        finally:
            result["response_time"] = time.time() - start
        return result

    def dispose(self) -> None:
        self.engine.dispose()
