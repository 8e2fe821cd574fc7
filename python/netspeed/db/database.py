import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)


def _busy_timeout_ms() -> int:
    try:
        return int(os.getenv("NETSPEED_SQLITE_BUSY_TIMEOUT_MS") or "15000")
    except ValueError:
        return 15000


def init_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for ``database_url``.

    SQLite files get their parent directory created, no connection pooling
    and per-connection pragmas for concurrent readers.
    """
    is_sqlite = database_url.startswith("sqlite:")
    busy_ms = _busy_timeout_ms()

    if is_sqlite:
        db_file = database_url.split("///", 1)[-1]
        if db_file and db_file != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(db_file)), exist_ok=True)

    engine = create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
        poolclass=NullPool if is_sqlite else None,
        connect_args={
            "check_same_thread": False,
            "timeout": (busy_ms / 1000.0),
        } if is_sqlite else {},
    )

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, _record):  # pragma: no cover - driver callback
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute(f"PRAGMA busy_timeout={busy_ms}")
                cursor.execute("PRAGMA synchronous=NORMAL")
            finally:
                cursor.close()

    logger.info("Initialized engine with database at %s", engine.url.render_as_string(hide_password=True))
    return engine


def init_session_factory(engine: Engine) -> sessionmaker:
    # Return a plain session factory; callers should create a new Session per operation
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
