# Table definitions for the results database.  Alembic migrations under
# netspeed/alembic are the source of truth for deployed schemas; this metadata
# mirrors them so tests can build a schema with ``Base.metadata.create_all``.

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, Text, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def current_time_utc() -> datetime:
    return datetime.now(timezone.utc)


class SpeedTestResultRow(Base):
    __tablename__ = "speed_test_results"
    __table_args__ = (
        Index("idx_speed_test_results_created_at", "created_at"),
        # AUTOINCREMENT keeps SQLite from reusing ids of deleted rows
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    # Fixed-precision decimal text, e.g. "100.50"
    download_speed = Column(Text, nullable=False)  # Mbps, numeric(10, 2)
    upload_speed = Column(Text, nullable=False)    # Mbps, numeric(10, 2)
    ping = Column(Text, nullable=False)            # ms, numeric(8, 2)
    jitter = Column(Text, nullable=False)          # ms, numeric(8, 2)
    server_location = Column(Text, nullable=False)
    user_ip = Column(Text, nullable=False)
    test_duration = Column(Text, nullable=False)   # seconds, numeric(6, 2)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    def __repr__(self):
        return f"<SpeedTestResultRow(id={self.id}, download_speed='{self.download_speed}', created_at='{self.created_at}')>"
