"""Base repository with common raw-SQL helpers.

This module centralizes small utility wrappers around netspeed.db.sql so that
all other repositories can inherit and benefit from consistent, concise
helpers.  Absolutely no ORM querying should be performed here – raw SQL only.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from netspeed.db.sql import (
    execute_returning_id as _execute_returning_id,
    fetch_all as _fetch_all,
    fetch_one as _fetch_one,
    fetch_scalar as _fetch_scalar,
)

from .exceptions import StorageError

logger = logging.getLogger(__name__)

# Stored timestamps are naive UTC with fixed width so text ordering matches time
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


class BaseRepository:
    """Common database helpers for repository subclasses.

    All methods are static so they can be used directly from child classes
    without instantiation.  Only raw SQL is used underneath, delegating to the
    utility functions in ``netspeed.db.sql``.
    """

    # ------------------------------------------------------------------
    # Thin wrappers around netspeed.db.sql helpers
    # ------------------------------------------------------------------

    @staticmethod
    def fetch_one(
        session: Session, sql: str, params: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """Return the first row (as ``dict``) or ``None``."""
        return _fetch_one(session, sql, params)

    @staticmethod
    def fetch_all(
        session: Session, sql: str, params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Return *all* rows (as list of ``dict``)."""
        return _fetch_all(session, sql, params)

    @staticmethod
    def fetch_scalar(
        session: Session, sql: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Return a single scalar value (first column of first row)."""
        return _fetch_scalar(session, sql, params)

    # ------------------------------------------------------------------
    # Common CRUD operations
    # ------------------------------------------------------------------

    @staticmethod
    def get_by_id(session: Session, table: str, record_id: Any) -> Optional[Dict[str, Any]]:
        """Get a single record by ID."""
        sql = f"SELECT * FROM {table} WHERE id = :id"
        return BaseRepository.fetch_one(session, sql, {"id": record_id})

    @staticmethod
    def insert_returning_id(
        session: Session, table: str, data: Dict[str, Any]
    ) -> Optional[int]:
        """Insert a record and return its ID."""
        if not data:
            raise ValueError("Data dictionary cannot be empty")

        columns = ", ".join(data.keys())
        placeholders = ", ".join(f":{key}" for key in data.keys())
        sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders}) RETURNING id"
        return _execute_returning_id(session, sql, data)

    @staticmethod
    def count(session: Session, table: str) -> int:
        """Count records in a table."""
        return BaseRepository.fetch_scalar(session, f"SELECT COUNT(*) FROM {table}") or 0

    # ------------------------------------------------------------------
    # Parsing helpers (decimal text / datetime)
    # ------------------------------------------------------------------

    @staticmethod
    def to_decimal_text(value: Any, precision: int, scale: int, *, field: str = "value") -> str:
        """Serialize a number to fixed-point text, e.g. ``100.5`` → ``"100.50"``.

        Rounds half-up to ``scale`` places.  Values needing more than
        ``precision - scale`` integer digits overflow the column and raise
        ``StorageError`` just like a numeric(precision, scale) column would.
        """
        try:
            quantized = Decimal(str(value)).quantize(
                Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP
            )
        except (InvalidOperation, ValueError) as exc:
            raise StorageError(f"{field}: cannot store {value!r} as numeric({precision}, {scale})") from exc
        if not quantized.is_finite() or abs(quantized) >= Decimal(10) ** (precision - scale):
            raise StorageError(f"{field}: numeric field overflow for numeric({precision}, {scale}): {value!r}")
        return format(quantized, "f")

    @staticmethod
    def parse_decimal(text_value: Any) -> Optional[float]:
        """Parse stored decimal text back to ``float`` (``"100.50"`` → ``100.5``)."""
        if text_value is None:
            return None
        return float(text_value)

    @staticmethod
    def format_timestamp(dt_value: datetime) -> str:
        """Render a datetime as naive-UTC fixed-width text for storage."""
        if dt_value.tzinfo is not None:
            dt_value = dt_value.astimezone(timezone.utc).replace(tzinfo=None)
        return dt_value.strftime(TIMESTAMP_FORMAT)

    @staticmethod
    def parse_datetime(dt_value: Any) -> Optional[datetime]:
        """Best-effort stored-timestamp → UTC-aware ``datetime`` parser."""
        if isinstance(dt_value, datetime):
            parsed = dt_value
        elif isinstance(dt_value, str):
            try:
                # Allow trailing ``Z`` to indicate UTC
                parsed = datetime.fromisoformat(dt_value.replace("Z", "+00:00"))
            except ValueError:
                logger.debug("Unable to parse datetime: %s", dt_value)
                return None
        else:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
