from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session


def fetch_scalar(
    session: Session,
    sql: str,
    params: Optional[Dict[str, Any]] = None
) -> Optional[Any]:
    """
    Execute a text() statement and return the first column of the first row,
    or None if no row is found.
    """
    return session.execute(text(sql), params or {}).scalars().first()


def fetch_one(
    session: Session,
    sql: str,
    params: Optional[Dict[str, Any]] = None
) -> Optional[Dict[str, Any]]:
    """
    Execute a text() statement and return the first row as a dictionary,
    or None if no row is found.
    """
    result = session.execute(text(sql), params or {})
    row = result.first()
    return dict(row._mapping) if row else None


def fetch_all(
    session: Session,
    sql: str,
    params: Optional[Dict[str, Any]] = None
) -> List[Dict[str, Any]]:
    """
    Execute a text() statement and return all rows as a list of dictionaries.
    """
    result = session.execute(text(sql), params or {})
    return [dict(row._mapping) for row in result]


def execute_returning_id(
    session: Session,
    sql: str,
    params: Optional[Dict[str, Any]] = None,
) -> Optional[int]:
    """
    Execute a write operation that returns an ID (``INSERT ... RETURNING id``).
    """
    result = session.execute(text(sql), params or {})
    return result.scalar_one_or_none()
