"""
Custom exceptions for speed-test operations.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple


class NetspeedError(Exception):
    """Base exception for netspeed errors"""
    pass


class StorageError(NetspeedError):
    """Raised when the underlying database call fails.

    The original driver exception is always chained as ``__cause__``.
    """
    pass


class ValidationError(NetspeedError):
    """Raised when input fails a record constraint, before storage is touched.

    ``errors`` holds one ``{"field", "message", "type"}`` entry per violation
    and ``fields`` the offending field names in the same order.
    """

    def __init__(self, errors: Sequence[Dict[str, Any]], message: Optional[str] = None) -> None:
        self.errors: List[Dict[str, Any]] = list(errors)
        self.fields: Tuple[str, ...] = tuple(e["field"] for e in self.errors)
        if message is None:
            message = "Invalid value for " + ", ".join(self.fields or ("input",))
        super().__init__(message)

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        """Build from a ``pydantic.ValidationError``."""
        errors = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
            errors.append({"field": loc, "message": err.get("msg", ""), "type": err.get("type", "")})
        return cls(errors)

    @classmethod
    def for_field(cls, field: str, message: str, type_: str = "value_error") -> "ValidationError":
        return cls([{"field": field, "message": message, "type": type_}])
