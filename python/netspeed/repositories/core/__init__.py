from .base import BaseRepository
from .exceptions import NetspeedError, StorageError, ValidationError

__all__ = ["BaseRepository", "NetspeedError", "StorageError", "ValidationError"]
