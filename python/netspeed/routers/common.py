"""Common utilities for building FastAPI routers.

* `safe_endpoint`: a decorator that wraps endpoint functions in a generic
  try/except block with proper error logging.  It **does not swallow**
  `HTTPException` or `ValidationError` raised by the handler itself; it only
  converts *unexpected* exceptions (``StorageError`` included) into a generic
  500 response and logs them with the full traceback.
* `create_router`: a very small convenience wrapper around
  `fastapi.APIRouter` that enforces a consistent signature (`prefix`, `tags`).
* `get_speed_test_service`: dependency returning the service instance the
  application factory attached to ``app.state``.

Usage example (inside any router module):

```python
from netspeed.routers.common import create_router, safe_endpoint, Depends

router = create_router("/speed-tests", "speed-tests")

@router.get("/latest")
@safe_endpoint
def latest(service: SpeedTestService = Depends(get_speed_test_service)):
    ...
```
"""

import asyncio
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, Iterable, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from netspeed.repositories.core.exceptions import ValidationError

__all__ = [
    "create_router",
    "safe_endpoint",
    "get_speed_test_service",
    "get_database",
    "client_address",
    # Re-exported for convenience
    "APIRouter",
    "HTTPException",
    "Query",
    "Depends",
    "Request",
]

logger = logging.getLogger(__name__)

# Type helpers
TFunc = Callable[..., Union[Awaitable[Any], Any]]

_PASSTHROUGH = (HTTPException, ValidationError)


def _wrap_sync(func: TFunc) -> TFunc:  # type: ignore[override]
    """Return a sync wrapper with unified error handling."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any):  # type: ignore[override]
        try:
            return func(*args, **kwargs)
        except _PASSTHROUGH:
            # Let intentionally-raised errors bubble up unchanged.
            raise
        except Exception as exc:  # noqa: BLE001  (broad OK for generic handler)
            logger.exception("Unhandled error in %s: %s", func.__name__, exc)
            raise HTTPException(status_code=500, detail="Internal server error") from exc

    return wrapper  # type: ignore[return-value]


def _wrap_async(func: TFunc) -> TFunc:  # type: ignore[override]
    """Return an async wrapper with unified error handling."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any):  # type: ignore[override]
        try:
            return await func(*args, **kwargs)  # type: ignore[misc]
        except _PASSTHROUGH:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unhandled error in %s: %s", func.__name__, exc)
            raise HTTPException(status_code=500, detail="Internal server error") from exc

    return wrapper  # type: ignore[return-value]


def safe_endpoint(func: TFunc) -> TFunc:  # type: ignore[override]
    """Decorator that converts uncaught exceptions into HTTP 500 responses."""

    if asyncio.iscoroutinefunction(func):
        return _wrap_async(func)
    return _wrap_sync(func)


# ---------------------------------------------------------------------------
# Router factory helper
# ---------------------------------------------------------------------------

def create_router(prefix: str, tags: Union[str, Iterable[str]], **kwargs: Any) -> APIRouter:
    """Factory that standardises `APIRouter` instantiation.

    Parameters
    ----------
    prefix:
        The URL prefix for the router, e.g. "/speed-tests".
    tags:
        Either a single tag or an iterable of tags to group the endpoints in
        the OpenAPI schema / documentation UI.
    **kwargs:
        Any extra keyword arguments accepted by `fastapi.APIRouter`.
    """

    if isinstance(tags, str):
        tags = [tags]
    else:
        tags = list(tags)

    return APIRouter(prefix=prefix, tags=tags, **kwargs)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_speed_test_service(request: Request):
    """FastAPI dependency returning the app's ``SpeedTestService``."""
    return request.app.state.speed_test_service


def get_database(request: Request):
    return request.app.state.database


def client_address(request: Request) -> str:
    """Best guess at the caller's IP address.

    The first ``X-Forwarded-For`` hop wins when the app is configured to trust
    proxies; otherwise the socket peer is used.
    """
    settings = request.app.state.settings
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"
