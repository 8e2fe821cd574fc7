import time
from datetime import datetime, timezone

from netspeed.routers.common import Depends, create_router, get_database, safe_endpoint
from netspeed.schemas import HealthStatus

router = create_router("/health", "Health")

_app_start_time = time.time()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/", response_model=HealthStatus)
@router.get("", response_model=HealthStatus)
@safe_endpoint
async def health_check():
    return {
        "status": "ok",
        "timestamp": _now_iso(),
        "service": "netspeed",
        "uptime_seconds": round(time.time() - _app_start_time, 3),
    }


@router.get("/database")
@safe_endpoint
def database_health_check(database=Depends(get_database)):
    connection_test = database.ping()
    return {
        "status": "ok" if connection_test["success"] else "error",
        "database_url": database.url,
        "connection_test": connection_test,
        "timestamp": _now_iso(),
    }
