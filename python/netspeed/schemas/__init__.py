"""Shared Pydantic models used by the service layer and the routers."""

from .speed_tests import (
    CreateSpeedTestInput,
    GetSpeedTestHistoryInput,
    HealthStatus,
    SpeedRating,
    SpeedTestConfig,
    SpeedTestResult,
    rate_download_speed,
)

__all__ = [
    "CreateSpeedTestInput",
    "GetSpeedTestHistoryInput",
    "HealthStatus",
    "SpeedRating",
    "SpeedTestConfig",
    "SpeedTestResult",
    "rate_download_speed",
]
