"""Persistence gateways over the results database."""

from .speed_tests import SpeedTestRepository

__all__ = ["SpeedTestRepository"]
