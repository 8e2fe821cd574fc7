"""Sample producers backing ``SpeedTestService.run``.

``RandomSampleProducer`` stands in for a real throughput probe.  Anything that
implements ``SampleProducer`` can replace it without touching the service.
"""

from __future__ import annotations

import math
import random
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Protocol, Sequence, Tuple

SERVER_LOCATIONS: Tuple[str, ...] = ("New York", "Los Angeles", "Chicago", "Dallas", "Miami")

# [low, high) per metric
DOWNLOAD_RANGE = (50.0, 150.0)   # Mbps
UPLOAD_RANGE = (20.0, 70.0)      # Mbps
PING_RANGE = (10.0, 60.0)        # ms
JITTER_RANGE = (1.0, 11.0)       # ms
DURATION_RANGE = (8.0, 13.0)     # seconds


@dataclass(frozen=True)
class RawSample:
    download_speed: float
    upload_speed: float
    ping: float
    jitter: float
    server_location: str
    test_duration: float

    def as_record(self, user_ip: str) -> Dict[str, Any]:
        return {**asdict(self), "user_ip": user_ip}


class SampleProducer(Protocol):
    def produce(self) -> RawSample: ...


class RandomSampleProducer:
    def __init__(self, rng: Optional[random.Random] = None, locations: Sequence[str] = SERVER_LOCATIONS) -> None:
        if not locations:
            raise ValueError("locations must not be empty")
        self._rng = rng or random.Random()
        self._locations = tuple(locations)

    def _uniform(self, bounds: Tuple[float, float]) -> float:
        low, high = bounds
        # random() is in [0, 1); truncating to hundredths keeps the upper bound
        # exclusive after the two-decimal storage rounding
        value = low + self._rng.random() * (high - low)
        truncated = math.floor(value * 100) / 100
        return min(max(low, truncated), round(high - 0.01, 2))

    def produce(self) -> RawSample:
        return RawSample(
            download_speed=self._uniform(DOWNLOAD_RANGE),
            upload_speed=self._uniform(UPLOAD_RANGE),
            ping=self._uniform(PING_RANGE),
            jitter=self._uniform(JITTER_RANGE),
            server_location=self._rng.choice(self._locations),
            test_duration=self._uniform(DURATION_RANGE),
        )
