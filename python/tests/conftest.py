import random
from datetime import datetime, timedelta, timezone

import pytest

import netspeed.repositories.speed_tests as speed_tests_repo
from netspeed.config import build_settings
from netspeed.db import Database
from netspeed.db.models import Base
from netspeed.services import RandomSampleProducer, SpeedTestService


class FakeClock:
    """Stands in for ``current_time_utc``; advances ``step`` per call."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        self.now = self.now + self.step
        return self.now


SAMPLE_INPUT = {
    "download_speed": 100.5,
    "upload_speed": 50.25,
    "ping": 15.3,
    "jitter": 2.1,
    "server_location": "New York, NY",
    "user_ip": "192.168.1.100",
    "test_duration": 10.5,
}


@pytest.fixture
def sample_input():
    return dict(SAMPLE_INPUT)


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'results.db'}")
    Base.metadata.create_all(db.engine)
    yield db
    db.dispose()


@pytest.fixture
def producer():
    return RandomSampleProducer(rng=random.Random(1234))


@pytest.fixture
def service(database, producer):
    return SpeedTestService(database, producer=producer)


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr(speed_tests_repo, "current_time_utc", fake)
    return fake


@pytest.fixture
def app_settings(tmp_path):
    app_dir = tmp_path / "app"
    return build_settings(app_dir=app_dir, db_path=app_dir / "api.db", log_level="DEBUG")
