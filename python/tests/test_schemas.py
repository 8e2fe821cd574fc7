import math

import pytest
from pydantic import ValidationError as PydanticValidationError

from netspeed.schemas import (
    CreateSpeedTestInput,
    GetSpeedTestHistoryInput,
    SpeedRating,
    SpeedTestConfig,
    rate_download_speed,
)


def test_create_input_accepts_valid_values(sample_input):
    record = CreateSpeedTestInput.model_validate(sample_input)
    assert record.download_speed == 100.5
    assert record.server_location == "New York, NY"


def test_create_input_allows_zero_ping_and_jitter(sample_input):
    record = CreateSpeedTestInput.model_validate({**sample_input, "ping": 0, "jitter": 0})
    assert record.ping == 0
    assert record.jitter == 0


@pytest.mark.parametrize(
    "field, value",
    [
        ("download_speed", 0),
        ("download_speed", -1.5),
        ("upload_speed", 0),
        ("test_duration", 0),
        ("ping", -0.01),
        ("jitter", -3),
        ("download_speed", math.nan),
        ("upload_speed", math.inf),
        ("server_location", ""),
        ("user_ip", "   "),
        ("download_speed", 0.004),
        ("test_duration", 0.001),
    ],
)
def test_create_input_rejects_constraint_violations(sample_input, field, value):
    with pytest.raises(PydanticValidationError) as excinfo:
        CreateSpeedTestInput.model_validate({**sample_input, field: value})
    assert [err["loc"] for err in excinfo.value.errors()] == [(field,)]


def test_create_input_requires_every_field(sample_input):
    sample_input.pop("user_ip")
    with pytest.raises(PydanticValidationError):
        CreateSpeedTestInput.model_validate(sample_input)


def test_history_input_defaults():
    query = GetSpeedTestHistoryInput()
    assert (query.limit, query.offset) == (50, 0)


@pytest.mark.parametrize(
    "payload",
    [{"limit": 0}, {"limit": -5}, {"offset": -1}, {"limit": 2.5}, {"limit": 2 ** 63}, {"offset": 2 ** 63}],
)
def test_history_input_rejects_bad_paging(payload):
    with pytest.raises(PydanticValidationError):
        GetSpeedTestHistoryInput.model_validate(payload)


def test_speed_test_config_defaults():
    config = SpeedTestConfig()
    assert config.test_file_size_mb == 10
    assert config.test_duration_seconds == 10
    assert config.concurrent_connections == 4


@pytest.mark.parametrize(
    "mbps, rating",
    [
        (150.0, SpeedRating.EXCELLENT),
        (100.0, SpeedRating.EXCELLENT),
        (99.99, SpeedRating.GOOD),
        (50.0, SpeedRating.GOOD),
        (25.0, SpeedRating.FAIR),
        (24.99, SpeedRating.POOR),
    ],
)
def test_rate_download_speed_thresholds(mbps, rating):
    assert rate_download_speed(mbps) is rating


def test_create_input_accepts_smallest_storable_speed(sample_input):
    record = CreateSpeedTestInput.model_validate({**sample_input, "upload_speed": 0.005})
    assert record.upload_speed == 0.005


def test_history_input_accepts_largest_page_values():
    query = GetSpeedTestHistoryInput.model_validate({"limit": 2 ** 63 - 1, "offset": 2 ** 63 - 1})
    assert query.limit == 2 ** 63 - 1
