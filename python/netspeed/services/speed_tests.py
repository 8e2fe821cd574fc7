"""Speed-test command/query service.

Composes record validation (``netspeed.schemas``) with the persistence gateway
(``netspeed.repositories.speed_tests``).  Each public call runs in its own
session scope, so a call either commits completely or not at all.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from netspeed.db import Database
from netspeed.repositories import SpeedTestRepository
from netspeed.repositories.core.exceptions import StorageError, ValidationError
from netspeed.schemas import (
    CreateSpeedTestInput,
    GetSpeedTestHistoryInput,
    SpeedTestConfig,
    SpeedTestResult,
    rate_download_speed,
)
from netspeed.services.core.utils import BaseService, timed
from netspeed.services.generator import RandomSampleProducer, SampleProducer

logger = logging.getLogger(__name__)

DECIMAL_FIELDS = ("download_speed", "upload_speed", "ping", "jitter", "test_duration")


class SpeedTestService(BaseService):
    """Run, save and query speed-test results."""

    def __init__(
        self,
        database: Database,
        producer: Optional[SampleProducer] = None,
        config: Optional[SpeedTestConfig] = None,
    ) -> None:
        self.database = database
        self.producer = producer or RandomSampleProducer()
        self._config = config or SpeedTestConfig()
        self.repository = SpeedTestRepository()

    # ---------------------------------------------------------------------
    # Commands
    # ---------------------------------------------------------------------

    @timed("speed_tests.run")
    def run(self, user_ip: str) -> SpeedTestResult:
        """Produce a sample for ``user_ip``, store it and return the stored result."""
        if not isinstance(user_ip, str) or not user_ip.strip():
            raise ValidationError.for_field("user_ip", "user_ip must be a non-empty string")

        sample = self.producer.produce()
        with self.database.session_scope() as session:
            row = self.repository.insert(session, sample.as_record(user_ip.strip()))
        result = self.to_domain(row)
        self._log_operation(
            "run",
            id=result.id,
            download=f"{result.download_speed:.2f}Mbps",
            rating=rate_download_speed(result.download_speed).value,
            server=result.server_location,
        )
        return result

    @timed("speed_tests.save")
    def save(self, data: Union[CreateSpeedTestInput, Mapping[str, Any]]) -> SpeedTestResult:
        """Validate a caller-supplied result and store it.

        Raises ``ValidationError`` naming the offending fields; storage is not
        touched in that case.
        """
        record = self.validate_input(data)
        with self.database.session_scope() as session:
            row = self.repository.insert(session, record.model_dump())
        result = self.to_domain(row)
        self._log_operation("save", id=result.id, server=result.server_location)
        return result

    # ---------------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------------

    def get_latest(self) -> Optional[SpeedTestResult]:
        """Return the most recent result, or ``None`` when nothing is stored."""
        with self.database.session_scope() as session:
            row = self.repository.select_latest(session)
        return self.to_domain(row) if row else None

    def get_history(
        self, data: Union[GetSpeedTestHistoryInput, Mapping[str, Any], None] = None
    ) -> List[SpeedTestResult]:
        """Return one page of results, newest first (defaults: limit 50, offset 0)."""
        query = self.validate_history_input(data)
        with self.database.session_scope() as session:
            rows = self.repository.select_page(session, query.limit, query.offset)
        self._log_debug("history", limit=query.limit, offset=query.offset, returned=len(rows))
        return [self.to_domain(row) for row in rows]

    def config(self) -> SpeedTestConfig:
        return self._config

    # ---------------------------------------------------------------------
    # Validation / conversion helpers
    # ---------------------------------------------------------------------

    @staticmethod
    def validate_input(data: Union[CreateSpeedTestInput, Mapping[str, Any]]) -> CreateSpeedTestInput:
        # Model instances are re-validated too; model_construct() skips checks.
        payload = data.model_dump() if isinstance(data, CreateSpeedTestInput) else data
        try:
            return CreateSpeedTestInput.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

    @staticmethod
    def validate_history_input(
        data: Union[GetSpeedTestHistoryInput, Mapping[str, Any], None]
    ) -> GetSpeedTestHistoryInput:
        if data is None:
            return GetSpeedTestHistoryInput()
        payload = data.model_dump() if isinstance(data, GetSpeedTestHistoryInput) else data
        if isinstance(payload, Mapping):
            # Absent and explicit None both mean "use the default"
            payload = {k: v for k, v in payload.items() if v is not None}
        try:
            return GetSpeedTestHistoryInput.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

    @classmethod
    def to_domain(cls, row: Mapping[str, Any]) -> SpeedTestResult:
        """Convert a stored row (decimal text) into a ``SpeedTestResult``."""
        values: Dict[str, Any] = dict(row)
        for name in DECIMAL_FIELDS:
            values[name] = SpeedTestRepository.parse_decimal(values[name])
        created_at = SpeedTestRepository.parse_datetime(values.get("created_at"))
        if created_at is None:
            raise StorageError(f"Row {values.get('id')} has an unreadable created_at: {values.get('created_at')!r}")
        values["created_at"] = created_at
        return SpeedTestResult.model_validate(values)
