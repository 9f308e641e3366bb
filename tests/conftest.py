"""
Shared pytest fixtures for ledger tests.

Fixture hierarchy:
    clock -> validator -> storage -> store -> import_service
"""

from datetime import datetime, timezone

import pytest

from bp_ledger.domain.reading import Reading
from bp_ledger.services.import_merge import ImportService
from bp_ledger.services.ledger import LedgerStore
from bp_ledger.services.validator import ReadingValidator
from bp_ledger.utils.exceptions import StorageError
from bp_ledger.utils.hashing import ReadingIdGenerator
from bp_ledger.utils.parameters import ProcessingConfig, RecordIDConfig

FIXED_NOW = datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


class RecordingStorage:
    """In-memory storage that records every save."""

    def __init__(self, readings: list[Reading] | None = None) -> None:
        self.readings = list(readings or [])
        self.saves: list[list[Reading]] = []

    def load(self) -> list[Reading]:
        return list(self.readings)

    def save(self, readings: list[Reading]) -> None:
        self.saves.append(list(readings))
        self.readings = list(readings)


class FailingStorage(RecordingStorage):
    """Storage whose writes always fail."""

    def save(self, readings: list[Reading]) -> None:
        raise StorageError("quota exceeded")


@pytest.fixture
def clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def processing_config() -> ProcessingConfig:
    return ProcessingConfig(timezone="Europe/Berlin")


@pytest.fixture
def validator(processing_config, clock) -> ReadingValidator:
    return ReadingValidator(processing_config, clock)


@pytest.fixture
def id_generator(clock) -> ReadingIdGenerator:
    return ReadingIdGenerator(RecordIDConfig(algorithm="sha256", length=16), clock)


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def store(storage, validator, id_generator) -> LedgerStore:
    return LedgerStore.open(storage, validator, id_generator)


@pytest.fixture
def import_service(store, validator) -> ImportService:
    return ImportService(store, validator)
