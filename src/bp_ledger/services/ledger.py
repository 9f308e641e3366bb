"""
Ledger store for blood pressure readings.

Owns the ordered collection of readings, enforces ID uniqueness and mirrors
every mutation to durable storage.
"""

import logging
from collections.abc import Mapping
from typing import Any

from bp_ledger.domain.reading import Reading, sort_newest_first
from bp_ledger.infrastructure.storage.json_storage import LedgerStorage
from bp_ledger.services.validator import ReadingValidator
from bp_ledger.utils.exceptions import NotFoundError, StorageError
from bp_ledger.utils.hashing import ReadingIdGenerator

logger = logging.getLogger(__name__)


class LedgerStore:
    """
    In-memory ledger mirrored to durable storage.

    Stored order is insertion order (new readings at the head); ``list()``
    always returns readings newest first. Each mutating call performs exactly
    one full-ledger write. Write failures are logged and kept in
    ``last_persist_error``; the in-memory ledger stays authoritative.
    """

    def __init__(
        self,
        storage: LedgerStorage,
        validator: ReadingValidator,
        id_generator: ReadingIdGenerator,
        readings: list[Reading] | None = None,
    ) -> None:
        """
        Initialize ledger store.

        Args:
            storage: Persistence adapter.
            validator: Validator for create/update submissions.
            id_generator: Source of fresh reading IDs.
            readings: Initial readings in stored order.
        """
        self.storage = storage
        self.validator = validator
        self.id_generator = id_generator
        self.last_persist_error: StorageError | None = None
        self._readings = self._with_unique_ids(readings or [])

    @classmethod
    def open(
        cls,
        storage: LedgerStorage,
        validator: ReadingValidator,
        id_generator: ReadingIdGenerator,
    ) -> "LedgerStore":
        """Create a store holding whatever the storage currently has."""
        return cls(storage, validator, id_generator, storage.load())

    def _with_unique_ids(self, readings: list[Reading]) -> list[Reading]:
        unique: list[Reading] = []
        seen: set[str] = set()
        self.id_generator.reserve(r.id for r in readings)

        for reading in readings:
            if reading.id in seen:
                new_id = self.id_generator.new_id()
                logger.warning(f"Duplicate stored id {reading.id}, reassigned to {new_id}")
                reading = reading.model_copy(update={"id": new_id})
            seen.add(reading.id)
            unique.append(reading)

        self.id_generator.reserve(seen)
        return unique

    def _persist(self) -> None:
        try:
            self.storage.save(list(self._readings))
            self.last_persist_error = None
        except StorageError as e:
            logger.error(f"Failed to persist ledger: {e}")
            self.last_persist_error = e

    def _index_of(self, reading_id: str) -> int | None:
        for idx, reading in enumerate(self._readings):
            if reading.id == reading_id:
                return idx
        return None

    def __len__(self) -> int:
        return len(self._readings)

    def __contains__(self, reading_id: object) -> bool:
        return any(r.id == reading_id for r in self._readings)

    def ids(self) -> set[str]:
        return {r.id for r in self._readings}

    def get(self, reading_id: str) -> Reading:
        """
        Look up a reading by ID.

        Raises:
            NotFoundError: If no reading has this ID.
        """
        idx = self._index_of(reading_id)
        if idx is None:
            raise NotFoundError(reading_id)
        return self._readings[idx]

    def create(self, fields: Mapping[str, Any]) -> Reading:
        """
        Create a reading from a form submission.

        Args:
            fields: ``sys``, ``dia``, ``puls`` and ``date_local``.

        Returns:
            The created reading.

        Raises:
            ValidationError: If any field is missing or unparseable.
        """
        values = self.validator.validate_form(fields)
        reading = Reading.from_values(self.id_generator.new_id(), values)

        self._readings.insert(0, reading)
        self._persist()

        logger.info(f"Created reading {reading.id}")
        return reading

    def update(self, reading_id: str, fields: Mapping[str, Any]) -> Reading:
        """
        Replace all value fields of an existing reading.

        Args:
            reading_id: ID of the reading to replace.
            fields: ``sys``, ``dia``, ``puls`` and ``date_local``.

        Returns:
            The updated reading.

        Raises:
            ValidationError: If any field is missing or unparseable.
            NotFoundError: If no reading has this ID.
        """
        values = self.validator.validate_form(fields)

        idx = self._index_of(reading_id)
        if idx is None:
            raise NotFoundError(reading_id)

        reading = Reading.from_values(reading_id, values)
        self._readings[idx] = reading
        self._persist()

        logger.info(f"Updated reading {reading_id}")
        return reading

    def delete(self, reading_id: str) -> None:
        """Remove a reading. Unknown IDs are ignored."""
        idx = self._index_of(reading_id)
        if idx is not None:
            del self._readings[idx]
            logger.info(f"Deleted reading {reading_id}")
        else:
            logger.debug(f"Delete of unknown reading {reading_id} ignored")

        self._persist()

    def replace_all(self, readings: list[Reading]) -> None:
        """
        Install a new ledger, e.g. the result of an import merge.

        Args:
            readings: New readings in stored order; IDs must be unique.

        Raises:
            ValueError: If the readings contain duplicate IDs.
        """
        ids = [r.id for r in readings]
        if len(ids) != len(set(ids)):
            raise ValueError("Ledger readings must have unique ids")

        self._readings = list(readings)
        self.id_generator.reserve(ids)
        self._persist()

    # Defined last: the method name shadows the builtin in the class body.
    def list(self) -> list[Reading]:
        """Return all readings, newest first."""
        return sort_newest_first(self._readings)
