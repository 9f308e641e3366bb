"""
JSON file storage for the ledger.

Persists the full ledger under a single fixed storage key. The stored shape
is the export document shape; whitespace is compact.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from bp_ledger.domain.reading import Reading
from bp_ledger.utils.exceptions import StorageError
from bp_ledger.utils.parameters import StorageConfig

logger = logging.getLogger(__name__)


class LedgerStorage(Protocol):
    """Durable key-value storage of the serialized ledger."""

    def load(self) -> list[Reading]: ...

    def save(self, readings: list[Reading]) -> None: ...


class JsonFileStorage:
    """
    Ledger storage backed by ``<data_dir>/<storage_key>.json``.

    A missing file means an empty ledger. A file that exists but does not
    hold a valid document is an error, so a corrupted ledger is never
    silently replaced by an empty one.
    """

    def __init__(self, config: StorageConfig) -> None:
        """
        Initialize JSON file storage.

        Args:
            config: Storage configuration.
        """
        self.config = config
        self.path = Path(config.data_dir) / f"{config.storage_key}.json"

    def load(self) -> list[Reading]:
        """
        Load the stored ledger.

        Returns:
            Stored readings in stored order, or an empty list.

        Raises:
            StorageError: If the stored ledger cannot be read or is invalid.
        """
        if not self.path.exists():
            logger.info(f"No stored ledger at {self.path}, starting empty")
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            raise StorageError(f"Failed to read stored ledger {self.path}: {e}") from e

        if data is None:
            return []

        if not isinstance(data, list):
            raise StorageError(f"Stored ledger {self.path} is not a list of readings")

        try:
            readings = [Reading.model_validate(item) for item in data]
        except PydanticValidationError as e:
            raise StorageError(f"Stored ledger {self.path} holds an invalid reading: {e}") from e

        logger.info(f"Loaded {len(readings)} readings from {self.path}")
        return readings

    def save(self, readings: list[Reading]) -> None:
        """
        Write the full ledger.

        The document goes to a temporary file in the same directory first and
        then replaces the stored file, so an interrupted write leaves the
        previous ledger intact.

        Args:
            readings: Readings in stored order.

        Raises:
            StorageError: If the file cannot be written.
        """
        payload = json.dumps([r.to_dict() for r in readings], ensure_ascii=False)
        temp_path: str | None = None

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(
                prefix=f".{self.path.stem}_", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path is not None and os.path.exists(temp_path):
                os.remove(temp_path)
            raise StorageError(f"Failed to write ledger to {self.path}: {e}") from e

        logger.debug(f"Saved {len(readings)} readings to {self.path}")
