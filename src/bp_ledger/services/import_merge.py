"""
Import and merge service.

Parses an external JSON document, validates each candidate record, and
merges accepted readings into the ledger. The import is best-effort: invalid
candidates are dropped, and nothing is de-duplicated, so importing the same
document twice duplicates every reading.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel, Field

from bp_ledger.domain.reading import Reading, sort_newest_first
from bp_ledger.services.ledger import LedgerStore
from bp_ledger.services.validator import ReadingValidator
from bp_ledger.utils.exceptions import ParseError, ValidationError

logger = logging.getLogger(__name__)


class ImportResult(BaseModel):
    """Outcome of an import: accepted count and the resulting ledger."""

    imported: int
    readings: list[Reading] = Field(default_factory=list)


class ImportService:
    """Service for importing JSON documents into a ledger store."""

    def __init__(self, store: LedgerStore, validator: ReadingValidator) -> None:
        """
        Initialize import service.

        Args:
            store: Ledger store receiving the merged readings.
            validator: Validator applied to each candidate.
        """
        self.store = store
        self.validator = validator

    def _accept_candidates(self, candidates: list[Any]) -> list[Reading]:
        taken = self.store.ids()
        accepted: list[Reading] = []

        for idx, candidate in enumerate(candidates):
            try:
                reading = self.validator.validate(candidate, self.store.id_generator.new_id)
            except ValidationError as e:
                logger.debug(f"Dropped import candidate {idx}: {e}")
                continue

            if reading.id in taken:
                new_id = self.store.id_generator.new_id()
                logger.debug(f"Import candidate {idx} id {reading.id} in use, assigned {new_id}")
                reading = reading.model_copy(update={"id": new_id})

            taken.add(reading.id)
            accepted.append(reading)

        return accepted

    def import_document(self, raw_text: str) -> ImportResult:
        """
        Import a JSON document into the ledger.

        Args:
            raw_text: Document text, expected to be a JSON array of readings.

        Returns:
            Number of accepted readings and the ledger after the merge.

        Raises:
            ParseError: If the text is not valid JSON. The ledger is untouched.
        """
        try:
            document = json.loads(raw_text)
        # ValueError covers JSONDecodeError and the int digit limit
        except (ValueError, RecursionError, TypeError) as e:
            raise ParseError(f"Import document is not valid JSON: {e}") from e

        if not isinstance(document, list):
            logger.warning(
                f"Import document is a {type(document).__name__}, not a list; nothing imported"
            )
            return ImportResult(imported=0, readings=self.store.list())

        accepted = self._accept_candidates(document)

        logger.info(f"Accepted {len(accepted)} of {len(document)} import candidates")

        if not accepted:
            return ImportResult(imported=0, readings=self.store.list())

        merged = sort_newest_first(accepted + self.store.list())
        self.store.replace_all(merged)

        return ImportResult(imported=len(accepted), readings=self.store.list())
