"""
Reading validation.

Accepts or rejects candidate field values and normalizes them to the
canonical reading shape. No medical ranges are enforced; out-of-range values
are left for the status classifier to flag.
"""

import logging
import math
import re
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from bp_ledger.domain.reading import Reading, ReadingValues
from bp_ledger.utils.exceptions import ValidationError
from bp_ledger.utils.parameters import ProcessingConfig
from bp_ledger.utils.timezone_utils import Clock, local_to_utc, parse_iso_utc, utc_now

logger = logging.getLogger(__name__)

MEASUREMENT_FIELDS = ("sys", "dia", "puls")
DATE_LOCAL_KEYS = ("date_local", "dateLocal")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_measurement(value: Any) -> int | None:
    """
    Coerce a measurement value to a non-zero integer.

    Numeric strings are read up to their first non-digit ("12.7" -> 12).
    Zero counts as not provided.

    Args:
        value: Raw field value.

    Returns:
        Integer value, or None if the value is missing, unparseable or zero.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        result = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return None
        try:
            result = int(match.group(1))
        except ValueError:
            # more digits than the int conversion limit allows
            return None
    else:
        return None

    return result or None


class ReadingValidator:
    """
    Validator for interactive form submissions and import candidates.

    The clock supplies the default date of import candidates that carry none.
    """

    def __init__(self, config: ProcessingConfig, clock: Clock = utc_now) -> None:
        """
        Initialize reading validator.

        Args:
            config: Processing configuration (for the local timezone).
            clock: Source of the current instant.
        """
        self.config = config
        self.clock = clock

    def _coerce_measurements(
        self, source: Mapping[str, Any], invalid: list[str]
    ) -> dict[str, int]:
        values: dict[str, int] = {}
        for field in MEASUREMENT_FIELDS:
            coerced = coerce_measurement(source.get(field))
            if coerced is None:
                invalid.append(field)
            else:
                values[field] = coerced
        return values

    def _parse_local_date(self, fields: Mapping[str, Any]) -> datetime | None:
        raw = next((fields[k] for k in DATE_LOCAL_KEYS if k in fields), None)

        if isinstance(raw, datetime):
            return local_to_utc(raw, self.config.timezone)

        if not isinstance(raw, str) or not raw.strip():
            return None

        try:
            return local_to_utc(raw.strip(), self.config.timezone)
        except (ValueError, OverflowError):
            return None

    def validate_form(self, fields: Mapping[str, Any]) -> ReadingValues:
        """
        Validate a create/update submission.

        Args:
            fields: Mapping with ``sys``, ``dia``, ``puls`` and ``date_local``
                (local wall-clock time in the configured timezone).

        Returns:
            Validated values with the date converted to UTC.

        Raises:
            ValidationError: If any field is missing or cannot be parsed.
        """
        invalid: list[str] = []
        values = self._coerce_measurements(fields, invalid)

        date = self._parse_local_date(fields)
        if date is None:
            invalid.append("date_local")

        if invalid:
            raise ValidationError(
                f"Invalid or missing fields: {', '.join(invalid)}", fields=invalid
            )

        return ReadingValues(date=date, **values)

    def validate(self, candidate: Any, new_id: Callable[[], str]) -> Reading:
        """
        Validate an import candidate and normalize it to a reading.

        Args:
            candidate: One element of an import document.
            new_id: Factory for an ID when the candidate carries none.

        Returns:
            Reading with the candidate's own ID and date where present.

        Raises:
            ValidationError: If the candidate is not an object, a measurement
                is missing or zero, or its date cannot be parsed.
        """
        if not isinstance(candidate, Mapping):
            raise ValidationError(f"Candidate is not an object: {type(candidate).__name__}")

        invalid: list[str] = []
        values = self._coerce_measurements(candidate, invalid)

        raw_date = candidate.get("date")
        date: datetime | None = None
        if raw_date is None or raw_date == "":
            date = self.clock()
        else:
            try:
                date = parse_iso_utc(raw_date)
            except (ValueError, OverflowError):
                invalid.append("date")

        if invalid:
            raise ValidationError(
                f"Invalid or missing fields: {', '.join(invalid)}", fields=invalid
            )

        raw_id = candidate.get("id")
        reading_id = str(raw_id) if raw_id else new_id()

        return Reading(id=reading_id, date=date, **values)
