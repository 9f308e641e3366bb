"""
Reading domain models and canonical document shape.

A reading is one blood pressure and pulse measurement. Its document form is
an object with the keys ``id``, ``sys``, ``dia``, ``puls`` and ``date`` in
that order, where ``date`` is an ISO-8601 UTC string.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bp_ledger.domain.status import StatusTier, classify
from bp_ledger.utils.timezone_utils import format_iso_utc, parse_iso_utc, truncate_to_millis


def normalize_timestamp(value: datetime) -> datetime:
    """Convert to UTC and drop precision the document form cannot carry."""
    return truncate_to_millis(parse_iso_utc(value))


class ReadingValues(BaseModel):
    """Validated measurement values without an identity."""

    sys: int = Field(description="Systolic pressure (mmHg)")
    dia: int = Field(description="Diastolic pressure (mmHg)")
    puls: int = Field(description="Pulse (beats per minute)")
    date: datetime = Field(description="Measurement timestamp (UTC)")

    model_config = ConfigDict(frozen=True)

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return normalize_timestamp(value)


class Reading(ReadingValues):
    """A measurement stored in the ledger."""

    id: str = Field(min_length=1, description="Opaque unique reading identifier")

    @classmethod
    def from_values(cls, reading_id: str, values: ReadingValues) -> "Reading":
        return cls(id=reading_id, **values.model_dump())

    @property
    def status(self) -> StatusTier:
        return classify(self.sys, self.dia)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert reading to its document representation.

        Returns:
            Dictionary with keys in document order and ``date`` as ISO-8601 UTC.
        """
        return {
            "id": self.id,
            "sys": self.sys,
            "dia": self.dia,
            "puls": self.puls,
            "date": format_iso_utc(self.date),
        }


def sort_newest_first(readings: list[Reading]) -> list[Reading]:
    """Return readings sorted descending by date; ties keep their order."""
    return sorted(readings, key=lambda r: r.date, reverse=True)
