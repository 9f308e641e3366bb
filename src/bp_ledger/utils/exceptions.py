"""Custom exceptions for the blood pressure ledger."""


class BloodPressureLedgerError(Exception):
    """Base exception for all blood pressure ledger errors."""

    pass


class ConfigurationError(BloodPressureLedgerError):
    """Raised when there is a configuration error."""

    pass


class StorageError(BloodPressureLedgerError):
    """Raised when the persisted ledger cannot be read or written."""

    pass


class ParseError(BloodPressureLedgerError):
    """Raised when an import document is not valid JSON."""

    pass


class ValidationError(BloodPressureLedgerError):
    """Raised when reading values are missing or cannot be parsed."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class NotFoundError(BloodPressureLedgerError):
    """Raised when a reading id is not present in the ledger."""

    def __init__(self, reading_id: str) -> None:
        super().__init__(f"Reading not found: {reading_id}")
        self.reading_id = reading_id


class OutputError(BloodPressureLedgerError):
    """Raised when an export or protocol file cannot be written."""

    pass
