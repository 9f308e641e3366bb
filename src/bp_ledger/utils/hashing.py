"""
Hashing and reading ID generation utilities.

IDs are opaque hex strings derived from the creation instant and a random
nonce. A generator never hands out the same ID twice.
"""

import hashlib
import secrets
from collections.abc import Iterable
from datetime import datetime

from bp_ledger.utils.parameters import RecordIDConfig
from bp_ledger.utils.timezone_utils import Clock, utc_now


def hash_reading_id(created_at: datetime, nonce: str, config: RecordIDConfig) -> str:
    """
    Hash a creation instant and nonce into a reading ID.

    Args:
        created_at: Creation timestamp.
        nonce: Random nonce distinguishing IDs created in the same instant.
        config: Reading ID generation configuration.

    Returns:
        Hex string truncated to ``config.length`` characters.
    """
    hash_string = f"{created_at.isoformat()}|{nonce}"

    hash_func = hashlib.new(config.algorithm)
    hash_func.update(hash_string.encode("utf-8"))

    return hash_func.hexdigest()[: config.length]


class ReadingIdGenerator:
    """
    Session-scoped generator of unique reading IDs.

    Remembers every ID it has issued or been told about, so an ID of a
    deleted reading is never handed out again.
    """

    def __init__(self, config: RecordIDConfig | None = None, clock: Clock = utc_now) -> None:
        self.config = config or RecordIDConfig()
        self.clock = clock
        self._seen: set[str] = set()

    def reserve(self, ids: Iterable[str]) -> None:
        """Mark existing IDs as taken."""
        self._seen.update(ids)

    def is_taken(self, reading_id: str) -> bool:
        return reading_id in self._seen

    def new_id(self) -> str:
        """Return a fresh ID that has not been issued or reserved before."""
        while True:
            candidate = hash_reading_id(self.clock(), secrets.token_hex(8), self.config)
            if candidate not in self._seen:
                self._seen.add(candidate)
                return candidate
