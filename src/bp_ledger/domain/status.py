"""Blood pressure status tiers."""

from enum import Enum


class StatusTier(str, Enum):
    """Severity tier of a systolic/diastolic pair."""

    NORMAL = "normal"
    ELEVATED = "elevated"
    HIGH = "high"


HIGH_SYS_THRESHOLD = 140
HIGH_DIA_THRESHOLD = 90
ELEVATED_SYS_THRESHOLD = 120
ELEVATED_DIA_THRESHOLD = 80


def classify(sys: int, dia: int) -> StatusTier:
    """
    Map a systolic/diastolic pair to a status tier.

    Thresholds are exclusive: 120/80 is still normal, 141/80 is high.
    """
    if sys > HIGH_SYS_THRESHOLD or dia > HIGH_DIA_THRESHOLD:
        return StatusTier.HIGH
    if sys > ELEVATED_SYS_THRESHOLD or dia > ELEVATED_DIA_THRESHOLD:
        return StatusTier.ELEVATED
    return StatusTier.NORMAL
