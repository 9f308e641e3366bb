"""Unit tests for the status classifier."""

from bp_ledger.domain.status import StatusTier, classify


def test_classify_boundaries_are_exclusive() -> None:
    """Test that 120/80 is still normal."""
    result = classify(120, 80)
    if result != StatusTier.NORMAL:
        raise AssertionError(f"Expected NORMAL for 120/80, got {result}")

    result = classify(140, 90)
    if result != StatusTier.ELEVATED:
        raise AssertionError(f"Expected ELEVATED for 140/90, got {result}")


def test_classify_high() -> None:
    """Test high tier from either systolic or diastolic value."""
    for sys, dia in [(141, 80), (110, 91), (200, 120)]:
        result = classify(sys, dia)
        if result != StatusTier.HIGH:
            raise AssertionError(f"Expected HIGH for {sys}/{dia}, got {result}")


def test_classify_elevated() -> None:
    """Test elevated tier from either systolic or diastolic value."""
    for sys, dia in [(125, 80), (115, 85), (121, 81)]:
        result = classify(sys, dia)
        if result != StatusTier.ELEVATED:
            raise AssertionError(f"Expected ELEVATED for {sys}/{dia}, got {result}")


def test_classify_is_total() -> None:
    """Test that odd inputs still map to a tier."""
    if classify(0, 0) != StatusTier.NORMAL:
        raise AssertionError("Expected NORMAL for 0/0")
    if classify(-5, -5) != StatusTier.NORMAL:
        raise AssertionError("Expected NORMAL for negative values")
    if classify(10_000, 0) != StatusTier.HIGH:
        raise AssertionError("Expected HIGH for very large systolic value")
