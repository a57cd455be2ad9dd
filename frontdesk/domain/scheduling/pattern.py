"""Compact duration encoding used by appointment records.

"/XXXXXX/" is 30 minutes: one X per 5-minute block between two delimiters.
"""

from typing import Optional

PATTERN_DELIMITER = "/"
PATTERN_MARKER = "X"
MINUTES_PER_BLOCK = 5


def encode_pattern(duration_minutes: int) -> str:
    """Encode a duration; partial blocks are dropped"""
    if duration_minutes is None or duration_minutes < 0:
        raise ValueError("Duration must be a non-negative number of minutes")
    blocks = int(duration_minutes) // MINUTES_PER_BLOCK
    return PATTERN_DELIMITER + PATTERN_MARKER * blocks + PATTERN_DELIMITER


def decode_pattern(pattern: Optional[str]) -> int:
    """Count markers and convert to minutes; anything that isn't a marker is ignored"""
    if not pattern:
        return 0
    return str(pattern).count(PATTERN_MARKER) * MINUTES_PER_BLOCK
