"""
Overlap primitives shared by slot generation and conflict detection.

Both components answer the same question ("does [start, end) collide with
an existing booking?"), so they share the half-open interval test and the
bucket arithmetic below.
"""

from datetime import datetime, timedelta
from typing import Iterator

BUCKET_KEY_FORMAT = "%Y-%m-%d %H:%M:00"


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open overlap: touching intervals ([9:00, 9:30) and [9:30, 10:00)) do not overlap"""
    return start_a < end_b and end_a > start_b


def bucket_floor(value: datetime, bucket_minutes: int) -> datetime:
    """Start of the bucket containing value"""
    minute = value.minute - (value.minute % bucket_minutes)
    return value.replace(minute=minute, second=0, microsecond=0)


def bucket_key(value: datetime, bucket_minutes: int = 5) -> str:
    return bucket_floor(value, bucket_minutes).strftime(BUCKET_KEY_FORMAT)


def iter_bucket_keys(start: datetime, end: datetime, bucket_minutes: int = 5) -> Iterator[str]:
    """Keys of every bucket touched by [start, end)"""
    current = bucket_floor(start, bucket_minutes)
    step = timedelta(minutes=bucket_minutes)
    while current < end:
        yield current.strftime(BUCKET_KEY_FORMAT)
        current += step
