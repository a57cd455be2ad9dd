"""Booked index - in-memory occupancy map built per request"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Iterable

from .overlap import iter_bucket_keys
from .types import Booking


class BookedIndex:
    """
    Occupied bucket keys per (provider, operatory).

    Keys are local wall-clock strings ("2025-12-16 09:30:00") at bucket
    granularity. An appointment marks the bucket holding its start plus every
    bucket its duration reaches into. Only bookings that still occupy their
    resources (status Scheduled) are indexed.
    """

    def __init__(self, bucket_minutes: int = 5):
        self.bucket_minutes = bucket_minutes
        self._by_pair: dict[tuple[int, int], set[str]] = defaultdict(set)
        self._by_provider: dict[int, set[str]] = defaultdict(set)
        self._by_operatory: dict[int, set[str]] = defaultdict(set)

    @classmethod
    def build(cls, bookings: Iterable[Booking], bucket_minutes: int = 5) -> "BookedIndex":
        index = cls(bucket_minutes)
        for booking in bookings:
            index.add(booking)
        return index

    def add(self, booking: Booking) -> None:
        if not booking.occupies_resources:
            return
        for key in iter_bucket_keys(booking.start, booking.end, self.bucket_minutes):
            self._by_pair[(booking.provider_id, booking.operatory_id)].add(key)
            self._by_provider[booking.provider_id].add(key)
            self._by_operatory[booking.operatory_id].add(key)

    def keys_for(self, provider_id: int, operatory_id: int) -> set[str]:
        return set(self._by_pair.get((provider_id, operatory_id), ()))

    def taken_for(self, provider_id: int, operatory_id: int, match_either: bool = False) -> set[str]:
        """
        Bucket keys that block a slot for this provider/operatory.

        match_either also counts the provider's bookings in other rooms and
        other providers' bookings in this room.
        """
        if match_either:
            return self._by_provider.get(provider_id, set()) | self._by_operatory.get(operatory_id, set())
        return self._by_pair.get((provider_id, operatory_id), set())

    def covers(self, taken: set[str], start: datetime, length_minutes: int) -> bool:
        """True when any bucket of [start, start+length) is in taken"""
        if not taken:
            return False
        end = start + timedelta(minutes=length_minutes)
        return any(key in taken for key in iter_bucket_keys(start, end, self.bucket_minutes))

    def is_booked(
        self,
        provider_id: int,
        operatory_id: int,
        start: datetime,
        length_minutes: int,
        match_either: bool = False,
    ) -> bool:
        return self.covers(self.taken_for(provider_id, operatory_id, match_either), start, length_minutes)

    def summary(self) -> list[str]:
        """"provider-operatory@key" strings for logging"""
        return [
            f"{provider_id}-{operatory_id}@{key}"
            for (provider_id, operatory_id), keys in sorted(self._by_pair.items())
            for key in sorted(keys)
        ]

    def __len__(self) -> int:
        return sum(len(keys) for keys in self._by_pair.values())
