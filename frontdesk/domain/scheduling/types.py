"""Plain value types passed between the scheduling components.

The engine never touches ORM rows directly; repositories convert rows into
these so the algorithms can be exercised with in-memory data.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Optional

from ...models import STATUS_SCHEDULED
from ...shared.validators import format_datetime


@dataclass(frozen=True)
class ScheduleEntry:
    """One working window for a provider in an operatory on a calendar date"""

    date: date
    provider_id: int
    operatory_id: int
    start_time: time
    end_time: time
    active: bool = True
    id: Optional[int] = None
    provider_name: Optional[str] = None

    @property
    def window_start(self) -> datetime:
        return datetime.combine(self.date, self.start_time)

    @property
    def window_end(self) -> datetime:
        return datetime.combine(self.date, self.end_time)

    @property
    def is_valid(self) -> bool:
        return self.start_time < self.end_time


@dataclass(frozen=True)
class Booking:
    """An appointment as seen by the occupancy index and conflict check"""

    provider_id: int
    operatory_id: int
    start: datetime
    duration_minutes: int
    status: str = STATUS_SCHEDULED
    id: Optional[int] = None

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)

    @property
    def occupies_resources(self) -> bool:
        return self.status == STATUS_SCHEDULED


@dataclass(frozen=True, order=True)
class Slot:
    """A computed, bookable window. Never persisted."""

    start: datetime
    provider_id: int
    operatory_id: int
    length_minutes: int = 30
    provider_name: Optional[str] = field(default=None, compare=False)

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.length_minutes)

    def to_dict(self) -> dict:
        """Function-surface shape; field casing is matched by external callers"""
        return {
            "DateTimeStart": format_datetime(self.start),
            "DateTimeEnd": format_datetime(self.end),
            "ProvNum": self.provider_id,
            "OpNum": self.operatory_id,
            "LengthMinutes": self.length_minutes,
            "ProviderName": self.provider_name or f"Dr. Provider {self.provider_id}",
        }
