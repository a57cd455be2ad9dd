"""
Slot Generation Service

Generates bookable slots for a date range from:
- Active provider schedules (with the search-all fallback)
- Scheduled appointments already on the books
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ...config import SchedulingConfig
from ...exceptions import ValidationError
from ..resources.service import ResourceService
from .booked_index import BookedIndex
from .catalog import ScheduleCatalog
from .repository import BookedTimeRepository, day_bounds
from .types import Booking, ScheduleEntry, Slot

logger = logging.getLogger(__name__)


def iter_days(date_start: date, date_end: date) -> Iterable[date]:
    current = date_start
    while current <= date_end:
        yield current
        current += timedelta(days=1)


def slots_for_entry(
    entry: ScheduleEntry,
    index: BookedIndex,
    length_minutes: int,
    step_minutes: int = 30,
    match_either: bool = False,
) -> list[Slot]:
    """
    Walk one schedule window on a fixed step grid.

    The step does not follow length_minutes: a 45-minute request can start on
    any half-hour. A slot is emitted only if it ends inside the window and
    none of its buckets is booked.
    """
    slots = []
    window_end = entry.window_end
    length = timedelta(minutes=length_minutes)
    step = timedelta(minutes=step_minutes)
    taken = index.taken_for(entry.provider_id, entry.operatory_id, match_either)

    current = entry.window_start
    while current < window_end:
        if current + length <= window_end:
            if not index.covers(taken, current, length_minutes):
                slots.append(
                    Slot(
                        start=current,
                        provider_id=entry.provider_id,
                        operatory_id=entry.operatory_id,
                        length_minutes=length_minutes,
                        provider_name=entry.provider_name,
                    )
                )
            else:
                logger.debug(
                    f"Slot {current} is booked for Provider {entry.provider_id}, "
                    f"Operatory {entry.operatory_id} - excluding"
                )
        current += step
    return slots


def generate_slots(
    entries: list[ScheduleEntry],
    bookings: Iterable[Booking],
    date_start: date,
    date_end: date,
    length_minutes: int = 30,
    step_minutes: int = 30,
    bucket_minutes: int = 5,
    match_either: bool = False,
) -> list[Slot]:
    """Pure slot computation over already-fetched schedules and bookings"""
    index = BookedIndex.build(bookings, bucket_minutes)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Booked buckets: {', '.join(index.summary()) or 'none'}")

    slots: list[Slot] = []
    for day in iter_days(date_start, date_end):
        for entry in entries:
            if entry.date != day or not entry.active or not entry.is_valid:
                continue
            slots.extend(slots_for_entry(entry, index, length_minutes, step_minutes, match_either))

    slots.sort()
    return slots


class SlotGenerator:
    """Enumerates free slots for the function surface and the /slots route"""

    def __init__(self, db: Session, config: Optional[SchedulingConfig] = None, organization_id: Optional[int] = None):
        self.db = db
        self.config = config or SchedulingConfig()
        self.organization_id = organization_id
        self.catalog = ScheduleCatalog(db, organization_id)
        self.resources = ResourceService(db, organization_id)

    def generate(
        self,
        date_start: date,
        date_end: date,
        provider_id: Optional[int] = None,
        operatory_id: Optional[int] = None,
        length_minutes: int = 30,
        search_all: bool = False,
    ) -> list[Slot]:
        if date_end < date_start:
            raise ValidationError("dateEnd must not be before dateStart", field="dateEnd")
        if length_minutes <= 0:
            raise ValidationError("lengthMinutes must be a positive number of minutes", field="lengthMinutes")

        if provider_id is not None and operatory_id is not None and not search_all:
            self.resources.require_provider(provider_id)
            self.resources.require_operatory(operatory_id)

        entries = self.catalog.resolve(date_start, date_end, provider_id, operatory_id, search_all)
        if not entries:
            # Business condition, not an error: office hours were never configured
            logger.info(
                f"No schedules configured for {date_start} to {date_end}. "
                f"Please configure provider schedules first."
            )
            return []

        combos = sorted({(e.provider_id, e.operatory_id) for e in entries})
        logger.info(
            f"Processing {len(entries)} schedules; provider/operatory combos: "
            f"{', '.join(f'{p}-{o}' for p, o in combos)}"
        )

        range_start, range_end = day_bounds(date_start, date_end)
        bookings = BookedTimeRepository.get_scheduled_between(
            self.db, range_start, range_end, organization_id=self.organization_id
        )
        logger.info(f"Found {len(bookings)} existing appointments in date range")

        slots = generate_slots(
            entries,
            bookings,
            date_start,
            date_end,
            length_minutes=length_minutes,
            step_minutes=self.config.slot_step_minutes,
            bucket_minutes=self.config.bucket_minutes,
            match_either=self.config.conflict_scope == "resource",
        )
        logger.info(f"Returning {len(slots)} available slots")
        return slots
