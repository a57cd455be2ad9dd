"""Schedule catalog - read-only view of active working windows per calendar date"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from .repository import ScheduleRepository, to_schedule_entry
from .types import ScheduleEntry

logger = logging.getLogger(__name__)


class ScheduleCatalog:
    """Filtered reads over provider schedules. No side effects."""

    def __init__(self, db: Session, organization_id: Optional[int] = None):
        self.db = db
        self.organization_id = organization_id

    def schedules_for(
        self,
        date_start: date,
        date_end: date,
        provider_id: Optional[int] = None,
        operatory_id: Optional[int] = None,
    ) -> list[ScheduleEntry]:
        """Active entries in [date_start, date_end], optionally for one provider/operatory"""
        rows = ScheduleRepository.get_schedules(
            self.db,
            organization_id=self.organization_id,
            provider_id=provider_id,
            operatory_id=operatory_id,
            date_start=date_start,
            date_end=date_end,
            is_active=True,
        )
        entries = []
        for row in rows:
            entry = to_schedule_entry(row)
            if not entry.is_valid:
                logger.warning(
                    f"Skipping schedule {entry.id}: start {entry.start_time} is not before end {entry.end_time}"
                )
                continue
            entries.append(entry)
        return entries

    def resolve(
        self,
        date_start: date,
        date_end: date,
        provider_id: Optional[int] = None,
        operatory_id: Optional[int] = None,
        search_all: bool = False,
    ) -> list[ScheduleEntry]:
        """
        Entries a slot search should walk.

        A specific provider/operatory pair with no configured hours widens to
        every active schedule in the range, so callers don't need to know in
        advance who has hours. search_all skips the narrow query entirely.
        """
        if provider_id is not None and operatory_id is not None and not search_all:
            entries = self.schedules_for(date_start, date_end, provider_id, operatory_id)
            logger.info(
                f"Found {len(entries)} schedules for Provider {provider_id}, Operatory {operatory_id}"
            )
            if entries:
                return entries
            logger.info(
                f"No schedules for Provider {provider_id}, Operatory {operatory_id}. "
                f"Searching all available schedules..."
            )

        entries = self.schedules_for(date_start, date_end)
        logger.info(f"Found {len(entries)} total active schedules for {date_start} to {date_end}")
        return entries
