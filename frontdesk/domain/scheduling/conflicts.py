"""
Overlap Detection Service

Decides whether a candidate appointment collides with a Scheduled one.
Every create/move in the appointment lifecycle goes through ConflictDetector.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ...config import SchedulingConfig
from ...shared.validators import format_datetime
from .overlap import intervals_overlap
from .repository import BookedTimeRepository, day_bounds
from .types import Booking

logger = logging.getLogger(__name__)


def conflict_message(provider_id: int, operatory_id: int, start: datetime) -> str:
    """Single message shape for pre-check conflicts and storage uniqueness violations"""
    return (
        f"Time slot conflict: Provider {provider_id} and Operatory {operatory_id} "
        f"already have an appointment at {format_datetime(start)}"
    )


@dataclass(frozen=True)
class ConflictResult:
    has_conflict: bool
    message: Optional[str] = None
    conflicting_appointment_id: Optional[int] = None

    def to_dict(self) -> dict:
        result = {"hasConflict": self.has_conflict}
        if self.message:
            result["message"] = self.message
        return result


def find_conflict(
    start: datetime,
    duration_minutes: int,
    bookings: Iterable[Booking],
    exclude_appointment_id: Optional[int] = None,
) -> ConflictResult:
    """First booking overlapping [start, start+duration), in the order given"""
    end = start + timedelta(minutes=duration_minutes)
    for booking in bookings:
        if not booking.occupies_resources:
            continue
        if exclude_appointment_id is not None and booking.id == exclude_appointment_id:
            continue
        if intervals_overlap(start, end, booking.start, booking.end):
            return ConflictResult(
                has_conflict=True,
                message=conflict_message(booking.provider_id, booking.operatory_id, booking.start),
                conflicting_appointment_id=booking.id,
            )
    return ConflictResult(has_conflict=False)


class ConflictDetector:
    """Checks a candidate against same-day Scheduled appointments for its resources"""

    def __init__(self, db: Session, config: Optional[SchedulingConfig] = None, organization_id: Optional[int] = None):
        self.db = db
        self.config = config or SchedulingConfig()
        self.organization_id = organization_id

    def check(
        self,
        provider_id: int,
        operatory_id: int,
        start: datetime,
        duration_minutes: int,
        exclude_appointment_id: Optional[int] = None,
    ) -> ConflictResult:
        day_start, day_end = day_bounds(start.date(), start.date())
        logger.info(
            f"Checking for conflicts on {start.date()} for Provider {provider_id}, Operatory {operatory_id}"
        )

        bookings = BookedTimeRepository.get_scheduled_between(
            self.db,
            day_start,
            day_end,
            organization_id=self.organization_id,
            provider_id=provider_id,
            operatory_id=operatory_id,
            match_either=self.config.conflict_scope == "resource",
            exclude_appointment_id=exclude_appointment_id,
        )

        result = find_conflict(start, duration_minutes, bookings, exclude_appointment_id)
        if result.has_conflict:
            logger.warning(result.message)
        return result
