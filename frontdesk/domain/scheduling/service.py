"""Schedule service - Business logic for office-hours administration"""

import logging
from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...config import SchedulingConfig
from ...exceptions import ConflictError, NotFoundError, ValidationError
from ...models import ProviderSchedule
from ...shared.validators import format_date, format_time
from ..resources.service import ResourceService
from .repository import ScheduleRepository
from .schemas import (
    DefaultSchedulesRequest,
    ScheduleConflictCheck,
    ScheduleCreate,
    ScheduleFilter,
    ScheduleUpdate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleConflict:
    type: str  # operatory_conflict, provider_conflict, duplicate
    message: str
    schedule_id: int

    def to_dict(self) -> dict:
        return {"type": self.type, "message": self.message, "conflictWith": self.schedule_id}


def _times_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    return start_a < end_b and start_b < end_a


def classify_schedule_conflict(
    existing: ProviderSchedule,
    provider_id: int,
    operatory_id: int,
    start_time: time,
    end_time: time,
) -> Optional[ScheduleConflict]:
    """
    A room holds one provider at a time and a provider works in one room at a time.
    Returns None when the windows don't overlap.
    """
    if not _times_overlap(start_time, end_time, existing.start_time, existing.end_time):
        return None

    window = f"from {format_time(existing.start_time)} to {format_time(existing.end_time)}"

    if existing.operatory_id == operatory_id and existing.provider_id != provider_id:
        provider_name = (
            existing.provider.display_name if existing.provider else f"Provider {existing.provider_id}"
        )
        return ScheduleConflict(
            "operatory_conflict", f"Operatory is already booked by {provider_name} {window}", existing.id
        )

    if existing.provider_id == provider_id and existing.operatory_id != operatory_id:
        return ScheduleConflict(
            "provider_conflict", f"Provider is already scheduled in another operatory {window}", existing.id
        )

    if existing.provider_id == provider_id and existing.operatory_id == operatory_id:
        return ScheduleConflict(
            "duplicate", f"Schedule already exists for this provider/operatory {window}", existing.id
        )

    return None


def schedule_to_dict(schedule: ProviderSchedule) -> dict:
    provider = schedule.provider
    operatory = schedule.operatory
    return {
        "ScheduleNum": schedule.id,
        "ProvNum": schedule.provider_id,
        "ProviderName": provider.display_name if provider else f"Provider {schedule.provider_id}",
        "OpNum": schedule.operatory_id,
        "OperatoryName": operatory.name if operatory else f"Operatory {schedule.operatory_id}",
        "ScheduleDate": format_date(schedule.schedule_date),
        "StartTime": format_time(schedule.start_time),
        "EndTime": format_time(schedule.end_time),
        "IsActive": bool(schedule.is_active),
    }


class ScheduleService:
    """Service layer for provider schedule administration"""

    def __init__(self, db: Session, config: Optional[SchedulingConfig] = None, organization_id: Optional[int] = None):
        self.db = db
        self.config = config or SchedulingConfig()
        self.organization_id = organization_id
        self.repo = ScheduleRepository()
        self.resources = ResourceService(db, organization_id)

    def get_schedules(self, filters: ScheduleFilter) -> list[ProviderSchedule]:
        date_start, date_end = filters.DateStart, filters.DateEnd
        if filters.ScheduleDate:
            date_start = date_end = filters.ScheduleDate
        return self.repo.get_schedules(
            self.db,
            organization_id=self.organization_id,
            provider_id=filters.ProvNum,
            operatory_id=filters.OpNum,
            date_start=date_start,
            date_end=date_end,
            is_active=filters.is_active,
        )

    def get_provider_schedules(
        self, provider_id: int, date_start: Optional[date] = None, date_end: Optional[date] = None
    ) -> list[ProviderSchedule]:
        return self.get_schedules(
            ScheduleFilter(ProvNum=provider_id, DateStart=date_start, DateEnd=date_end, is_active=True)
        )

    def get_schedule(self, schedule_id: int) -> ProviderSchedule:
        schedule = self.repo.get_schedule(self.db, schedule_id, self.organization_id)
        if not schedule:
            raise NotFoundError(f"Schedule with ID {schedule_id} not found")
        return schedule

    def find_conflict(
        self,
        schedule_date: date,
        provider_id: int,
        operatory_id: int,
        start_time: time,
        end_time: time,
        exclude_schedule_id: Optional[int] = None,
    ) -> Optional[ScheduleConflict]:
        existing = self.repo.get_schedules_on_date(
            self.db, schedule_date, self.organization_id, exclude_schedule_id
        )
        for schedule in existing:
            conflict = classify_schedule_conflict(schedule, provider_id, operatory_id, start_time, end_time)
            if conflict:
                return conflict
        return None

    def check_conflicts(self, data: ScheduleConflictCheck) -> dict:
        conflict = self.find_conflict(
            data.ScheduleDate, data.ProvNum, data.OpNum, data.StartTime, data.EndTime, data.ExcludeScheduleNum
        )
        return {"hasConflict": conflict is not None, "conflict": conflict.to_dict() if conflict else None}

    def create_schedule(self, data: ScheduleCreate) -> ProviderSchedule:
        """Create a schedule entry after checking room/provider conflicts"""
        self.resources.require_provider(data.ProvNum, must_be_active=False)
        self.resources.require_operatory(data.OpNum, must_be_active=False)

        conflict = self.find_conflict(data.ScheduleDate, data.ProvNum, data.OpNum, data.StartTime, data.EndTime)
        if conflict:
            logger.warning(f"Schedule conflict on {data.ScheduleDate}: {conflict.message}")
            raise ConflictError(f"Schedule conflict: {conflict.message}")

        schedule = self.repo.create_schedule(
            self.db,
            self.organization_id,
            provider_id=data.ProvNum,
            operatory_id=data.OpNum,
            schedule_date=data.ScheduleDate,
            start_time=data.StartTime,
            end_time=data.EndTime,
            is_active=data.IsActive,
        )
        logger.info(
            f"Created schedule {schedule.id}: Provider {schedule.provider_id}, "
            f"Operatory {schedule.operatory_id} on {schedule.schedule_date}"
        )
        return schedule

    def update_schedule(self, data: ScheduleUpdate) -> ProviderSchedule:
        if not data.has_changes():
            raise ValidationError("No update fields provided")

        schedule = self.get_schedule(data.ScheduleNum)

        if data.ProvNum is not None:
            self.resources.require_provider(data.ProvNum, must_be_active=False)
        if data.OpNum is not None:
            self.resources.require_operatory(data.OpNum, must_be_active=False)

        provider_id = data.ProvNum if data.ProvNum is not None else schedule.provider_id
        operatory_id = data.OpNum if data.OpNum is not None else schedule.operatory_id
        schedule_date = data.ScheduleDate or schedule.schedule_date
        start_time = data.StartTime or schedule.start_time
        end_time = data.EndTime or schedule.end_time

        if start_time >= end_time:
            raise ValidationError("StartTime must be before EndTime", field="StartTime")

        conflict = self.find_conflict(
            schedule_date, provider_id, operatory_id, start_time, end_time, exclude_schedule_id=schedule.id
        )
        if conflict:
            raise ConflictError(f"Schedule conflict: {conflict.message}")

        return self.repo.update_schedule(
            self.db,
            schedule,
            provider_id=provider_id,
            operatory_id=operatory_id,
            schedule_date=schedule_date,
            start_time=start_time,
            end_time=end_time,
            is_active=data.IsActive,
        )

    def delete_schedule(self, schedule_id: int) -> dict:
        schedule = self.get_schedule(schedule_id)
        self.repo.delete_schedule(self.db, schedule)
        return {"success": True, "message": f"Schedule {schedule_id} deleted"}

    def create_default_schedules(self, data: DefaultSchedulesRequest) -> dict:
        """
        One schedule per day over a range (weekdays only unless IncludeWeekends).

        Days that conflict are skipped and reported; if no day could be created
        the whole call fails.
        """
        span_days = (data.DateEnd - data.DateStart).days
        if span_days > self.config.max_default_schedule_days:
            raise ValidationError(
                f"Date range cannot exceed {self.config.max_default_schedule_days} days", field="DateEnd"
            )

        created: list[ProviderSchedule] = []
        errors: list[str] = []

        current = data.DateStart
        while current <= data.DateEnd:
            # 5 = Saturday, 6 = Sunday
            if not data.IncludeWeekends and current.weekday() >= 5:
                current += timedelta(days=1)
                continue

            try:
                created.append(
                    self.create_schedule(
                        ScheduleCreate(
                            ProvNum=data.ProvNum,
                            OpNum=data.OpNum,
                            ScheduleDate=current,
                            StartTime=data.StartTime,
                            EndTime=data.EndTime,
                            IsActive=True,
                        )
                    )
                )
            except ConflictError as e:
                errors.append(f"{format_date(current)}: {e.message}")

            current += timedelta(days=1)

        if errors and not created:
            raise ConflictError(f"All schedules had conflicts: {'; '.join(errors)}")

        logger.info(f"Created {len(created)} default schedules, skipped {len(errors)} conflicting days")
        return {"created": created, "skipped": errors}

