"""Scheduling repository - Database reads/writes for schedules and the booked-time view"""

from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import STATUS_SCHEDULED, Appointment, ProviderSchedule
from ..resources.repository import scoped
from .types import Booking, ScheduleEntry


def to_schedule_entry(row: ProviderSchedule) -> ScheduleEntry:
    provider = row.provider
    return ScheduleEntry(
        id=row.id,
        date=row.schedule_date,
        provider_id=row.provider_id,
        operatory_id=row.operatory_id,
        start_time=row.start_time,
        end_time=row.end_time,
        active=bool(row.is_active),
        provider_name=provider.display_name if provider else None,
    )


def to_booking(row: Appointment) -> Booking:
    return Booking(
        id=row.id,
        provider_id=row.provider_id,
        operatory_id=row.operatory_id,
        start=row.appointment_datetime,
        duration_minutes=row.duration_minutes or 30,
        status=row.status,
    )


def day_bounds(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """[start_date 00:00:00, end_date 23:59:59] in local wall-clock"""
    return (
        datetime.combine(start_date, time(0, 0, 0)),
        datetime.combine(end_date, time(23, 59, 59)),
    )


class ScheduleRepository:
    """Repository for provider schedule database operations"""

    @staticmethod
    def get_schedules(
        db: Session,
        organization_id: Optional[int] = None,
        provider_id: Optional[int] = None,
        operatory_id: Optional[int] = None,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
        is_active: Optional[bool] = None,
    ) -> list[ProviderSchedule]:
        """Get schedules with optional filters"""
        query = scoped(
            db.query(ProviderSchedule).options(
                joinedload(ProviderSchedule.provider), joinedload(ProviderSchedule.operatory)
            ),
            ProviderSchedule,
            organization_id,
        )

        if provider_id is not None:
            query = query.filter(ProviderSchedule.provider_id == provider_id)
        if operatory_id is not None:
            query = query.filter(ProviderSchedule.operatory_id == operatory_id)
        if date_start is not None:
            query = query.filter(ProviderSchedule.schedule_date >= date_start)
        if date_end is not None:
            query = query.filter(ProviderSchedule.schedule_date <= date_end)
        if is_active is not None:
            query = query.filter(ProviderSchedule.is_active.is_(is_active))

        return query.order_by(
            ProviderSchedule.schedule_date, ProviderSchedule.start_time, ProviderSchedule.id
        ).all()

    @staticmethod
    def get_schedule(
        db: Session, schedule_id: int, organization_id: Optional[int] = None
    ) -> Optional[ProviderSchedule]:
        return (
            scoped(db.query(ProviderSchedule), ProviderSchedule, organization_id)
            .filter(ProviderSchedule.id == schedule_id)
            .first()
        )

    @staticmethod
    def get_schedules_on_date(
        db: Session,
        schedule_date: date,
        organization_id: Optional[int] = None,
        exclude_schedule_id: Optional[int] = None,
    ) -> list[ProviderSchedule]:
        """All schedules on one date, active or not, used for schedule conflict checks"""
        query = scoped(db.query(ProviderSchedule), ProviderSchedule, organization_id).filter(
            ProviderSchedule.schedule_date == schedule_date
        )
        if exclude_schedule_id is not None:
            query = query.filter(ProviderSchedule.id != exclude_schedule_id)
        return query.order_by(ProviderSchedule.start_time).all()

    @staticmethod
    def create_schedule(db: Session, organization_id: Optional[int] = None, **schedule_data) -> ProviderSchedule:
        schedule = ProviderSchedule(organization_id=organization_id, **schedule_data)
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def update_schedule(db: Session, schedule: ProviderSchedule, **updates) -> ProviderSchedule:
        for key, value in updates.items():
            if value is not None and hasattr(schedule, key):
                setattr(schedule, key, value)

        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def delete_schedule(db: Session, schedule: ProviderSchedule) -> None:
        db.delete(schedule)
        db.commit()


class BookedTimeRepository:
    """Read-only view of appointments that currently occupy a provider or operatory"""

    @staticmethod
    def get_scheduled_between(
        db: Session,
        start: datetime,
        end: datetime,
        organization_id: Optional[int] = None,
        provider_id: Optional[int] = None,
        operatory_id: Optional[int] = None,
        match_either: bool = False,
        exclude_appointment_id: Optional[int] = None,
    ) -> list[Booking]:
        """
        Scheduled appointments starting within [start, end].

        With match_either, an appointment qualifies when it shares the provider
        OR the operatory; otherwise both filters that are given must match.
        """
        query = scoped(db.query(Appointment), Appointment, organization_id).filter(
            Appointment.status == STATUS_SCHEDULED,
            Appointment.appointment_datetime >= start,
            Appointment.appointment_datetime <= end,
        )

        if match_either and provider_id is not None and operatory_id is not None:
            query = query.filter(
                or_(Appointment.provider_id == provider_id, Appointment.operatory_id == operatory_id)
            )
        else:
            if provider_id is not None:
                query = query.filter(Appointment.provider_id == provider_id)
            if operatory_id is not None:
                query = query.filter(Appointment.operatory_id == operatory_id)

        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != exclude_appointment_id)

        rows = query.order_by(Appointment.appointment_datetime, Appointment.id).all()
        return [to_booking(row) for row in rows]
