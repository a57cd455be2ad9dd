"""Appointment repository - Database operations for appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ...models import Appointment
from ..resources.repository import scoped


def is_unique_violation(error: IntegrityError) -> bool:
    """True for unique-constraint failures (Postgres 23505, SQLite "UNIQUE constraint failed")"""
    orig = getattr(error, "orig", None)
    if getattr(orig, "pgcode", None) == "23505":
        return True
    text = str(orig or error).lower()
    return "unique" in text or "duplicate key" in text


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_appointment(
        db: Session, appointment_id: int, organization_id: Optional[int] = None
    ) -> Optional[Appointment]:
        return (
            scoped(db.query(Appointment), Appointment, organization_id)
            .filter(Appointment.id == appointment_id)
            .first()
        )

    @staticmethod
    def get_appointments(
        db: Session,
        organization_id: Optional[int] = None,
        patient_id: Optional[int] = None,
        provider_id: Optional[int] = None,
        operatory_id: Optional[int] = None,
        status: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Appointment]:
        """Appointments matching the filters, ordered by start time"""
        query = scoped(
            db.query(Appointment).options(
                joinedload(Appointment.patient),
                joinedload(Appointment.provider),
                joinedload(Appointment.operatory),
            ),
            Appointment,
            organization_id,
        )

        if patient_id is not None:
            query = query.filter(Appointment.patient_id == patient_id)
        if provider_id is not None:
            query = query.filter(Appointment.provider_id == provider_id)
        if operatory_id is not None:
            query = query.filter(Appointment.operatory_id == operatory_id)
        if status:
            query = query.filter(Appointment.status == status)
        if start is not None:
            query = query.filter(Appointment.appointment_datetime >= start)
        if end is not None:
            query = query.filter(Appointment.appointment_datetime <= end)

        return query.order_by(Appointment.appointment_datetime, Appointment.id).all()

    @staticmethod
    def create_appointment(db: Session, organization_id: Optional[int] = None, **appointment_data) -> Appointment:
        """Insert and commit; IntegrityError propagates after rollback"""
        appointment = Appointment(organization_id=organization_id, **appointment_data)
        db.add(appointment)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        """Update an appointment with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(appointment, key):
                setattr(appointment, key, value)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise
        db.refresh(appointment)
        return appointment

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()
