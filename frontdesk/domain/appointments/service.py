"""Appointment lifecycle - validation and state transitions for appointments

States: Scheduled (initial), Completed, Broken, Cancelled. Only Scheduled
appointments occupy a provider/operatory. Delete is not a state: it removes
the row whatever its status.
"""

import logging
from datetime import datetime, time
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import SchedulingConfig
from ...exceptions import ConflictError, NotFoundError, ValidationError
from ...models import STATUS_BROKEN, STATUS_CANCELLED, STATUS_SCHEDULED, Appointment
from ...shared.validators import format_datetime
from ..resources.service import ResourceService
from ..scheduling.conflicts import ConflictDetector, conflict_message
from ..scheduling.pattern import decode_pattern, encode_pattern
from .repository import AppointmentRepository, is_unique_violation
from .schemas import AppointmentCreate, AppointmentFilter, AppointmentUpdate

logger = logging.getLogger(__name__)


def appointment_to_dict(appointment: Appointment, include_names: bool = False) -> dict:
    """Function-surface shape of an appointment"""
    result = {
        "AptNum": appointment.id,
        "PatNum": appointment.patient_id,
        "ProvNum": appointment.provider_id,
        "Op": appointment.operatory_id,
        "AptDateTime": format_datetime(appointment.appointment_datetime),
        "AptStatus": appointment.status,
        "Note": appointment.notes or "",
        "Pattern": encode_pattern(appointment.duration_minutes or 30),
    }
    if include_names:
        patient, provider, operatory = appointment.patient, appointment.provider, appointment.operatory
        result.update(
            {
                "PatientName": patient.display_name if patient else f"Patient {appointment.patient_id}",
                "ProviderName": provider.display_name if provider else f"Provider {appointment.provider_id}",
                "OperatoryName": operatory.name if operatory else f"Room {appointment.operatory_id}",
            }
        )
    return result


class AppointmentLifecycle:
    """Service layer for appointment create/update/break/delete"""

    def __init__(self, db: Session, config: Optional[SchedulingConfig] = None, organization_id: Optional[int] = None):
        self.db = db
        self.config = config or SchedulingConfig()
        self.organization_id = organization_id
        self.repo = AppointmentRepository()
        self.resources = ResourceService(db, organization_id)
        self.conflicts = ConflictDetector(db, self.config, organization_id)

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id, self.organization_id)
        if not appointment:
            raise NotFoundError(f"Appointment with ID {appointment_id} not found")
        return appointment

    def get_appointments(self, filters: AppointmentFilter) -> list[Appointment]:
        start = datetime.combine(filters.DateStart, time(0, 0, 0)) if filters.DateStart else None
        end = datetime.combine(filters.DateEnd, time(23, 59, 59)) if filters.DateEnd else None
        return self.repo.get_appointments(
            self.db,
            organization_id=self.organization_id,
            patient_id=filters.PatNum,
            provider_id=filters.ProvNum,
            operatory_id=filters.OpNum,
            status=filters.status,
            start=start,
            end=end,
        )

    def _ensure_no_conflict(
        self,
        provider_id: int,
        operatory_id: int,
        start: datetime,
        duration_minutes: int,
        exclude_appointment_id: Optional[int] = None,
    ) -> None:
        result = self.conflicts.check(provider_id, operatory_id, start, duration_minutes, exclude_appointment_id)
        if result.has_conflict:
            raise ConflictError(result.message or "Time slot conflict detected")

    def create(self, data: AppointmentCreate) -> Appointment:
        """Create a Scheduled appointment; nothing is written if any check fails"""
        self.resources.require_patient(data.PatNum)
        self.resources.require_provider(data.ProvNum)
        self.resources.require_operatory(data.Op)

        duration = decode_pattern(data.Pattern) if data.Pattern else self.config.default_appointment_minutes

        # Only a Scheduled appointment occupies its provider/operatory
        if data.AptStatus == STATUS_SCHEDULED:
            self._ensure_no_conflict(data.ProvNum, data.Op, data.AptDateTime, duration)

        try:
            appointment = self.repo.create_appointment(
                self.db,
                self.organization_id,
                patient_id=data.PatNum,
                provider_id=data.ProvNum,
                operatory_id=data.Op,
                appointment_datetime=data.AptDateTime,
                duration_minutes=duration,
                appointment_type=data.Note or "General",
                status=data.AptStatus,
                notes=data.Note or "",
            )
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise
            logger.warning(
                f"Double booking caught by storage constraint for Provider {data.ProvNum}, "
                f"Operatory {data.Op} at {data.AptDateTime}"
            )
            raise ConflictError(conflict_message(data.ProvNum, data.Op, data.AptDateTime)) from e

        logger.info(
            f"Created appointment {appointment.id} for patient {appointment.patient_id} at "
            f"{format_datetime(appointment.appointment_datetime)} ({duration} min)"
        )
        return appointment

    def update(self, data: AppointmentUpdate) -> Appointment:
        """
        Apply field changes. Moving the appointment (time, provider or
        operatory) or putting it back to Scheduled re-runs the conflict check
        against everything except itself.
        """
        appointment = self.get_appointment(data.AptNum)

        if data.Op is not None:
            self.resources.require_operatory(data.Op)
        if data.ProvNum is not None:
            self.resources.require_provider(data.ProvNum)

        provider_id = data.ProvNum if data.ProvNum is not None else appointment.provider_id
        operatory_id = data.Op if data.Op is not None else appointment.operatory_id
        start = data.AptDateTime or appointment.appointment_datetime
        duration = decode_pattern(data.Pattern) if data.Pattern else (appointment.duration_minutes or 30)
        status = data.AptStatus or appointment.status

        moved = (
            start != appointment.appointment_datetime
            or provider_id != appointment.provider_id
            or operatory_id != appointment.operatory_id
            or duration != appointment.duration_minutes
        )
        reoccupies = status == STATUS_SCHEDULED and appointment.status != STATUS_SCHEDULED

        if status == STATUS_SCHEDULED and (moved or reoccupies):
            self._ensure_no_conflict(provider_id, operatory_id, start, duration, exclude_appointment_id=appointment.id)

        updates = {
            "appointment_datetime": start,
            "provider_id": provider_id,
            "operatory_id": operatory_id,
            "duration_minutes": duration,
            "status": status,
            "notes": data.Note,
        }
        try:
            appointment = self.repo.update_appointment(self.db, appointment, **updates)
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise
            raise ConflictError(conflict_message(provider_id, operatory_id, start)) from e

        logger.info(f"Updated appointment {appointment.id}")
        return appointment

    def break_appointment(self, appointment_id: int, send_to_unscheduled_list: bool = True) -> Appointment:
        """Scheduled -> Broken (back on the unscheduled list) or Cancelled"""
        appointment = self.get_appointment(appointment_id)

        if appointment.status != STATUS_SCHEDULED:
            raise ValidationError(
                f"Only appointments with status 'Scheduled' can be broken. "
                f"Current status: {appointment.status}",
                field="AptNum",
            )

        new_status = STATUS_BROKEN if send_to_unscheduled_list else STATUS_CANCELLED
        appointment = self.repo.update_appointment(self.db, appointment, status=new_status)
        logger.info(f"Appointment {appointment.id} marked {new_status}")
        return appointment

    def delete(self, appointment_id: int) -> dict:
        """Remove the appointment regardless of its status"""
        appointment = self.get_appointment(appointment_id)
        self.repo.delete_appointment(self.db, appointment)
        logger.info(f"Deleted appointment {appointment_id}")
        return {"success": True, "AptNum": appointment_id}
