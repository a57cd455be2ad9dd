"""Appointment router - REST endpoints for the appointment lifecycle"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..config import SchedulingConfig
from ..database import get_db
from ..dependencies import get_organization_id, get_scheduling_config
from ..domain.appointments.schemas import (
    AppointmentChanges,
    AppointmentCreate,
    AppointmentFilter,
    AppointmentResponse,
    AppointmentUpdate,
    BreakResponse,
    DeleteResponse,
)
from ..domain.appointments.service import AppointmentLifecycle, appointment_to_dict
from ..functions.adapters import build_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(
    db: Session = Depends(get_db),
    config: SchedulingConfig = Depends(get_scheduling_config),
    organization_id: Optional[int] = Depends(get_organization_id),
) -> AppointmentLifecycle:
    """Dependency injection for AppointmentLifecycle"""
    return AppointmentLifecycle(db, config, organization_id)


@router.get("", response_model=list[AppointmentResponse])
async def get_appointments(
    date_start: Optional[str] = Query(None, alias="DateStart"),
    date_end: Optional[str] = Query(None, alias="DateEnd"),
    patient_id: Optional[int] = Query(None, alias="PatNum"),
    provider_id: Optional[int] = Query(None, alias="ProvNum"),
    operatory_id: Optional[int] = Query(None, alias="OpNum"),
    apt_status: Optional[str] = Query(None, alias="status"),
    service: AppointmentLifecycle = Depends(get_appointment_service),
):
    """List appointments ordered by start time"""
    filters = build_request(
        AppointmentFilter,
        {
            "DateStart": date_start,
            "DateEnd": date_end,
            "PatNum": patient_id,
            "ProvNum": provider_id,
            "OpNum": operatory_id,
            "status": apt_status,
        },
    )
    return [appointment_to_dict(a, include_names=True) for a in service.get_appointments(filters)]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    service: AppointmentLifecycle = Depends(get_appointment_service),
):
    return appointment_to_dict(service.get_appointment(appointment_id), include_names=True)


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    data: AppointmentCreate,
    service: AppointmentLifecycle = Depends(get_appointment_service),
):
    """Book an appointment; 409 when the time is taken"""
    return appointment_to_dict(service.create(data))


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentChanges,
    service: AppointmentLifecycle = Depends(get_appointment_service),
):
    update = AppointmentUpdate(AptNum=appointment_id, **data.model_dump(exclude_none=True))
    return appointment_to_dict(service.update(update))


@router.post("/{appointment_id}/break", response_model=BreakResponse)
async def break_appointment(
    appointment_id: int,
    send_to_unscheduled_list: bool = Query(True, alias="sendToUnscheduledList"),
    service: AppointmentLifecycle = Depends(get_appointment_service),
):
    """Mark a Scheduled appointment Broken (or Cancelled)"""
    appointment = service.break_appointment(appointment_id, send_to_unscheduled_list)
    return BreakResponse(AptNum=appointment.id, AptStatus=appointment.status)


@router.delete("/{appointment_id}", response_model=DeleteResponse)
async def delete_appointment(
    appointment_id: int,
    service: AppointmentLifecycle = Depends(get_appointment_service),
):
    return service.delete(appointment_id)
