"""
Booking function registry

Maps the function names external callers use to their handlers. Every
handler takes (FunctionContext, params) and returns JSON-ready data.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..config import SchedulingConfig
from ..exceptions import ValidationError
from . import appointments, resources, schedules
from .context import FunctionContext

logger = logging.getLogger(__name__)

FunctionHandler = Callable[[FunctionContext, dict], object]

FUNCTION_REGISTRY: dict[str, FunctionHandler] = {
    # Availability and appointments
    "GetAvailableSlots": appointments.get_available_slots,
    "GetAppointments": appointments.get_appointments,
    "CreateAppointment": appointments.create_appointment,
    "UpdateAppointment": appointments.update_appointment,
    "BreakAppointment": appointments.break_appointment,
    "DeleteAppointment": appointments.delete_appointment,
    # Resources
    "GetProviders": resources.get_providers,
    "GetOperatories": resources.get_operatories,
    # Office hours
    "GetSchedules": schedules.get_schedules,
    "GetSchedule": schedules.get_schedule,
    "GetProviderSchedules": schedules.get_provider_schedules,
    "CreateSchedule": schedules.create_schedule,
    "UpdateSchedule": schedules.update_schedule,
    "DeleteSchedule": schedules.delete_schedule,
    "CreateDefaultSchedules": schedules.create_default_schedules,
    "CheckScheduleConflicts": schedules.check_schedule_conflicts,
}


def call_function(
    function_name: str,
    params: Optional[dict],
    db: Session,
    config: Optional[SchedulingConfig] = None,
    organization_id: Optional[int] = None,
):
    """Dispatch a named booking function; domain errors propagate to the caller"""
    handler = FUNCTION_REGISTRY.get(function_name)
    if handler is None:
        raise ValidationError(f"Unknown function: {function_name}", field="functionName")

    logger.info(f"Booking function {function_name} called")
    ctx = FunctionContext(db=db, config=config or SchedulingConfig(), organization_id=organization_id)
    return handler(ctx, params or {})
