"""Appointment functions: slot search and the appointment lifecycle"""

import logging

from ..domain.appointments.schemas import (
    AppointmentBreak,
    AppointmentCreate,
    AppointmentDelete,
    AppointmentFilter,
    AppointmentUpdate,
)
from ..domain.appointments.service import AppointmentLifecycle, appointment_to_dict
from ..domain.scheduling.schemas import SlotSearchRequest
from ..domain.scheduling.slots import SlotGenerator
from .adapters import (
    APPOINTMENT_ALIASES,
    SCHEDULE_ALIASES,
    apply_default_resources,
    build_request,
    prepare,
    require_fields,
)
from .context import FunctionContext

logger = logging.getLogger(__name__)


def _lifecycle(ctx: FunctionContext) -> AppointmentLifecycle:
    return AppointmentLifecycle(ctx.db, ctx.config, ctx.organization_id)


def get_available_slots(ctx: FunctionContext, params: dict) -> list[dict]:
    params = prepare(params, ctx.config, SCHEDULE_ALIASES)
    require_fields(params, ("dateStart", "dateEnd"))
    request = build_request(SlotSearchRequest, params)

    slots = SlotGenerator(ctx.db, ctx.config, ctx.organization_id).generate(
        request.dateStart,
        request.dateEnd,
        provider_id=request.ProvNum,
        operatory_id=request.OpNum,
        length_minutes=request.lengthMinutes,
        search_all=request.searchAll,
    )
    return [slot.to_dict() for slot in slots]


def create_appointment(ctx: FunctionContext, params: dict) -> dict:
    params = prepare(params, ctx.config, APPOINTMENT_ALIASES)
    params = apply_default_resources(params, ctx.config)
    require_fields(params, ("PatNum", "AptDateTime", "ProvNum", "Op"))
    request = build_request(AppointmentCreate, params)

    appointment = _lifecycle(ctx).create(request)
    return appointment_to_dict(appointment)


def update_appointment(ctx: FunctionContext, params: dict) -> dict:
    params = prepare(params, ctx.config, APPOINTMENT_ALIASES)
    require_fields(params, ("AptNum",))
    request = build_request(AppointmentUpdate, params)

    appointment = _lifecycle(ctx).update(request)
    return appointment_to_dict(appointment)


def break_appointment(ctx: FunctionContext, params: dict) -> dict:
    params = prepare(params, ctx.config, APPOINTMENT_ALIASES)
    require_fields(params, ("AptNum",))
    request = build_request(AppointmentBreak, params)

    appointment = _lifecycle(ctx).break_appointment(request.AptNum, request.sendToUnscheduledList)
    return {"AptNum": appointment.id, "AptStatus": appointment.status}


def delete_appointment(ctx: FunctionContext, params: dict) -> dict:
    params = prepare(params, ctx.config, APPOINTMENT_ALIASES)
    require_fields(params, ("AptNum",))
    request = build_request(AppointmentDelete, params)
    return _lifecycle(ctx).delete(request.AptNum)


def get_appointments(ctx: FunctionContext, params: dict) -> list[dict]:
    # filters use OpNum, so "Op" is the alias here
    params = prepare(params, ctx.config, SCHEDULE_ALIASES)
    request = build_request(AppointmentFilter, params)

    appointments = _lifecycle(ctx).get_appointments(request)
    return [appointment_to_dict(a, include_names=True) for a in appointments]
