"""Schedule functions: office-hours administration"""

from ..domain.scheduling.schemas import (
    DefaultSchedulesRequest,
    ScheduleConflictCheck,
    ScheduleCreate,
    ScheduleFilter,
    ScheduleUpdate,
)
from ..domain.scheduling.service import ScheduleService, schedule_to_dict
from ..exceptions import ValidationError
from ..shared.validators import format_date, parse_int
from .adapters import SCHEDULE_ALIASES, build_request, prepare, require_fields
from .context import FunctionContext


def _service(ctx: FunctionContext) -> ScheduleService:
    return ScheduleService(ctx.db, ctx.config, ctx.organization_id)


def _schedule_id(params: dict) -> int:
    require_fields(params, ("ScheduleNum",))
    try:
        return parse_int(params["ScheduleNum"], "ScheduleNum")
    except ValueError as e:
        raise ValidationError(str(e), field="ScheduleNum") from e


def get_schedules(ctx: FunctionContext, params: dict) -> list[dict]:
    params = prepare(params, ctx.config, SCHEDULE_ALIASES)
    request = build_request(ScheduleFilter, params)
    return [schedule_to_dict(s) for s in _service(ctx).get_schedules(request)]


def get_schedule(ctx: FunctionContext, params: dict) -> dict:
    params = prepare(params, ctx.config, SCHEDULE_ALIASES)
    return schedule_to_dict(_service(ctx).get_schedule(_schedule_id(params)))


def get_provider_schedules(ctx: FunctionContext, params: dict) -> list[dict]:
    params = prepare(params, ctx.config, SCHEDULE_ALIASES)
    require_fields(params, ("ProvNum",))
    request = build_request(ScheduleFilter, params)
    schedules = _service(ctx).get_provider_schedules(request.ProvNum, request.DateStart, request.DateEnd)
    return [schedule_to_dict(s) for s in schedules]


def create_schedule(ctx: FunctionContext, params: dict) -> dict:
    params = prepare(params, ctx.config, SCHEDULE_ALIASES)
    require_fields(params, ("ProvNum", "OpNum", "ScheduleDate", "StartTime", "EndTime"))
    request = build_request(ScheduleCreate, params)
    return schedule_to_dict(_service(ctx).create_schedule(request))


def update_schedule(ctx: FunctionContext, params: dict) -> dict:
    params = prepare(params, ctx.config, SCHEDULE_ALIASES)
    require_fields(params, ("ScheduleNum",))
    request = build_request(ScheduleUpdate, params)
    return schedule_to_dict(_service(ctx).update_schedule(request))


def delete_schedule(ctx: FunctionContext, params: dict) -> dict:
    params = prepare(params, ctx.config, SCHEDULE_ALIASES)
    return _service(ctx).delete_schedule(_schedule_id(params))


def create_default_schedules(ctx: FunctionContext, params: dict) -> dict:
    params = prepare(params, ctx.config, SCHEDULE_ALIASES)
    require_fields(params, ("ProvNum", "OpNum", "DateStart", "DateEnd"))
    request = build_request(DefaultSchedulesRequest, params)

    result = _service(ctx).create_default_schedules(request)
    created = [schedule_to_dict(s) for s in result["created"]]
    return {
        "created": created,
        "count": len(created),
        "skipped": result["skipped"],
        "message": (
            f"Created {len(created)} schedules from "
            f"{format_date(request.DateStart)} to {format_date(request.DateEnd)}"
        ),
    }


def check_schedule_conflicts(ctx: FunctionContext, params: dict) -> dict:
    params = prepare(params, ctx.config, SCHEDULE_ALIASES)
    require_fields(params, ("ProvNum", "OpNum", "ScheduleDate", "StartTime", "EndTime"))
    request = build_request(ScheduleConflictCheck, params)
    return _service(ctx).check_conflicts(request)
