"""Schedule router - REST endpoints for provider office hours"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..config import SchedulingConfig
from ..database import get_db
from ..dependencies import get_organization_id, get_scheduling_config
from ..domain.scheduling.schemas import (
    DefaultSchedulesRequest,
    ScheduleChanges,
    ScheduleConflictCheck,
    ScheduleCreate,
    ScheduleFilter,
    ScheduleResponse,
    ScheduleUpdate,
)
from ..domain.scheduling.service import ScheduleService, schedule_to_dict
from ..functions.adapters import build_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedules", tags=["Schedules"])


def get_schedule_service(
    db: Session = Depends(get_db),
    config: SchedulingConfig = Depends(get_scheduling_config),
    organization_id: Optional[int] = Depends(get_organization_id),
) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db, config, organization_id)


@router.get("", response_model=list[ScheduleResponse])
async def get_schedules(
    provider_id: Optional[int] = Query(None, alias="ProvNum"),
    operatory_id: Optional[int] = Query(None, alias="OpNum"),
    schedule_date: Optional[str] = Query(None, alias="ScheduleDate"),
    date_start: Optional[str] = Query(None, alias="DateStart"),
    date_end: Optional[str] = Query(None, alias="DateEnd"),
    is_active: Optional[bool] = Query(None),
    service: ScheduleService = Depends(get_schedule_service),
):
    filters = build_request(
        ScheduleFilter,
        {
            "ProvNum": provider_id,
            "OpNum": operatory_id,
            "ScheduleDate": schedule_date,
            "DateStart": date_start,
            "DateEnd": date_end,
            "is_active": is_active,
        },
    )
    return [schedule_to_dict(s) for s in service.get_schedules(filters)]


@router.post("/defaults", status_code=status.HTTP_201_CREATED)
async def create_default_schedules(
    data: DefaultSchedulesRequest,
    service: ScheduleService = Depends(get_schedule_service),
):
    """One schedule per day over a range; conflicting days are skipped"""
    result = service.create_default_schedules(data)
    return {
        "created": [schedule_to_dict(s) for s in result["created"]],
        "skipped": result["skipped"],
    }


@router.post("/conflicts")
async def check_schedule_conflicts(
    data: ScheduleConflictCheck,
    service: ScheduleService = Depends(get_schedule_service),
):
    return service.check_conflicts(data)


@router.get("/{schedule_id}", response_model=ScheduleResponse)
async def get_schedule(
    schedule_id: int,
    service: ScheduleService = Depends(get_schedule_service),
):
    return schedule_to_dict(service.get_schedule(schedule_id))


@router.post("", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    data: ScheduleCreate,
    service: ScheduleService = Depends(get_schedule_service),
):
    return schedule_to_dict(service.create_schedule(data))


@router.patch("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    data: ScheduleChanges,
    service: ScheduleService = Depends(get_schedule_service),
):
    update = ScheduleUpdate(ScheduleNum=schedule_id, **data.model_dump(exclude_none=True))
    return schedule_to_dict(service.update_schedule(update))


@router.delete("/{schedule_id}")
async def delete_schedule(
    schedule_id: int,
    service: ScheduleService = Depends(get_schedule_service),
):
    return service.delete_schedule(schedule_id)
