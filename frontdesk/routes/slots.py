"""Slot router - availability search"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..config import SchedulingConfig
from ..database import get_db
from ..dependencies import get_organization_id, get_scheduling_config
from ..domain.scheduling.schemas import SlotResponse, SlotSearchRequest
from ..domain.scheduling.slots import SlotGenerator
from ..functions.adapters import build_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/slots", tags=["Slots"])


def get_slot_generator(
    db: Session = Depends(get_db),
    config: SchedulingConfig = Depends(get_scheduling_config),
    organization_id: Optional[int] = Depends(get_organization_id),
) -> SlotGenerator:
    """Dependency injection for SlotGenerator"""
    return SlotGenerator(db, config, organization_id)


@router.get("", response_model=list[SlotResponse])
async def get_available_slots(
    date_start: str = Query(..., alias="dateStart"),
    date_end: str = Query(..., alias="dateEnd"),
    provider_id: Optional[str] = Query(None, alias="ProvNum"),
    operatory_id: Optional[str] = Query(None, alias="OpNum"),
    length_minutes: int = Query(30, alias="lengthMinutes"),
    search_all: bool = Query(False, alias="searchAll"),
    generator: SlotGenerator = Depends(get_slot_generator),
):
    """Free slots between dateStart and dateEnd (inclusive)"""
    request = build_request(
        SlotSearchRequest,
        {
            "dateStart": date_start,
            "dateEnd": date_end,
            "ProvNum": provider_id,
            "OpNum": operatory_id,
            "lengthMinutes": length_minutes,
            "searchAll": search_all,
        },
    )
    slots = generator.generate(
        request.dateStart,
        request.dateEnd,
        provider_id=request.ProvNum,
        operatory_id=request.OpNum,
        length_minutes=request.lengthMinutes,
        search_all=request.searchAll,
    )
    return [slot.to_dict() for slot in slots]
