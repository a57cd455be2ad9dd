"""
Booking function endpoint

One POST carries {"functionName": ..., "parameters": {...}}. Domain errors
are not caught here; the BookingError handler in main.py renders the
error envelope.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..config import SchedulingConfig
from ..database import get_db
from ..dependencies import get_organization_id, get_scheduling_config
from ..functions import FUNCTION_REGISTRY, call_function

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Booking"])


class BookingFunctionCall(BaseModel):
    functionName: str
    parameters: Optional[dict[str, Any]] = None


@router.post("/booking")
async def booking_function(
    call: BookingFunctionCall,
    db: Session = Depends(get_db),
    config: SchedulingConfig = Depends(get_scheduling_config),
    organization_id: Optional[int] = Depends(get_organization_id),
):
    data = call_function(call.functionName, call.parameters, db, config, organization_id)
    return {"success": True, "data": data}


@router.get("/booking/functions")
async def list_booking_functions():
    """Names accepted by POST /booking"""
    return {"functions": sorted(FUNCTION_REGISTRY)}
