"""Shared FastAPI dependencies"""

from functools import lru_cache
from typing import Optional

from fastapi import Header

from .config import SchedulingConfig


@lru_cache
def get_scheduling_config() -> SchedulingConfig:
    return SchedulingConfig.from_env()


def get_organization_id(x_organization_id: Optional[int] = Header(None)) -> Optional[int]:
    """Optional tenant scope; absent header means unscoped"""
    return x_organization_id
