"""Appointment domain schemas - one typed request per lifecycle operation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import APPOINTMENT_STATUSES, STATUS_SCHEDULED
from ...shared.validators import parse_date, parse_datetime


def _validate_status(v):
    if v is not None and v not in APPOINTMENT_STATUSES:
        raise ValueError(f"AptStatus must be one of {', '.join(APPOINTMENT_STATUSES)}")
    return v


def _validate_pattern(v):
    if v is not None and "X" not in v:
        raise ValueError("Pattern must contain at least one 'X' block (e.g. /XXXXXX/ for 30 minutes)")
    return v


class AppointmentCreate(BaseModel):
    """Schema for CreateAppointment"""

    PatNum: int
    AptDateTime: datetime
    Op: int
    ProvNum: int
    Note: Optional[str] = None
    Pattern: Optional[str] = None
    AptStatus: str = STATUS_SCHEDULED

    @field_validator("AptDateTime", mode="before")
    @classmethod
    def validate_datetime(cls, v):
        return parse_datetime(v)

    @field_validator("AptStatus")
    @classmethod
    def validate_status(cls, v):
        return _validate_status(v)

    @field_validator("Pattern")
    @classmethod
    def validate_pattern(cls, v):
        return _validate_pattern(v)


class AppointmentChanges(BaseModel):
    """Fields an update may change; all optional"""

    AptDateTime: Optional[datetime] = None
    Op: Optional[int] = None
    ProvNum: Optional[int] = None
    AptStatus: Optional[str] = None
    Note: Optional[str] = None
    Pattern: Optional[str] = None

    @field_validator("AptDateTime", mode="before")
    @classmethod
    def validate_datetime(cls, v):
        return parse_datetime(v)

    @field_validator("AptStatus")
    @classmethod
    def validate_status(cls, v):
        return _validate_status(v)

    @field_validator("Pattern")
    @classmethod
    def validate_pattern(cls, v):
        return _validate_pattern(v)


class AppointmentUpdate(AppointmentChanges):
    """Schema for UpdateAppointment"""

    AptNum: int


class AppointmentBreak(BaseModel):
    """Schema for BreakAppointment"""

    AptNum: int
    sendToUnscheduledList: bool = True


class AppointmentDelete(BaseModel):
    """Schema for DeleteAppointment"""

    AptNum: int


class AppointmentFilter(BaseModel):
    """Schema for GetAppointments filters"""

    DateStart: Optional[date] = None
    DateEnd: Optional[date] = None
    PatNum: Optional[int] = None
    ProvNum: Optional[int] = None
    OpNum: Optional[int] = None
    status: Optional[str] = None

    @field_validator("DateStart", "DateEnd", mode="before")
    @classmethod
    def validate_dates(cls, v):
        return parse_date(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _validate_status(v)


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""

    AptNum: int
    PatNum: int
    ProvNum: int
    Op: int
    AptDateTime: str
    AptStatus: str
    Note: str = ""
    Pattern: str
    PatientName: Optional[str] = None
    ProviderName: Optional[str] = None
    OperatoryName: Optional[str] = None


class BreakResponse(BaseModel):
    AptNum: int
    AptStatus: str
    success: bool = True


class DeleteResponse(BaseModel):
    success: bool
    AptNum: int
