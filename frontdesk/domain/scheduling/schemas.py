"""Scheduling domain schemas - Pydantic models for validation

Field names follow the function-call surface (ProvNum, OpNum, ...) because
external callers match on them.
"""

from datetime import date, time
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import parse_date, parse_time


class SlotSearchRequest(BaseModel):
    """Schema for GetAvailableSlots"""

    dateStart: date
    dateEnd: date
    ProvNum: Optional[int] = None
    OpNum: Optional[int] = None
    lengthMinutes: int = 30
    searchAll: bool = False

    @field_validator("dateStart", "dateEnd", mode="before")
    @classmethod
    def validate_dates(cls, v):
        return parse_date(v)

    @field_validator("ProvNum", "OpNum", mode="before")
    @classmethod
    def blank_id_means_any(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("lengthMinutes")
    @classmethod
    def validate_length(cls, v):
        if v <= 0:
            raise ValueError("lengthMinutes must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_range(self):
        if self.dateEnd < self.dateStart:
            raise ValueError("dateEnd must not be before dateStart")
        return self


class SlotResponse(BaseModel):
    """Schema for one available slot"""

    DateTimeStart: str
    DateTimeEnd: str
    ProvNum: int
    OpNum: int
    LengthMinutes: int
    ProviderName: Optional[str] = None


class _ScheduleTimes(BaseModel):
    @field_validator("StartTime", "EndTime", mode="before", check_fields=False)
    @classmethod
    def validate_times(cls, v):
        return parse_time(v)


class ScheduleCreate(_ScheduleTimes):
    """Schema for creating a schedule entry"""

    ProvNum: int
    OpNum: int
    ScheduleDate: date
    StartTime: time
    EndTime: time
    IsActive: bool = True

    @field_validator("ScheduleDate", mode="before")
    @classmethod
    def validate_date(cls, v):
        return parse_date(v)

    @model_validator(mode="after")
    def validate_window(self):
        if self.StartTime >= self.EndTime:
            raise ValueError("StartTime must be before EndTime")
        return self


class ScheduleChanges(_ScheduleTimes):
    """Fields a schedule update may change; all optional"""

    ProvNum: Optional[int] = None
    OpNum: Optional[int] = None
    ScheduleDate: Optional[date] = None
    StartTime: Optional[time] = None
    EndTime: Optional[time] = None
    IsActive: Optional[bool] = None

    @field_validator("ScheduleDate", mode="before")
    @classmethod
    def validate_date(cls, v):
        return parse_date(v)

    def has_changes(self) -> bool:
        return any(
            value is not None
            for value in (self.ProvNum, self.OpNum, self.ScheduleDate, self.StartTime, self.EndTime, self.IsActive)
        )


class ScheduleUpdate(ScheduleChanges):
    """Schema for updating a schedule entry"""

    ScheduleNum: int


class ScheduleFilter(BaseModel):
    """Schema for GetSchedules / GetProviderSchedules filters"""

    ProvNum: Optional[int] = None
    OpNum: Optional[int] = None
    ScheduleDate: Optional[date] = None
    DateStart: Optional[date] = None
    DateEnd: Optional[date] = None
    is_active: Optional[bool] = None

    @field_validator("ScheduleDate", "DateStart", "DateEnd", mode="before")
    @classmethod
    def validate_dates(cls, v):
        return parse_date(v)


class DefaultSchedulesRequest(_ScheduleTimes):
    """Schema for bulk-creating one schedule per day over a range"""

    ProvNum: int
    OpNum: int
    DateStart: date
    DateEnd: date
    StartTime: time = time(9, 0)
    EndTime: time = time(17, 0)
    IncludeWeekends: bool = False

    @field_validator("DateStart", "DateEnd", mode="before")
    @classmethod
    def validate_dates(cls, v):
        return parse_date(v)

    @model_validator(mode="after")
    def validate_range(self):
        if self.DateEnd < self.DateStart:
            raise ValueError("DateEnd must be after DateStart")
        if self.StartTime >= self.EndTime:
            raise ValueError("StartTime must be before EndTime")
        return self


class ScheduleConflictCheck(_ScheduleTimes):
    """Schema for CheckScheduleConflicts"""

    ProvNum: int
    OpNum: int
    ScheduleDate: date
    StartTime: time
    EndTime: time
    ExcludeScheduleNum: Optional[int] = None

    @field_validator("ScheduleDate", mode="before")
    @classmethod
    def validate_date(cls, v):
        return parse_date(v)


class ScheduleResponse(BaseModel):
    """Schema for schedule response"""

    ScheduleNum: int
    ProvNum: int
    ProviderName: Optional[str] = None
    OpNum: int
    OperatoryName: Optional[str] = None
    ScheduleDate: str
    StartTime: str
    EndTime: str
    IsActive: bool
