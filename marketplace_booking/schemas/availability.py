"""
Pydantic schemas for availability rules, blocked dates and slot queries
"""
import datetime as dt
from datetime import time
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from marketplace_booking.utils.timeofday import parse_time_of_day


# ============================================================================
# Request Schemas (for incoming data)
# ============================================================================

class AvailabilityRuleCreate(BaseModel):
    """One weekly window; day_of_week 0 = Sunday"""
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: time = Field(..., description="HH:MM or HH:MM:SS, local wall-clock")
    end_time: time = Field(..., description="HH:MM or HH:MM:SS, local wall-clock")
    slot_duration_minutes: Optional[int] = Field(None, gt=0, description="Slot length in minutes")

    @field_validator('start_time', 'end_time', mode='before')
    @classmethod
    def parse_wall_clock(cls, v):
        return parse_time_of_day(v)

    @model_validator(mode='after')
    def check_window(self):
        if self.start_time >= self.end_time:
            raise ValueError('Start time must be before end time')
        return self


class AvailabilityRuleUpdate(BaseModel):
    """Partial update; only send what changes"""
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    slot_duration_minutes: Optional[int] = Field(None, gt=0)

    @field_validator('start_time', 'end_time', mode='before')
    @classmethod
    def parse_wall_clock(cls, v):
        if v is None:
            return v
        return parse_time_of_day(v)


class WeeklyScheduleReplace(BaseModel):
    """Full weekly schedule for bulk save"""
    rules: List[AvailabilityRuleCreate] = Field(default_factory=list)


class BlockedDateCreate(BaseModel):
    date: dt.date
    reason: Optional[str] = Field(None, max_length=500)


# ============================================================================
# Response Schemas (for outgoing data)
# ============================================================================

class AvailabilityRuleResponse(BaseModel):
    id: str
    resource_id: str
    resource_type: str
    day_of_week: int
    start_time: str
    end_time: str
    slot_duration_minutes: int


class BlockedDateResponse(BaseModel):
    id: str
    resource_id: str
    resource_type: str
    date: str
    reason: Optional[str] = None


class AvailableSlotsResponse(BaseModel):
    date: str
    service_id: Optional[str] = None
    resource_id: Optional[str] = None
    slots: List[str]
    message: Optional[str] = None
