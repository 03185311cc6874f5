"""
Pydantic schemas for booking requests and appointment responses
"""
import datetime as dt
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from marketplace_booking.utils.timeofday import parse_time_of_day


class BookingRequest(BaseModel):
    """Book a slot; leave resource_id empty for "no preference\""""
    service_id: UUID
    date: dt.date
    time: dt.time = Field(..., description="Slot start, HH:MM or HH:MM:SS")
    resource_id: Optional[UUID] = Field(None, description="Employee or business; empty for no preference")
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator('time', mode='before')
    @classmethod
    def parse_wall_clock(cls, v):
        return parse_time_of_day(v)


class AppointmentActionRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class AppointmentResponse(BaseModel):
    id: str
    business_id: str
    service_id: str
    customer_id: str
    resource_id: str
    resource_type: str
    date: str
    time: str
    status: str
    notes: Optional[str] = None
    created_at: Optional[str] = None
    cancelled_at: Optional[str] = None
    cancellation_reason: Optional[str] = None
