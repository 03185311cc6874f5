from .availability import (
    AvailabilityRuleCreate,
    AvailabilityRuleUpdate,
    WeeklyScheduleReplace,
    BlockedDateCreate,
    AvailabilityRuleResponse,
    BlockedDateResponse,
    AvailableSlotsResponse,
)
from .appointment import BookingRequest, AppointmentActionRequest, AppointmentResponse

__all__ = [
    "AvailabilityRuleCreate",
    "AvailabilityRuleUpdate",
    "WeeklyScheduleReplace",
    "BlockedDateCreate",
    "AvailabilityRuleResponse",
    "BlockedDateResponse",
    "AvailableSlotsResponse",
    "BookingRequest",
    "AppointmentActionRequest",
    "AppointmentResponse",
]
