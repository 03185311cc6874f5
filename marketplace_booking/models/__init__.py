# marketplace_booking/models/__init__.py
from .base import Base
from .business import Business, Employee, ResourceType
from .service import Service, employee_services
from .availability import AvailabilityRule, BlockedDate
from .appointment import Appointment, AppointmentStatus, AppointmentAction

__all__ = [
    "Base",
    "Business",
    "Employee",
    "ResourceType",
    "Service",
    "employee_services",
    "AvailabilityRule",
    "BlockedDate",
    "Appointment",
    "AppointmentStatus",
    "AppointmentAction",
]
