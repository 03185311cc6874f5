# marketplace_booking/models/appointment.py
from sqlalchemy import Column, String, Text, Date, Time, DateTime, ForeignKey, Index, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from marketplace_booking.models.base import Base
from marketplace_booking.utils.timeofday import format_time_of_day
import uuid
import enum


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AppointmentAction(str, enum.Enum):
    """Caller-initiated status changes"""
    CONFIRM = "confirm"
    CANCEL = "cancel"
    COMPLETE = "complete"


# action -> (allowed source states, target state)
STATUS_TRANSITIONS = {
    AppointmentAction.CONFIRM: (
        {AppointmentStatus.PENDING},
        AppointmentStatus.CONFIRMED,
    ),
    AppointmentAction.COMPLETE: (
        {AppointmentStatus.CONFIRMED},
        AppointmentStatus.COMPLETED,
    ),
    AppointmentAction.CANCEL: (
        {AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED},
        AppointmentStatus.CANCELLED,
    ),
}

TERMINAL_STATUSES = {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}


def next_status(current: str, action: AppointmentAction):
    """Target status for an action, or None when the move is not allowed"""
    sources, target = STATUS_TRANSITIONS[AppointmentAction(action)]
    if AppointmentStatus(current) not in sources:
        return None
    return target


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # At most one live booking per resource slot; cancelled rows never block
        Index(
            "uq_appointments_active_slot",
            "resource_id", "date", "time",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id"), nullable=False, index=True)
    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id"), nullable=False)
    customer_id = Column(UUID(as_uuid=True), nullable=False, index=True)

    # Resolved resource (employee, or the business itself)
    resource_id = Column(UUID(as_uuid=True), nullable=False)
    resource_type = Column(String(20), nullable=False)

    # Appointment details (local wall-clock, no timezone)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    notes = Column(Text, nullable=True)

    # Status tracking
    status = Column(String(20), nullable=False, default=AppointmentStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    @property
    def is_active(self) -> bool:
        return self.status != AppointmentStatus.CANCELLED.value

    def __repr__(self):
        return f"<Appointment(id={self.id}, resource_id={self.resource_id}, {self.date} {self.time}, {self.status})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "service_id": str(self.service_id),
            "customer_id": str(self.customer_id),
            "resource_id": str(self.resource_id),
            "resource_type": self.resource_type,
            "date": self.date.isoformat(),
            "time": format_time_of_day(self.time),
            "status": self.status,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "cancellation_reason": self.cancellation_reason,
        }
