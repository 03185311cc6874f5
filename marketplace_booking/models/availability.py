# marketplace_booking/models/availability.py
from sqlalchemy import Column, String, Integer, Time, Date, DateTime, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from marketplace_booking.models.base import Base
from marketplace_booking.utils.timeofday import format_time_of_day
import uuid


class AvailabilityRule(Base):
    """Recurring weekly availability window of a business or employee"""
    __tablename__ = "availability_rules"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    resource_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    resource_type = Column(String(20), nullable=False)  # business, employee

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    slot_duration_minutes = Column(Integer, nullable=False, default=30)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return (
            f"<AvailabilityRule(resource_id={self.resource_id}, day={self.day_of_week}, "
            f"{self.start_time}-{self.end_time}/{self.slot_duration_minutes}m)>"
        )

    def to_dict(self):
        return {
            "id": str(self.id),
            "resource_id": str(self.resource_id),
            "resource_type": self.resource_type,
            "day_of_week": self.day_of_week,
            "start_time": format_time_of_day(self.start_time) if self.start_time else None,
            "end_time": format_time_of_day(self.end_time) if self.end_time else None,
            "slot_duration_minutes": self.slot_duration_minutes,
        }


class BlockedDate(Base):
    """One-off date on which a resource takes no bookings (holiday, vacation)"""
    __tablename__ = "blocked_dates"
    __table_args__ = (
        UniqueConstraint("resource_id", "date", name="uq_blocked_dates_resource_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    resource_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    resource_type = Column(String(20), nullable=False)

    date = Column(Date, nullable=False)
    reason = Column(String, nullable=True)  # "Holiday", "Vacation", etc.

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            "id": str(self.id),
            "resource_id": str(self.resource_id),
            "resource_type": self.resource_type,
            "date": self.date.isoformat(),
            "reason": self.reason,
        }
