# marketplace_booking/models/service.py
"""
Service Model - bookable services offered by a business
Employees are assigned to services through the employee_services table.
"""
from sqlalchemy import (
    Column, String, Numeric, Integer, ForeignKey, Boolean, DateTime, Text,
    Table, UniqueConstraint
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from marketplace_booking.models.base import Base


# Association table for many-to-many Employee <-> Service assignment
employee_services = Table(
    'employee_services',
    Base.metadata,
    Column('id', UUID(as_uuid=True), primary_key=True, default=uuid.uuid4),
    Column('employee_id', UUID(as_uuid=True), ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
    Column('service_id', UUID(as_uuid=True), ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
    Column('created_at', DateTime(timezone=True), server_default=func.now()),
    UniqueConstraint('employee_id', 'service_id', name='uq_employee_services_pair'),
)


class Service(Base):
    __tablename__ = "services"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        UUID(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    duration = Column(Integer, nullable=True)  # minutes

    is_active = Column(Boolean, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    business = relationship("Business", back_populates="services")
    employees = relationship(
        "Employee",
        secondary=employee_services,
        back_populates="services"
    )

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name}, business_id={self.business_id})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "name": self.name,
            "description": self.description,
            "price": float(self.price) if self.price is not None else None,
            "duration": self.duration,
            "is_active": self.is_active,
        }
