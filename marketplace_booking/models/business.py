# marketplace_booking/models/business.py
"""
Business and Employee Models
Both are bookable resources: availability rules, blocked dates and
appointments reference them through a resource id.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
import enum
from marketplace_booking.models.base import Base


class ResourceType(str, enum.Enum):
    """Kinds of bookable resources"""
    BUSINESS = "business"
    EMPLOYEE = "employee"


class Business(Base):
    __tablename__ = "businesses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(UUID(as_uuid=True), nullable=False, index=True)  # user id of the owner
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    employees = relationship("Employee", back_populates="business")
    services = relationship("Service", back_populates="business")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    is_active = Column(Boolean, default=True)

    def __repr__(self):
        return f"<Business(id={self.id}, name={self.name})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "owner_id": str(self.owner_id),
            "name": self.name,
            "description": self.description,
            "is_active": self.is_active,
        }


class Employee(Base):
    __tablename__ = "employees"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        UUID(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id = Column(UUID(as_uuid=True), nullable=True)  # linked login, if the employee has one

    name = Column(String(200), nullable=False)
    title = Column(String(200), nullable=True)
    bio = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    business = relationship("Business", back_populates="employees")
    services = relationship(
        "Service",
        secondary="employee_services",
        back_populates="employees"
    )

    def __repr__(self):
        return f"<Employee(id={self.id}, name={self.name}, business_id={self.business_id})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "name": self.name,
            "title": self.title,
            "is_active": self.is_active,
        }
