# marketplace_booking/services/business/business_service.py
"""Service for resolving businesses and employees as bookable resources"""
from typing import Optional, Set
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.orm import Session
import logging

from marketplace_booking.core.exceptions import NotFoundError, AuthorizationError
from marketplace_booking.models.business import Business, Employee, ResourceType

logger = logging.getLogger(__name__)


class Resource(BaseModel):
    """A business or employee that can hold availability and bookings"""
    id: UUID
    resource_type: ResourceType
    business_id: UUID
    owner_ids: Set[UUID]  # callers allowed to manage this resource
    is_active: bool = True

    def is_owned_by(self, caller_id: Optional[UUID]) -> bool:
        return caller_id is not None and caller_id in self.owner_ids


class BusinessService:
    """Handles business/employee resource lookups"""

    @staticmethod
    def get_business(db: Session, business_id: UUID) -> Optional[Business]:
        return db.query(Business).filter(Business.id == business_id).first()

    @staticmethod
    def find_resource(db: Session, resource_id: UUID) -> Optional[Resource]:
        """Look up a resource id as a business first, then as an employee"""
        business = db.query(Business).filter(Business.id == resource_id).first()
        if business:
            return Resource(
                id=business.id,
                resource_type=ResourceType.BUSINESS,
                business_id=business.id,
                owner_ids={business.owner_id},
                is_active=bool(business.is_active),
            )

        employee = db.query(Employee).filter(Employee.id == resource_id).first()
        if employee:
            owner_ids = {employee.business.owner_id}
            if employee.user_id:
                owner_ids.add(employee.user_id)
            return Resource(
                id=employee.id,
                resource_type=ResourceType.EMPLOYEE,
                business_id=employee.business_id,
                owner_ids=owner_ids,
                is_active=bool(employee.is_active) and bool(employee.business.is_active),
            )

        return None

    @staticmethod
    def get_resource(db: Session, resource_id: UUID) -> Resource:
        resource = BusinessService.find_resource(db, resource_id)
        if not resource:
            raise NotFoundError(f"Resource {resource_id} not found")
        return resource

    @staticmethod
    def require_owner(resource: Resource, caller_id: Optional[UUID]) -> None:
        """Raise unless the caller manages the resource"""
        if not resource.is_owned_by(caller_id):
            logger.warning(f"Caller {caller_id} denied access to resource {resource.id}")
            raise AuthorizationError()
