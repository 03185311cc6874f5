# ===== marketplace_booking/services/availability/availability_service.py =====
from typing import List, Optional
from datetime import date, time
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from marketplace_booking.core.exceptions import DataUnavailableError, NotFoundError, ValidationError
from marketplace_booking.models.availability import AvailabilityRule, BlockedDate
from marketplace_booking.models.appointment import Appointment, AppointmentStatus
from marketplace_booking.models.business import ResourceType
from marketplace_booking.services.availability.eligibility import EligibilityResolver
from marketplace_booking.services.availability.slot_generator import (
    SlotReport,
    build_slot_report,
    merge_slot_lists,
)
from marketplace_booking.services.business.business_service import BusinessService, Resource
import logging

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Fetches availability data and runs the slot generator over it"""

    # ------------------------------------------------------------------
    # Read interfaces
    # ------------------------------------------------------------------

    @staticmethod
    def get_availability_rules(db: Session, resource_id: UUID) -> List[AvailabilityRule]:
        return db.query(AvailabilityRule).filter(
            AvailabilityRule.resource_id == resource_id
        ).order_by(
            AvailabilityRule.day_of_week.asc(),
            AvailabilityRule.start_time.asc()
        ).all()

    @staticmethod
    def get_blocked_dates(db: Session, resource_id: UUID) -> List[BlockedDate]:
        return db.query(BlockedDate).filter(
            BlockedDate.resource_id == resource_id
        ).order_by(BlockedDate.date.asc()).all()

    @staticmethod
    def get_appointments(
            db: Session,
            resource_id: UUID,
            target_date: date,
            include_cancelled: bool = True
    ) -> List[Appointment]:
        query = db.query(Appointment).filter(
            Appointment.resource_id == resource_id,
            Appointment.date == target_date
        )
        if not include_cancelled:
            query = query.filter(Appointment.status != AppointmentStatus.CANCELLED.value)
        return query.order_by(Appointment.time.asc()).all()

    @staticmethod
    def get_eligible_resources(db: Session, service_id: UUID) -> List[UUID]:
        return EligibilityResolver.get_eligible_resources(db, service_id)

    # ------------------------------------------------------------------
    # Slot computation
    # ------------------------------------------------------------------

    @staticmethod
    def get_slot_report(db: Session, resource: Resource, target_date: date) -> SlotReport:
        """Slots of one resource for one date, with exclusions attributed"""
        if not resource.is_active:
            return build_slot_report(target_date)

        try:
            rules = AvailabilityService.get_availability_rules(db, resource.id)
            blocked = AvailabilityService.get_blocked_dates(db, resource.id)

            # Business blackout dates apply to every employee of the business
            if resource.resource_type == ResourceType.EMPLOYEE:
                blocked = blocked + AvailabilityService.get_blocked_dates(db, resource.business_id)

            appointments = AvailabilityService.get_appointments(db, resource.id, target_date)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load availability for resource {resource.id}: {e}")
            raise DataUnavailableError() from e

        report = build_slot_report(target_date, rules, blocked, appointments)

        if report.is_blocked:
            logger.debug(
                f"Resource {resource.id} blocked on {target_date}: {report.blocked_reason or 'no reason given'}"
            )
        elif report.occupied:
            logger.debug(f"Resource {resource.id} has {len(report.occupied)} booked slots on {target_date}")

        return report

    @staticmethod
    def get_bookable_service(db: Session, service_id: UUID):
        """Load a service that can currently take bookings"""
        try:
            service = EligibilityResolver.get_service(db, service_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load service {service_id}: {e}")
            raise DataUnavailableError() from e

        if not service or not service.is_active:
            raise NotFoundError(f"Service {service_id} not found")
        return service

    @staticmethod
    def get_eligible_employees(db: Session, service) -> List[Resource]:
        """Eligible employees of a service as resources, in booking order"""
        try:
            eligible = EligibilityResolver.get_eligible_resources(db, service.id)
            return [BusinessService.get_resource(db, employee_id) for employee_id in eligible]
        except SQLAlchemyError as e:
            logger.error(f"Failed to resolve employees for service {service.id}: {e}")
            raise DataUnavailableError() from e

    @staticmethod
    def compute_available_slots(
            db: Session,
            resource_id: Optional[UUID],
            target_date: date,
            service_id: Optional[UUID] = None
    ) -> List[time]:
        """
        Bookable slot start times for a date.

        With a resource_id only that resource is considered. Without one
        ("no preference") the slots of every employee eligible for the
        service are unioned; each employee's own bookings only block that
        employee.
        """
        service = None
        if service_id is not None:
            service = AvailabilityService.get_bookable_service(db, service_id)

        if resource_id is not None:
            resource = AvailabilityService.resolve_resource_for_service(db, resource_id, service)
            return AvailabilityService.get_slot_report(db, resource, target_date).available

        if service is None:
            raise ValidationError("service_id is required when no resource is selected")

        employees = AvailabilityService.get_eligible_employees(db, service)
        if not employees:
            logger.info(f"No employees offer service {service.id}")
            return []

        return merge_slot_lists(
            AvailabilityService.get_slot_report(db, resource, target_date).available
            for resource in employees
        )

    @staticmethod
    def resolve_resource_for_service(db: Session, resource_id: UUID, service=None) -> Resource:
        """Load a resource and check it can take bookings for the service"""
        try:
            resource = BusinessService.get_resource(db, resource_id)
            if service is None:
                return resource

            if resource.business_id != service.business_id:
                raise ValidationError("Resource does not belong to the service's business")

            if resource.resource_type == ResourceType.EMPLOYEE and \
                    not EligibilityResolver.is_eligible(db, service.id, resource.id):
                raise ValidationError("Employee does not offer this service")
        except SQLAlchemyError as e:
            logger.error(f"Failed to load resource {resource_id}: {e}")
            raise DataUnavailableError() from e

        return resource
