# ============================================================================
# marketplace_booking/services/appointment/booking_writer.py
# Commits bookings and drives the appointment status machine
# ============================================================================
"""
The slot list a customer picks from may be stale by the time they book.
The authoritative check is the partial unique index on
(resource_id, date, time) for non-cancelled appointments: whichever insert
lands second fails with an IntegrityError, which is reported as a
ConflictError so the caller can refresh the slots and choose again.
"""
from datetime import date, datetime, time, timezone
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from marketplace_booking.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from marketplace_booking.models.appointment import (
    Appointment,
    AppointmentAction,
    AppointmentStatus,
    next_status,
)
from marketplace_booking.services.availability.availability_service import AvailabilityService
from marketplace_booking.services.business.business_service import BusinessService, Resource
from marketplace_booking.services.events.booking_events import BookingEventBus, booking_events
from marketplace_booking.utils.timeofday import format_time_of_day, parse_date, parse_time_of_day

logger = logging.getLogger(__name__)


class BookingWriter:
    """Write side of the booking ledger"""

    @staticmethod
    def commit_booking(
            db: Session,
            resource_id: Optional[UUID],
            target_date: Union[str, date],
            slot_time: Union[str, time],
            customer_id: UUID,
            service_id: UUID,
            notes: Optional[str] = None,
            event_bus: BookingEventBus = booking_events
    ) -> Appointment:
        """
        Book a slot for a customer.

        With resource_id=None the first eligible employee (by name) who is
        free at that time gets the booking.

        Raises:
            ConflictError: the slot was taken since availability was read
            ValidationError: the time is not a bookable slot for the resource
        """
        try:
            day = parse_date(target_date)
            slot = parse_time_of_day(slot_time)
        except ValueError as e:
            raise ValidationError(str(e))

        service = AvailabilityService.get_bookable_service(db, service_id)

        if resource_id is not None:
            candidates = [AvailabilityService.resolve_resource_for_service(db, resource_id, service)]
        else:
            candidates = AvailabilityService.get_eligible_employees(db, service)
            if not candidates:
                raise ValidationError("No employee currently offers this service")

        slot_was_offered = False
        for resource in candidates:
            report = AvailabilityService.get_slot_report(db, resource, day)

            if slot in report.occupied:
                slot_was_offered = True
                continue
            if slot not in report.available:
                continue

            slot_was_offered = True
            appointment = BookingWriter._insert(db, resource, service, day, slot, customer_id, notes)
            if appointment is None:
                # Lost the race for this resource, try the next candidate
                continue

            logger.info(
                f"Booked {day} {slot} with resource {resource.id} for customer {customer_id} "
                f"(appointment {appointment.id})"
            )
            event_bus.publish("booking.created", appointment.to_dict())
            return appointment

        if slot_was_offered:
            raise ConflictError()
        raise ValidationError(f"{format_time_of_day(slot)} on {day.isoformat()} is not an available time")

    @staticmethod
    def _insert(
            db: Session,
            resource: Resource,
            service,
            day: date,
            slot: time,
            customer_id: UUID,
            notes: Optional[str]
    ) -> Optional[Appointment]:
        """Insert a pending appointment; None when the unique slot index rejects it"""
        appointment = Appointment(
            business_id=resource.business_id,
            service_id=service.id,
            customer_id=customer_id,
            resource_id=resource.id,
            resource_type=resource.resource_type.value,
            date=day,
            time=slot,
            notes=notes,
            status=AppointmentStatus.PENDING.value,
        )

        try:
            db.add(appointment)
            db.commit()
            db.refresh(appointment)
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Slot {day} {slot} on resource {resource.id} was taken concurrently: {e.orig}")
            return None
        except Exception as e:
            logger.error(f"Error creating appointment: {e}", exc_info=True)
            db.rollback()
            raise

        return appointment

    @staticmethod
    def transition(
            db: Session,
            appointment_id: UUID,
            caller_id: UUID,
            action: Union[str, AppointmentAction],
            reason: Optional[str] = None,
            event_bus: BookingEventBus = booking_events
    ) -> Appointment:
        """
        Apply confirm / cancel / complete.

        Only the resource owner may confirm or complete; the owner or the
        customer may cancel.
        """
        try:
            action = AppointmentAction(action)
        except ValueError:
            raise ValidationError(f"Unknown appointment action '{action}'")

        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFoundError("Appointment not found")

        resource = BusinessService.get_resource(db, appointment.resource_id)
        allowed = resource.is_owned_by(caller_id)
        if action == AppointmentAction.CANCEL:
            allowed = allowed or caller_id == appointment.customer_id
        if not allowed:
            raise AuthorizationError("You are not allowed to change this appointment")

        target = next_status(appointment.status, action)
        if target is None:
            raise InvalidStatusTransitionError(
                f"Cannot {action.value} an appointment that is {appointment.status}"
            )

        try:
            appointment.status = target.value
            if target == AppointmentStatus.CANCELLED:
                appointment.cancelled_at = datetime.now(timezone.utc)
                appointment.cancellation_reason = reason
            db.commit()
            db.refresh(appointment)
        except Exception as e:
            logger.error(f"Error updating appointment {appointment_id}: {e}", exc_info=True)
            db.rollback()
            raise

        logger.info(f"Appointment {appointment.id} is now {appointment.status}")
        event_bus.publish(f"booking.{target.value}", appointment.to_dict())
        return appointment
