# ============================================================================
# marketplace_booking/api/v1/appointments.py
# Booking and appointment status endpoints - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Path, status
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from marketplace_booking.api.dependencies import get_caller_id
from marketplace_booking.config.database import get_db
from marketplace_booking.models.appointment import AppointmentAction
from marketplace_booking.schemas.appointment import (
    AppointmentActionRequest,
    AppointmentResponse,
    BookingRequest,
)
from marketplace_booking.services.appointment.appointment_query_service import AppointmentQueryService
from marketplace_booking.services.appointment.booking_writer import BookingWriter

router = APIRouter(tags=["appointments"])


@router.post("/appointments", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
        booking: BookingRequest,
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    """
    Book a slot for the authenticated customer.
    Returns 409 when the time was taken since the slots were loaded.
    """
    appointment = BookingWriter.commit_booking(
        db=db,
        resource_id=booking.resource_id,
        target_date=booking.date,
        slot_time=booking.time,
        customer_id=caller_id,
        service_id=booking.service_id,
        notes=booking.notes
    )
    return appointment.to_dict()


@router.get("/resources/{resource_id}/appointments")
async def list_resource_appointments(
        resource_id: UUID = Path(..., description="Business or employee ID"),
        date: Optional[date] = Query(None, description="Only this day"),
        status: Optional[str] = Query(None, description="pending, confirmed, completed or cancelled"),
        skip: int = Query(0, ge=0, description="Number of records to skip"),
        limit: int = Query(50, ge=1, le=100, description="Number of records to return"),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    """Appointments held by a resource. Owners only."""
    return AppointmentQueryService.list_appointments(
        db=db,
        resource_id=resource_id,
        caller_id=caller_id,
        target_date=date,
        status=status,
        skip=skip,
        limit=limit
    )


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    result = AppointmentQueryService.get_appointment(db, appointment_id, caller_id)
    if not result:
        raise HTTPException(
            status_code=404,
            detail="Appointment not found or you don't have access to it"
        )
    return result


def _apply(db: Session, appointment_id: UUID, caller_id: UUID, action: AppointmentAction,
           reason: Optional[str] = None):
    appointment = BookingWriter.transition(
        db=db,
        appointment_id=appointment_id,
        caller_id=caller_id,
        action=action,
        reason=reason
    )
    return appointment.to_dict()


@router.post("/appointments/{appointment_id}/confirm", response_model=AppointmentResponse)
async def confirm_appointment(
        appointment_id: UUID = Path(...),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    return _apply(db, appointment_id, caller_id, AppointmentAction.CONFIRM)


@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
        appointment_id: UUID = Path(...),
        body: Optional[AppointmentActionRequest] = Body(None),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    return _apply(db, appointment_id, caller_id, AppointmentAction.CANCEL, body.reason if body else None)


@router.post("/appointments/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment(
        appointment_id: UUID = Path(...),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    return _apply(db, appointment_id, caller_id, AppointmentAction.COMPLETE)
