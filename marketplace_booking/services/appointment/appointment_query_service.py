# ============================================================================
# marketplace_booking/services/appointment/appointment_query_service.py
# Pure business logic - no FastAPI dependencies, fully testable
# ============================================================================
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional, Dict, Any
from uuid import UUID

from marketplace_booking.core.exceptions import ValidationError
from marketplace_booking.models.appointment import Appointment, AppointmentStatus
from marketplace_booking.services.business.business_service import BusinessService


class AppointmentQueryService:
    """Read side of the booking ledger"""

    @staticmethod
    def list_appointments(
            db: Session,
            resource_id: UUID,
            caller_id: UUID,
            target_date: Optional[date] = None,
            status: Optional[str] = None,
            skip: int = 0,
            limit: int = 50
    ) -> Dict[str, Any]:
        """Paginated appointments of a resource, visible to its owners only."""
        resource = BusinessService.get_resource(db, resource_id)
        BusinessService.require_owner(resource, caller_id)

        query = db.query(Appointment).filter(Appointment.resource_id == resource.id)

        if target_date:
            query = query.filter(Appointment.date == target_date)
        if status:
            try:
                status = AppointmentStatus(status).value
            except ValueError:
                raise ValidationError(f"Unknown status '{status}'")
            query = query.filter(Appointment.status == status)

        query = query.order_by(Appointment.date.asc(), Appointment.time.asc())
        total = query.count()
        appointments = query.offset(skip).limit(limit).all()

        return {
            "resource_id": str(resource.id),
            "total_appointments": total,
            "page": {
                "skip": skip,
                "limit": limit,
                "total_pages": (total + limit - 1) // limit if total > 0 else 0
            },
            "filters": {
                "date": target_date.isoformat() if target_date else None,
                "status": status,
            },
            "appointments": [a.to_dict() for a in appointments]
        }

    @staticmethod
    def get_appointment(db: Session, appointment_id: UUID, caller_id: UUID) -> Optional[Dict[str, Any]]:
        """Appointment details for its customer or the resource owners; None otherwise."""
        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            return None

        if appointment.customer_id != caller_id:
            resource = BusinessService.find_resource(db, appointment.resource_id)
            if not resource or not resource.is_owned_by(caller_id):
                return None

        return appointment.to_dict()
