# marketplace_booking/services/availability/eligibility.py
"""Which employees may perform a service"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace_booking.models.business import Employee
from marketplace_booking.models.service import Service, employee_services


class EligibilityResolver:
    """Resolves the candidate employees for "no preference" requests"""

    @staticmethod
    def get_service(db: Session, service_id: UUID) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def get_eligible_resources(db: Session, service_id: UUID) -> List[UUID]:
        """Active employees assigned to the service, in a stable order"""
        rows = (
            db.query(Employee.id)
            .join(employee_services, employee_services.c.employee_id == Employee.id)
            .filter(
                employee_services.c.service_id == service_id,
                Employee.is_active == True
            )
            .order_by(Employee.name.asc(), Employee.id.asc())
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def is_eligible(db: Session, service_id: UUID, employee_id: UUID) -> bool:
        return employee_id in EligibilityResolver.get_eligible_resources(db, service_id)
