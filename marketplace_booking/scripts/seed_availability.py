# ===== marketplace_booking/scripts/seed_availability.py =====
"""Seed a demo business with one employee, one service and a weekday schedule"""
import logging
import uuid
from datetime import date, time, timedelta
from typing import Dict, Optional

from sqlalchemy.orm import Session

from marketplace_booking.config.database import SessionLocal, create_tables
from marketplace_booking.models import (
    AvailabilityRule,
    BlockedDate,
    Business,
    Employee,
    ResourceType,
    Service,
)
from marketplace_booking.utils.my_logging import setup_logging

logger = logging.getLogger(__name__)


def seed_availability(db: Session, owner_id: Optional[uuid.UUID] = None,
                      blocked_on: Optional[date] = None) -> Dict[str, uuid.UUID]:
    """Create the demo records and return their ids"""
    owner_id = owner_id or uuid.uuid4()
    blocked_on = blocked_on or date.today() + timedelta(days=14)

    try:
        business = Business(id=uuid.uuid4(), owner_id=owner_id, name="Demo Studio")
        employee = Employee(id=uuid.uuid4(), business=business, name="Alex", title="Stylist")
        service = Service(id=uuid.uuid4(), business=business, name="Haircut", duration=30, price=35)
        employee.services.append(service)

        rules = []
        # Monday-Friday 9-5 for the business, 30 min slots
        for day in range(1, 6):  # 1=Monday ... 5=Friday
            rules.append(AvailabilityRule(
                resource_id=business.id,
                resource_type=ResourceType.BUSINESS.value,
                day_of_week=day,
                start_time=time(9, 0),
                end_time=time(17, 0),
                slot_duration_minutes=30,
            ))
            # Employee works mornings with 60 min slots
            rules.append(AvailabilityRule(
                resource_id=employee.id,
                resource_type=ResourceType.EMPLOYEE.value,
                day_of_week=day,
                start_time=time(9, 0),
                end_time=time(12, 0),
                slot_duration_minutes=60,
            ))

        day_off = BlockedDate(
            resource_id=business.id,
            resource_type=ResourceType.BUSINESS.value,
            date=blocked_on,
            reason="Holiday",
        )

        db.add_all([business, employee, service, day_off] + rules)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error seeding availability: {e}", exc_info=True)
        raise

    logger.info(f"Seeded demo business {business.id} with {len(rules)} availability rules")
    return {
        "business_id": business.id,
        "employee_id": employee.id,
        "service_id": service.id,
        "owner_id": owner_id,
    }


if __name__ == "__main__":
    setup_logging(verbose=False)
    create_tables()
    session = SessionLocal()
    try:
        ids = seed_availability(session)
        for name, value in ids.items():
            print(f"{name}: {value}")
    finally:
        session.close()
