from datetime import date

from marketplace_booking.scripts.seed_availability import seed_availability
from marketplace_booking.services.availability.availability_service import AvailabilityService
from tests.conftest import MONDAY, SUNDAY, t


def test_seeded_schedule_is_bookable(db):
    ids = seed_availability(db, blocked_on=date(2026, 12, 25))

    business_slots = AvailabilityService.compute_available_slots(db, ids["business_id"], MONDAY, ids["service_id"])
    assert business_slots[0] == t("09:00")
    assert business_slots[-1] == t("16:30")
    assert len(business_slots) == 16

    # no preference resolves to the only employee
    assert AvailabilityService.compute_available_slots(db, None, MONDAY, ids["service_id"]) == [
        t("09:00"), t("10:00"), t("11:00")
    ]

    assert AvailabilityService.compute_available_slots(db, ids["employee_id"], SUNDAY) == []


def test_business_holiday_closes_employee_too(db):
    ids = seed_availability(db, blocked_on=MONDAY)

    assert AvailabilityService.compute_available_slots(db, ids["business_id"], MONDAY) == []
    assert AvailabilityService.compute_available_slots(db, ids["employee_id"], MONDAY) == []
