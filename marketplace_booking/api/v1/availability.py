# ============================================================================
# marketplace_booking/api/v1/availability.py
# Slot lookup plus owner-side availability editing - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional
from uuid import UUID

from marketplace_booking.api.dependencies import get_caller_id
from marketplace_booking.config.database import get_db
from marketplace_booking.schemas.availability import (
    AvailabilityRuleCreate,
    AvailabilityRuleUpdate,
    AvailabilityRuleResponse,
    AvailableSlotsResponse,
    BlockedDateCreate,
    BlockedDateResponse,
    WeeklyScheduleReplace,
)
from marketplace_booking.services.availability.availability_service import AvailabilityService
from marketplace_booking.services.availability.rule_editor import AvailabilityRuleEditor
from marketplace_booking.utils.timeofday import format_time_of_day

router = APIRouter(tags=["availability"])

NO_SLOTS_MESSAGE = "No available times this day"


@router.get("/availability/slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
        date: date = Query(..., description="Day to book, YYYY-MM-DD"),
        service_id: Optional[UUID] = Query(None, description="Requested service"),
        resource_id: Optional[UUID] = Query(None, description="Employee or business; omit for no preference"),
        db: Session = Depends(get_db)
):
    """
    Bookable start times for a date.
    An empty list means the day has no free times, not an error.
    """
    slots = AvailabilityService.compute_available_slots(
        db=db,
        resource_id=resource_id,
        target_date=date,
        service_id=service_id
    )

    return AvailableSlotsResponse(
        date=date.isoformat(),
        service_id=str(service_id) if service_id else None,
        resource_id=str(resource_id) if resource_id else None,
        slots=[format_time_of_day(s) for s in slots],
        message=None if slots else NO_SLOTS_MESSAGE
    )


# ============================================================================
# Weekly rules
# ============================================================================

@router.get("/resources/{resource_id}/availability-rules", response_model=List[AvailabilityRuleResponse])
async def list_availability_rules(
        resource_id: UUID = Path(..., description="Business or employee ID"),
        db: Session = Depends(get_db)
):
    rules = AvailabilityRuleEditor.list_rules(db, resource_id)
    return [r.to_dict() for r in rules]


@router.post(
    "/resources/{resource_id}/availability-rules",
    response_model=AvailabilityRuleResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_availability_rule(
        rule: AvailabilityRuleCreate,
        resource_id: UUID = Path(...),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    created = AvailabilityRuleEditor.create_rule(
        db=db,
        caller_id=caller_id,
        resource_id=resource_id,
        day_of_week=rule.day_of_week,
        start_time=rule.start_time,
        end_time=rule.end_time,
        slot_duration_minutes=rule.slot_duration_minutes
    )
    return created.to_dict()


@router.put("/resources/{resource_id}/availability-rules", response_model=List[AvailabilityRuleResponse])
async def replace_availability_rules(
        schedule: WeeklyScheduleReplace,
        resource_id: UUID = Path(...),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    """Save the whole weekly schedule at once"""
    rules = AvailabilityRuleEditor.replace_rules(
        db=db,
        caller_id=caller_id,
        resource_id=resource_id,
        rules=[r.model_dump() for r in schedule.rules]
    )
    return [r.to_dict() for r in rules]


@router.patch("/availability-rules/{rule_id}", response_model=AvailabilityRuleResponse)
async def update_availability_rule(
        changes: AvailabilityRuleUpdate,
        rule_id: UUID = Path(...),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    rule = AvailabilityRuleEditor.update_rule(
        db=db,
        caller_id=caller_id,
        rule_id=rule_id,
        **changes.model_dump(exclude_unset=True)
    )
    return rule.to_dict()


@router.delete("/availability-rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability_rule(
        rule_id: UUID = Path(...),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    AvailabilityRuleEditor.delete_rule(db, caller_id, rule_id)


# ============================================================================
# Blocked dates
# ============================================================================

@router.get("/resources/{resource_id}/blocked-dates", response_model=List[BlockedDateResponse])
async def list_blocked_dates(
        resource_id: UUID = Path(...),
        db: Session = Depends(get_db)
):
    return [b.to_dict() for b in AvailabilityRuleEditor.list_blocked_dates(db, resource_id)]


@router.post(
    "/resources/{resource_id}/blocked-dates",
    response_model=BlockedDateResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_blocked_date(
        blocked: BlockedDateCreate,
        resource_id: UUID = Path(...),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    entry = AvailabilityRuleEditor.add_blocked_date(
        db=db,
        caller_id=caller_id,
        resource_id=resource_id,
        blocked_date=blocked.date,
        reason=blocked.reason
    )
    return entry.to_dict()


@router.delete("/blocked-dates/{blocked_date_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_blocked_date(
        blocked_date_id: UUID = Path(...),
        caller_id: UUID = Depends(get_caller_id),
        db: Session = Depends(get_db)
):
    AvailabilityRuleEditor.remove_blocked_date(db, caller_id, blocked_date_id)
