# ============================================================================
# marketplace_booking/services/availability/slot_generator.py
# Pure slot expansion - no database access, safe to call with any snapshot
# ============================================================================
"""
Turns one resource's weekly availability rules, blocked dates and existing
appointments into the bookable slot start times of a single calendar date.

Inputs are read by attribute, so ORM rows and plain objects both work:
    rules:         day_of_week, start_time, end_time, slot_duration_minutes
    blocked_dates: date, reason
    appointments:  date, time, status
"""
from datetime import date, time
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from marketplace_booking.models.appointment import AppointmentStatus
from marketplace_booking.utils.timeofday import (
    day_of_week,
    parse_date,
    parse_time_of_day,
    seconds_since_midnight,
    time_from_seconds,
)


class SlotReport(BaseModel):
    """Bookable slots of one resource/date plus what was excluded and why"""
    target_date: date
    day_of_week: int
    available: List[time] = Field(default_factory=list)
    occupied: List[time] = Field(default_factory=list)  # removed by non-cancelled bookings
    blocked_date: Optional[date] = None
    blocked_reason: Optional[str] = None

    @property
    def is_blocked(self) -> bool:
        return self.blocked_date is not None


def expand_rule(rule) -> List[time]:
    """
    Walk a single window from start to end in slot_duration steps.

    The end time is exclusive: a slot starting exactly at end_time is never
    produced. Inverted windows and durations that are not a positive whole
    number of minutes yield nothing.
    """
    duration = rule.slot_duration_minutes
    if rule.start_time is None or rule.end_time is None or not duration:
        return []

    minutes = int(duration)
    if minutes != duration or minutes <= 0:
        return []

    start = seconds_since_midnight(parse_time_of_day(rule.start_time))
    end = seconds_since_midnight(parse_time_of_day(rule.end_time))
    step = minutes * 60

    slots = []
    current = start
    while current < end:
        slots.append(time_from_seconds(current))
        current += step
    return slots


def occupied_times(appointments: Optional[Iterable], target_date: date) -> set:
    """Slot times held by non-cancelled appointments on the target date"""
    occupied = set()
    for appointment in appointments or []:
        if appointment.status == AppointmentStatus.CANCELLED.value:
            continue
        appointment_date = getattr(appointment, "date", None)
        if appointment_date is not None and parse_date(appointment_date) != target_date:
            continue
        occupied.add(parse_time_of_day(appointment.time))
    return occupied


def build_slot_report(
        target_date: date,
        rules: Optional[Iterable] = None,
        blocked_dates: Optional[Iterable] = None,
        appointments: Optional[Iterable] = None
) -> SlotReport:
    """Compute the slots of one resource for one date, keeping exclusions"""
    weekday = day_of_week(target_date)
    report = SlotReport(target_date=target_date, day_of_week=weekday)

    # A blocked date overrides every rule
    for blocked in blocked_dates or []:
        if parse_date(blocked.date) == target_date:
            report.blocked_date = target_date
            report.blocked_reason = getattr(blocked, "reason", None)
            return report

    day_rules = [r for r in rules or [] if r.day_of_week == weekday]
    if not day_rules:
        return report

    # Overlapping windows collapse into one set of candidates
    candidates = set()
    for rule in day_rules:
        candidates.update(expand_rule(rule))

    taken = occupied_times(appointments, target_date)

    report.available = sorted(candidates - taken)
    report.occupied = sorted(candidates & taken)
    return report


def generate_slots(
        target_date: date,
        rules: Optional[Iterable] = None,
        blocked_dates: Optional[Iterable] = None,
        appointments: Optional[Iterable] = None
) -> List[time]:
    """Ordered, de-duplicated bookable slot start times"""
    return build_slot_report(target_date, rules, blocked_dates, appointments).available


def merge_slot_lists(slot_lists: Iterable[Iterable[time]]) -> List[time]:
    """Union of several resources' slots, chronologically sorted"""
    merged = set()
    for slots in slot_lists:
        merged.update(slots)
    return sorted(merged)
