# ============================================================================
# marketplace_booking/services/availability/rule_editor.py
# CRUD for weekly availability rules and blocked dates
# ============================================================================
"""
Owner-side editing of a resource's availability.

Every mutating call takes the caller's user id explicitly and checks it
against the resource's owners before touching the database. Rules are
validated here so the slot generator normally only sees well-formed
windows.
"""
from datetime import date, time
from typing import Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from marketplace_booking.config.settings import get_settings
from marketplace_booking.core.exceptions import NotFoundError, ValidationError
from marketplace_booking.models.availability import AvailabilityRule, BlockedDate
from marketplace_booking.services.availability.availability_service import AvailabilityService
from marketplace_booking.services.business.business_service import BusinessService, Resource
from marketplace_booking.utils.timeofday import parse_date, parse_time_of_day

logger = logging.getLogger(__name__)

TimeLike = Union[str, time]


def validate_rule(
        day_of_week: int,
        start_time: TimeLike,
        end_time: TimeLike,
        slot_duration_minutes: int
) -> Dict:
    """Normalize rule fields, raising ValidationError on anything malformed"""
    if isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6:
        raise ValidationError("day_of_week must be an integer from 0 (Sunday) to 6 (Saturday)")

    if isinstance(slot_duration_minutes, bool) or not isinstance(slot_duration_minutes, int) \
            or slot_duration_minutes <= 0:
        raise ValidationError("slot_duration_minutes must be a positive integer")

    try:
        start = parse_time_of_day(start_time)
        end = parse_time_of_day(end_time)
    except ValueError as e:
        raise ValidationError(str(e))

    if start >= end:
        raise ValidationError("Start time must be before end time")

    return {
        "day_of_week": day_of_week,
        "start_time": start,
        "end_time": end,
        "slot_duration_minutes": slot_duration_minutes,
    }


class AvailabilityRuleEditor:
    """Owner-facing availability management"""

    @staticmethod
    def _owned_resource(db: Session, caller_id: UUID, resource_id: UUID) -> Resource:
        resource = BusinessService.get_resource(db, resource_id)
        BusinessService.require_owner(resource, caller_id)
        return resource

    # ------------------------------------------------------------------
    # Weekly rules
    # ------------------------------------------------------------------

    @staticmethod
    def list_rules(db: Session, resource_id: UUID) -> List[AvailabilityRule]:
        BusinessService.get_resource(db, resource_id)
        return AvailabilityService.get_availability_rules(db, resource_id)

    @staticmethod
    def create_rule(
            db: Session,
            caller_id: UUID,
            resource_id: UUID,
            day_of_week: int,
            start_time: TimeLike,
            end_time: TimeLike,
            slot_duration_minutes: Optional[int] = None
    ) -> AvailabilityRule:
        resource = AvailabilityRuleEditor._owned_resource(db, caller_id, resource_id)

        if slot_duration_minutes is None:
            slot_duration_minutes = get_settings().DEFAULT_SLOT_DURATION_MINUTES
        fields = validate_rule(day_of_week, start_time, end_time, slot_duration_minutes)

        try:
            rule = AvailabilityRule(
                resource_id=resource.id,
                resource_type=resource.resource_type.value,
                **fields
            )
            db.add(rule)
            db.commit()
            db.refresh(rule)
        except Exception as e:
            logger.error(f"Error creating availability rule for {resource_id}: {e}", exc_info=True)
            db.rollback()
            raise

        logger.info(f"Created availability rule {rule.id} for resource {resource.id}")
        return rule

    @staticmethod
    def update_rule(
            db: Session,
            caller_id: UUID,
            rule_id: UUID,
            day_of_week: Optional[int] = None,
            start_time: Optional[TimeLike] = None,
            end_time: Optional[TimeLike] = None,
            slot_duration_minutes: Optional[int] = None
    ) -> AvailabilityRule:
        rule = db.query(AvailabilityRule).filter(AvailabilityRule.id == rule_id).first()
        if not rule:
            raise NotFoundError("Availability rule not found")

        AvailabilityRuleEditor._owned_resource(db, caller_id, rule.resource_id)

        fields = validate_rule(
            rule.day_of_week if day_of_week is None else day_of_week,
            rule.start_time if start_time is None else start_time,
            rule.end_time if end_time is None else end_time,
            rule.slot_duration_minutes if slot_duration_minutes is None else slot_duration_minutes,
        )

        try:
            for field, value in fields.items():
                setattr(rule, field, value)
            db.commit()
            db.refresh(rule)
        except Exception as e:
            logger.error(f"Error updating availability rule {rule_id}: {e}", exc_info=True)
            db.rollback()
            raise

        logger.info(f"Updated availability rule {rule.id}")
        return rule

    @staticmethod
    def delete_rule(db: Session, caller_id: UUID, rule_id: UUID) -> None:
        rule = db.query(AvailabilityRule).filter(AvailabilityRule.id == rule_id).first()
        if not rule:
            raise NotFoundError("Availability rule not found")

        AvailabilityRuleEditor._owned_resource(db, caller_id, rule.resource_id)

        try:
            db.delete(rule)
            db.commit()
        except Exception as e:
            logger.error(f"Error deleting availability rule {rule_id}: {e}", exc_info=True)
            db.rollback()
            raise

        logger.info(f"Deleted availability rule {rule_id}")

    @staticmethod
    def replace_rules(
            db: Session,
            caller_id: UUID,
            resource_id: UUID,
            rules: List[Dict]
    ) -> List[AvailabilityRule]:
        """
        Replace the whole weekly schedule in one transaction.

        Every entry is validated before anything is written, so one bad
        window leaves the stored schedule untouched.
        """
        resource = AvailabilityRuleEditor._owned_resource(db, caller_id, resource_id)
        default_duration = get_settings().DEFAULT_SLOT_DURATION_MINUTES

        validated = []
        for entry in rules:
            duration = entry.get("slot_duration_minutes")
            validated.append(validate_rule(
                entry.get("day_of_week"),
                entry.get("start_time"),
                entry.get("end_time"),
                default_duration if duration is None else duration,
            ))

        try:
            db.query(AvailabilityRule).filter(
                AvailabilityRule.resource_id == resource.id
            ).delete(synchronize_session=False)

            for fields in validated:
                db.add(AvailabilityRule(
                    resource_id=resource.id,
                    resource_type=resource.resource_type.value,
                    **fields
                ))
            db.commit()
        except Exception as e:
            logger.error(f"Error replacing availability for {resource_id}: {e}", exc_info=True)
            db.rollback()
            raise

        logger.info(f"Replaced availability for resource {resource.id} with {len(validated)} rules")
        return AvailabilityService.get_availability_rules(db, resource.id)

    # ------------------------------------------------------------------
    # Blocked dates
    # ------------------------------------------------------------------

    @staticmethod
    def _find_blocked_date(db: Session, resource_id: UUID, day: date) -> Optional[BlockedDate]:
        return db.query(BlockedDate).filter(
            BlockedDate.resource_id == resource_id,
            BlockedDate.date == day
        ).first()

    @staticmethod
    def list_blocked_dates(db: Session, resource_id: UUID) -> List[BlockedDate]:
        BusinessService.get_resource(db, resource_id)
        return AvailabilityService.get_blocked_dates(db, resource_id)

    @staticmethod
    def add_blocked_date(
            db: Session,
            caller_id: UUID,
            resource_id: UUID,
            blocked_date: Union[str, date],
            reason: Optional[str] = None
    ) -> BlockedDate:
        """Block a date; blocking an already blocked date returns the existing entry"""
        resource = AvailabilityRuleEditor._owned_resource(db, caller_id, resource_id)

        try:
            day = parse_date(blocked_date)
        except ValueError as e:
            raise ValidationError(str(e))

        existing = AvailabilityRuleEditor._find_blocked_date(db, resource.id, day)
        if existing:
            return existing

        try:
            entry = BlockedDate(
                resource_id=resource.id,
                resource_type=resource.resource_type.value,
                date=day,
                reason=reason.strip() if reason and reason.strip() else None,
            )
            db.add(entry)
            db.commit()
            db.refresh(entry)
        except IntegrityError:
            # Blocked by a concurrent request between the lookup and the insert
            db.rollback()
            existing = AvailabilityRuleEditor._find_blocked_date(db, resource.id, day)
            if existing is None:
                raise
            return existing
        except Exception as e:
            logger.error(f"Error blocking {day} for {resource_id}: {e}", exc_info=True)
            db.rollback()
            raise

        logger.info(f"Blocked {day} for resource {resource.id}")
        return entry

    @staticmethod
    def remove_blocked_date(db: Session, caller_id: UUID, blocked_date_id: UUID) -> None:
        entry = db.query(BlockedDate).filter(BlockedDate.id == blocked_date_id).first()
        if not entry:
            raise NotFoundError("Blocked date not found")

        resource = AvailabilityRuleEditor._owned_resource(db, caller_id, entry.resource_id)
        day = entry.date

        try:
            db.delete(entry)
            db.commit()
        except Exception as e:
            logger.error(f"Error removing blocked date {blocked_date_id}: {e}", exc_info=True)
            db.rollback()
            raise

        logger.info(f"Unblocked {day} for resource {resource.id}")
