"""Owner-side editing of availability rules and blocked dates"""
import uuid
from datetime import time

import pytest

from marketplace_booking.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from marketplace_booking.models import AvailabilityRule, BlockedDate
from marketplace_booking.services.availability.availability_service import AvailabilityService
from marketplace_booking.services.availability.rule_editor import AvailabilityRuleEditor, validate_rule
from tests.conftest import MONDAY, t


class TestValidateRule:

    def test_normalizes_string_times(self):
        fields = validate_rule(1, "09:00", "17:30", 30)

        assert fields == {
            "day_of_week": 1,
            "start_time": time(9, 0),
            "end_time": time(17, 30),
            "slot_duration_minutes": 30,
        }

    @pytest.mark.parametrize("day", [-1, 7, "1", None, True])
    def test_rejects_bad_day(self, day):
        with pytest.raises(ValidationError):
            validate_rule(day, "09:00", "10:00", 30)

    @pytest.mark.parametrize("duration", [0, -30, None, 1.5])
    def test_rejects_bad_duration(self, duration):
        with pytest.raises(ValidationError):
            validate_rule(1, "09:00", "10:00", duration)

    @pytest.mark.parametrize("start,end", [
        ("10:00", "09:00"),
        ("09:00", "09:00"),
        ("9am", "10:00"),
        ("09:00", "25:00"),
        (None, "10:00"),
    ])
    def test_rejects_bad_window(self, start, end):
        with pytest.raises(ValidationError):
            validate_rule(1, start, end, 30)


class TestRules:

    def test_owner_creates_rule(self, db, salon):
        rule = AvailabilityRuleEditor.create_rule(
            db, salon["owner_id"], salon["anna"].id, 1, "09:00", "12:00", 60
        )

        assert rule.resource_type == "employee"
        assert rule.to_dict()["start_time"] == "09:00"
        assert AvailabilityService.compute_available_slots(db, salon["anna"].id, MONDAY) == [
            t("09:00"), t("10:00"), t("11:00")
        ]

    def test_default_duration_comes_from_settings(self, db, salon):
        rule = AvailabilityRuleEditor.create_rule(db, salon["owner_id"], salon["business"].id, 1, "09:00", "10:00")

        assert rule.slot_duration_minutes == 30
        assert rule.resource_type == "business"

    def test_stranger_cannot_create_rule(self, db, salon):
        with pytest.raises(AuthorizationError):
            AvailabilityRuleEditor.create_rule(db, uuid.uuid4(), salon["anna"].id, 1, "09:00", "12:00")

        assert db.query(AvailabilityRule).count() == 0

    def test_invalid_rule_is_not_stored(self, db, salon):
        with pytest.raises(ValidationError):
            AvailabilityRuleEditor.create_rule(db, salon["owner_id"], salon["anna"].id, 1, "12:00", "09:00")

        assert db.query(AvailabilityRule).count() == 0

    def test_unknown_resource(self, db):
        with pytest.raises(NotFoundError):
            AvailabilityRuleEditor.create_rule(db, uuid.uuid4(), uuid.uuid4(), 1, "09:00", "12:00")

    def test_update_keeps_unchanged_fields(self, db, factory, salon):
        rule = factory.rule(salon["anna"], 1, t("09:00"), t("12:00"), 60)

        updated = AvailabilityRuleEditor.update_rule(db, salon["owner_id"], rule.id, end_time="11:00")

        assert updated.start_time == t("09:00")
        assert updated.end_time == t("11:00")
        assert updated.slot_duration_minutes == 60

    def test_update_cannot_invert_window(self, db, factory, salon):
        rule = factory.rule(salon["anna"], 1, t("09:00"), t("12:00"))

        with pytest.raises(ValidationError):
            AvailabilityRuleEditor.update_rule(db, salon["owner_id"], rule.id, start_time="13:00")

    def test_delete_rule(self, db, factory, salon):
        rule = factory.rule(salon["anna"], 1, t("09:00"), t("12:00"))

        AvailabilityRuleEditor.delete_rule(db, salon["owner_id"], rule.id)

        assert AvailabilityRuleEditor.list_rules(db, salon["anna"].id) == []

    def test_stranger_cannot_delete_rule(self, db, factory, salon):
        rule = factory.rule(salon["anna"], 1, t("09:00"), t("12:00"))

        with pytest.raises(AuthorizationError):
            AvailabilityRuleEditor.delete_rule(db, uuid.uuid4(), rule.id)

    def test_linked_employee_edits_own_schedule(self, db, factory, salon):
        staff_user = uuid.uuid4()
        cleo = factory.employee(salon["business"], name="Cleo", user_id=staff_user)

        rule = AvailabilityRuleEditor.create_rule(db, staff_user, cleo.id, 2, "10:00", "14:00")
        assert rule.resource_id == cleo.id

        with pytest.raises(AuthorizationError):
            AvailabilityRuleEditor.create_rule(db, staff_user, salon["anna"].id, 2, "10:00", "14:00")


class TestReplaceRules:

    def test_replaces_whole_schedule(self, db, factory, salon):
        anna = salon["anna"]
        factory.rule(anna, 1, t("09:00"), t("17:00"))
        factory.rule(anna, 2, t("09:00"), t("17:00"))

        rules = AvailabilityRuleEditor.replace_rules(db, salon["owner_id"], anna.id, [
            {"day_of_week": 3, "start_time": "09:00", "end_time": "12:00", "slot_duration_minutes": 60},
            {"day_of_week": 1, "start_time": "13:00", "end_time": "15:00"},
        ])

        assert [(r.day_of_week, r.start_time) for r in rules] == [(1, t("13:00")), (3, t("09:00"))]
        assert rules[0].slot_duration_minutes == 30

    def test_one_bad_entry_keeps_old_schedule(self, db, factory, salon):
        anna = salon["anna"]
        factory.rule(anna, 1, t("09:00"), t("17:00"))

        with pytest.raises(ValidationError):
            AvailabilityRuleEditor.replace_rules(db, salon["owner_id"], anna.id, [
                {"day_of_week": 2, "start_time": "09:00", "end_time": "12:00"},
                {"day_of_week": 9, "start_time": "09:00", "end_time": "12:00"},
            ])

        stored = AvailabilityRuleEditor.list_rules(db, anna.id)
        assert [(r.day_of_week, r.end_time) for r in stored] == [(1, t("17:00"))]

    def test_empty_schedule_clears_rules(self, db, factory, salon):
        anna = salon["anna"]
        factory.rule(anna, 1, t("09:00"), t("17:00"))

        assert AvailabilityRuleEditor.replace_rules(db, salon["owner_id"], anna.id, []) == []

    def test_other_resources_untouched(self, db, factory, salon):
        factory.rule(salon["ben"], 1, t("09:00"), t("17:00"))

        AvailabilityRuleEditor.replace_rules(db, salon["owner_id"], salon["anna"].id, [])

        assert len(AvailabilityRuleEditor.list_rules(db, salon["ben"].id)) == 1


class TestBlockedDates:

    def test_block_and_unblock(self, db, factory, salon):
        anna = salon["anna"]
        factory.rule(anna, 1, t("09:00"), t("10:00"))

        entry = AvailabilityRuleEditor.add_blocked_date(db, salon["owner_id"], anna.id, "2026-10-19", "  Vacation ")
        assert entry.reason == "Vacation"
        assert AvailabilityService.compute_available_slots(db, anna.id, MONDAY) == []

        AvailabilityRuleEditor.remove_blocked_date(db, salon["owner_id"], entry.id)
        assert AvailabilityService.compute_available_slots(db, anna.id, MONDAY) == [t("09:00"), t("09:30")]

    def test_blocking_twice_returns_existing_entry(self, db, salon):
        anna = salon["anna"]
        first = AvailabilityRuleEditor.add_blocked_date(db, salon["owner_id"], anna.id, MONDAY, "Vacation")
        second = AvailabilityRuleEditor.add_blocked_date(db, salon["owner_id"], anna.id, MONDAY)

        assert second.id == first.id
        assert db.query(BlockedDate).count() == 1

    def test_blank_reason_is_dropped(self, db, salon):
        entry = AvailabilityRuleEditor.add_blocked_date(db, salon["owner_id"], salon["business"].id, MONDAY, "   ")
        assert entry.reason is None

    def test_malformed_date(self, db, salon):
        with pytest.raises(ValidationError):
            AvailabilityRuleEditor.add_blocked_date(db, salon["owner_id"], salon["anna"].id, "19/10/2026")

    def test_stranger_cannot_block(self, db, salon):
        with pytest.raises(AuthorizationError):
            AvailabilityRuleEditor.add_blocked_date(db, uuid.uuid4(), salon["anna"].id, MONDAY)

    def test_unknown_blocked_date(self, db, salon):
        with pytest.raises(NotFoundError):
            AvailabilityRuleEditor.remove_blocked_date(db, salon["owner_id"], uuid.uuid4())

    def test_list_is_chronological(self, db, factory, salon):
        anna = salon["anna"]
        factory.blocked(anna, MONDAY.replace(day=30))
        factory.blocked(anna, MONDAY)

        listed = AvailabilityRuleEditor.list_blocked_dates(db, anna.id)

        assert [b.date for b in listed] == [MONDAY, MONDAY.replace(day=30)]


def test_concurrent_block_of_same_date_returns_existing(db, factory, salon, monkeypatch):
    """Another request blocked the date between the lookup and the insert"""
    anna = salon["anna"]
    already = factory.blocked(anna, MONDAY, "Vacation")

    real_lookup = AvailabilityRuleEditor._find_blocked_date
    lookups = []

    def lookup_misses_once(db, resource_id, day):
        lookups.append(day)
        if len(lookups) == 1:
            return None
        return real_lookup(db, resource_id, day)

    monkeypatch.setattr(AvailabilityRuleEditor, "_find_blocked_date", staticmethod(lookup_misses_once))

    entry = AvailabilityRuleEditor.add_blocked_date(db, salon["owner_id"], anna.id, MONDAY, "Sick day")

    assert entry.id == already.id
    assert entry.reason == "Vacation"
    assert len(lookups) == 2
    assert db.query(BlockedDate).count() == 1
