"""
Tests for the Rule Pattern Matcher

These tests verify:
- Weekly day-of-week matching (Sunday=0)
- Monthly day-of-month matching, including short months
- Seasonal / custom window matching
- Validity bounds and inactive rules
- Configuration issue detection
"""

import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from stayrules.models import RuleAction, RuleType
from stayrules.services.rule_matcher import (
    find_configuration_issue,
    find_unusable_issue,
    rule_applies_on,
    sunday_based_weekday,
)

SATURDAY = date(2026, 1, 17)
SUNDAY = date(2026, 1, 18)
MONDAY = date(2026, 1, 19)


class TestWeekday:
    def test_sunday_is_zero(self):
        assert sunday_based_weekday(SUNDAY) == 0

    def test_saturday_is_six(self):
        assert sunday_based_weekday(SATURDAY) == 6

    def test_monday_is_one(self):
        assert sunday_based_weekday(MONDAY) == 1


class TestWeeklyRules:
    def test_matches_listed_days(self, make_rule):
        """Weekend rule [0, 6] matches Saturday and Sunday only"""
        rule = make_rule(day_indexes=(0, 6))
        assert rule_applies_on(rule, SATURDAY) is True
        assert rule_applies_on(rule, SUNDAY) is True
        assert rule_applies_on(rule, MONDAY) is False

    def test_periodic_over_seven_days(self, make_rule):
        """A match on one weekday repeats every 7 days"""
        rule = make_rule(day_indexes=(3,))
        start = date(2026, 1, 1)
        for offset in range(7):
            day = start + timedelta(days=offset)
            expected = rule_applies_on(rule, day)
            for week in range(1, 60):
                assert rule_applies_on(rule, day + timedelta(weeks=week)) == expected

    def test_periodic_within_bounds(self, make_rule):
        """Periodicity holds until valid_until, then stops"""
        rule = make_rule(day_indexes=(6,), valid_until=date(2026, 2, 7))
        assert rule_applies_on(rule, SATURDAY) is True
        assert rule_applies_on(rule, SATURDAY + timedelta(weeks=3)) is True  # Feb 7, inclusive
        assert rule_applies_on(rule, SATURDAY + timedelta(weeks=4)) is False

    def test_empty_day_set_never_matches(self, make_rule):
        rule = make_rule(day_indexes=())
        for offset in range(7):
            assert rule_applies_on(rule, SATURDAY + timedelta(days=offset)) is False


class TestMonthlyRules:
    def test_day_31_matches_march(self, make_rule):
        rule = make_rule(type=RuleType.MONTHLY, day_indexes=(31,))
        assert rule_applies_on(rule, date(2026, 3, 31)) is True

    def test_day_31_never_matches_april(self, make_rule):
        """April has no 31st, so no April date matches"""
        rule = make_rule(type=RuleType.MONTHLY, day_indexes=(31,))
        april = [date(2026, 4, d) for d in range(1, 31)]
        assert not any(rule_applies_on(rule, d) for d in april)

    def test_day_31_never_matches_february(self, make_rule):
        rule = make_rule(type=RuleType.MONTHLY, day_indexes=(29, 30, 31))
        february = [date(2026, 2, d) for d in range(1, 29)]
        assert not any(rule_applies_on(rule, d) for d in february)

    def test_first_and_fifteenth(self, make_rule):
        rule = make_rule(type=RuleType.MONTHLY, day_indexes=(1, 15))
        assert rule_applies_on(rule, date(2026, 5, 1)) is True
        assert rule_applies_on(rule, date(2026, 5, 15)) is True
        assert rule_applies_on(rule, date(2026, 5, 16)) is False


class TestSeasonalRules:
    def test_inside_window(self, make_rule):
        rule = make_rule(
            type=RuleType.SEASONAL,
            valid_from=date(2025, 12, 20),
            valid_until=date(2026, 1, 5),
        )
        assert rule_applies_on(rule, date(2025, 12, 25)) is True
        assert rule_applies_on(rule, date(2026, 1, 1)) is True

    def test_bounds_are_inclusive(self, make_rule):
        rule = make_rule(
            type=RuleType.SEASONAL,
            valid_from=date(2025, 12, 20),
            valid_until=date(2026, 1, 5),
        )
        assert rule_applies_on(rule, date(2025, 12, 20)) is True
        assert rule_applies_on(rule, date(2026, 1, 5)) is True
        assert rule_applies_on(rule, date(2025, 12, 19)) is False
        assert rule_applies_on(rule, date(2026, 1, 6)) is False

    def test_missing_bound_never_matches(self, make_rule):
        """A seasonal rule without both bounds is a configuration error, not a crash"""
        open_ended = make_rule(type=RuleType.SEASONAL, valid_from=date(2025, 12, 20))
        assert rule_applies_on(open_ended, date(2025, 12, 25)) is False

        unbounded = make_rule(type=RuleType.SEASONAL)
        assert rule_applies_on(unbounded, date(2025, 12, 25)) is False

    def test_day_indexes_ignored(self, make_rule):
        rule = make_rule(
            type=RuleType.SEASONAL,
            day_indexes=(1,),
            valid_from=date(2026, 1, 1),
            valid_until=date(2026, 1, 31),
        )
        assert rule_applies_on(rule, SATURDAY) is True

    def test_custom_behaves_like_seasonal(self, make_rule):
        rule = make_rule(
            type=RuleType.CUSTOM,
            valid_from=date(2026, 1, 10),
            valid_until=date(2026, 1, 20),
        )
        assert rule_applies_on(rule, SATURDAY) is True
        assert rule_applies_on(rule, date(2026, 1, 21)) is False
        assert rule_applies_on(make_rule(type=RuleType.CUSTOM), SATURDAY) is False


class TestBoundsAndSafety:
    def test_inactive_never_matches(self, make_rule):
        rule = make_rule(day_indexes=(0, 1, 2, 3, 4, 5, 6), is_active=False)
        assert rule_applies_on(rule, SATURDAY) is False

    def test_valid_from_applies_to_weekly(self, make_rule):
        rule = make_rule(day_indexes=(6,), valid_from=date(2026, 1, 20))
        assert rule_applies_on(rule, SATURDAY) is False
        assert rule_applies_on(rule, date(2026, 1, 24)) is True

    def test_inverted_bounds_never_match(self, make_rule):
        rule = make_rule(
            type=RuleType.SEASONAL,
            valid_from=date(2026, 2, 1),
            valid_until=date(2026, 1, 1),
        )
        assert rule_applies_on(rule, date(2026, 1, 15)) is False

    def test_datetime_is_reduced_to_date(self, make_rule):
        rule = make_rule(day_indexes=(6,), valid_from=SATURDAY, valid_until=SATURDAY)
        assert rule_applies_on(rule, datetime(2026, 1, 17, 23, 30)) is True

    @pytest.mark.parametrize("bad", [None, "2026-01-17", 20260117])
    def test_malformed_date_returns_false(self, make_rule, bad):
        rule = make_rule(day_indexes=(0, 1, 2, 3, 4, 5, 6))
        assert rule_applies_on(rule, bad) is False

    def test_old_dates_evaluate_normally(self, make_rule):
        """1900-01-07 was a Sunday"""
        rule = make_rule(day_indexes=(0,))
        assert rule_applies_on(rule, date(1900, 1, 7)) is True


class TestConfigurationIssues:
    def test_well_formed_rule(self, make_rule):
        rule = make_rule(day_indexes=(0, 6), action=RuleAction.PRICE, action_value=Decimal("300"))
        assert find_configuration_issue(rule) is None

    def test_empty_weekly(self, make_rule):
        assert "no day indexes" in find_configuration_issue(make_rule())

    def test_out_of_range_monthly(self, make_rule):
        rule = make_rule(type=RuleType.MONTHLY, day_indexes=(0, 32))
        assert "out-of-range" in find_configuration_issue(rule)

    def test_seasonal_missing_bound(self, make_rule):
        rule = make_rule(type=RuleType.SEASONAL, valid_until=date(2026, 1, 5))
        assert "valid_from and valid_until" in find_configuration_issue(rule)

    def test_price_without_value(self, make_rule):
        rule = make_rule(day_indexes=(1,), action=RuleAction.PRICE)
        assert "no action value" in find_configuration_issue(rule)

    def test_fractional_min_nights(self, make_rule):
        rule = make_rule(day_indexes=(1,), action=RuleAction.MIN_NIGHTS, action_value=Decimal("2.5"))
        assert "positive whole number" in find_configuration_issue(rule)

    def test_priority_out_of_range(self, make_rule):
        rule = make_rule(day_indexes=(1,), priority=11)
        assert "priority" in find_configuration_issue(rule)

    def test_block_ignores_action_value(self, make_rule):
        rule = make_rule(day_indexes=(1,), action=RuleAction.BLOCK, action_value=Decimal("-1"))
        assert find_configuration_issue(rule) is None


class TestUnusableIssues:
    def test_out_of_range_days_are_usable(self, make_rule):
        rule = make_rule(day_indexes=(0, 7))
        assert find_unusable_issue(rule) is None
        assert "out-of-range" in find_configuration_issue(rule)

    def test_out_of_range_priority_is_usable(self, make_rule):
        assert find_unusable_issue(make_rule(day_indexes=(1,), priority=0)) is None

    def test_empty_days_unusable(self, make_rule):
        assert "no day indexes" in find_unusable_issue(make_rule())

    def test_missing_bound_unusable(self, make_rule):
        rule = make_rule(type=RuleType.CUSTOM, valid_from=date(2026, 1, 1))
        assert "valid_from and valid_until" in find_unusable_issue(rule)

    def test_negative_price_unusable(self, make_rule):
        rule = make_rule(day_indexes=(1,), action=RuleAction.PRICE, action_value=Decimal("-5"))
        assert "negative" in find_unusable_issue(rule)


class TestSnapshotTimestamps:
    def test_aware_timestamp_becomes_naive_utc(self, make_rule):
        rule = make_rule(updated_at=datetime(2026, 1, 1, 15, 0, tzinfo=timezone(timedelta(hours=3))))
        assert rule.updated_at == datetime(2026, 1, 1, 12, 0)
        assert rule.updated_at.tzinfo is None

    def test_naive_timestamp_kept(self, make_rule):
        assert make_rule(updated_at=datetime(2026, 1, 1, 15, 0)).updated_at == datetime(2026, 1, 1, 15, 0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
