"""
Rule Pattern Matcher

Decides whether a single availability rule applies on a given date.

Patterns by rule type:
- WEEKLY: day-of-week set, Sunday=0 .. Saturday=6
- MONTHLY: day-of-month set, 1-31 (an index past the end of the month never matches)
- SEASONAL: the valid_from/valid_until window itself
- CUSTOM: no pattern format defined yet, evaluated like SEASONAL

The matcher never raises. Broken configuration degrades to "never matches".
find_unusable_issue() names rules that cannot take effect at all;
find_configuration_issue() also names the milder problems.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Callable, Dict, Optional, Tuple

from ..models.availability_rule import (
    MAX_PRIORITY,
    MIN_PRIORITY,
    MONTH_DAY_RANGE,
    WEEKDAY_RANGE,
    RuleAction,
    RuleType,
)


@dataclass(frozen=True)
class RuleSnapshot:
    """Storage-independent view of an availability rule"""
    id: str
    property_id: str
    type: RuleType
    action: RuleAction
    day_indexes: Tuple[int, ...] = ()
    action_value: Optional[Decimal] = None
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    priority: int = 5
    is_active: bool = True
    updated_at: Optional[datetime] = None
    name: str = ""

    def __post_init__(self):
        if self.action_value is not None and not isinstance(self.action_value, Decimal):
            object.__setattr__(self, "action_value", Decimal(str(self.action_value)))
        object.__setattr__(self, "day_indexes", tuple(self.day_indexes))
        # Tie-breaking compares timestamps, so they must all be naive UTC
        if isinstance(self.updated_at, datetime) and self.updated_at.tzinfo is not None:
            naive = self.updated_at.astimezone(timezone.utc).replace(tzinfo=None)
            object.__setattr__(self, "updated_at", naive)


def _as_date(value) -> Optional[date]:
    # datetime is a date subclass but does not compare with plain dates
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def sunday_based_weekday(day: date) -> int:
    """Day of week with Sunday=0 .. Saturday=6 (Python's weekday() is Monday=0)"""
    return day.isoweekday() % 7


def _within_bounds(rule: RuleSnapshot, day: date) -> bool:
    valid_from = _as_date(rule.valid_from)
    valid_until = _as_date(rule.valid_until)
    if valid_from is not None and day < valid_from:
        return False
    if valid_until is not None and day > valid_until:
        return False
    return True


def _match_weekly(rule: RuleSnapshot, day: date) -> bool:
    return sunday_based_weekday(day) in rule.day_indexes


def _match_monthly(rule: RuleSnapshot, day: date) -> bool:
    # day.day never exceeds the month length, so day 31 cannot match in April
    return day.day in rule.day_indexes


def _match_window(rule: RuleSnapshot, day: date) -> bool:
    # Bounds were already checked; a window needs both ends
    return rule.valid_from is not None and rule.valid_until is not None


PATTERN_MATCHERS: Dict[RuleType, Callable[[RuleSnapshot, date], bool]] = {
    RuleType.WEEKLY: _match_weekly,
    RuleType.MONTHLY: _match_monthly,
    RuleType.SEASONAL: _match_window,
    RuleType.CUSTOM: _match_window,
}

_unhandled = set(RuleType) - set(PATTERN_MATCHERS)
if _unhandled:
    raise RuntimeError(f"No pattern matcher for rule types: {sorted(t.value for t in _unhandled)}")


def rule_applies_on(rule: RuleSnapshot, day) -> bool:
    """
    Check if a rule applies to a specific date.

    Args:
        rule: The rule to test
        day: Calendar date (a datetime is reduced to its date)

    Returns:
        True if the rule is active, the date is within its validity bounds
        (inclusive) and the type-specific pattern matches.
    """
    if not rule.is_active:
        return False

    target = _as_date(day)
    if target is None:
        return False

    if not _within_bounds(rule, target):
        return False

    matcher = PATTERN_MATCHERS.get(rule.type)
    if matcher is None:
        return False
    return matcher(rule, target)


def find_unusable_issue(rule: RuleSnapshot) -> Optional[str]:
    """
    Describe why a rule cannot take effect at all, or None.

    Covers an empty day set, a window rule missing a bound, and an action
    value the evaluator cannot apply. Such rules are skipped.
    """
    if rule.type in (RuleType.WEEKLY, RuleType.MONTHLY):
        if not rule.day_indexes:
            return f"{rule.type.value} rule has no day indexes"
    elif rule.valid_from is None or rule.valid_until is None:
        return f"{rule.type.value} rule needs both valid_from and valid_until"

    if rule.action == RuleAction.BLOCK:
        return None

    value = rule.action_value
    if value is None:
        return f"{rule.action.value} rule has no action value"
    if not value.is_finite():
        return f"{rule.action.value} value {value} is not a finite number"
    if rule.action == RuleAction.PRICE:
        if value < 0:
            return f"price {value} is negative"
    elif value <= 0 or value != int(value):
        return f"{rule.action.value} value {value} is not a positive whole number"
    return None


def find_configuration_issue(rule: RuleSnapshot) -> Optional[str]:
    """
    Describe what is wrong with a rule, or None if it is well formed.

    Beyond find_unusable_issue() this reports out-of-range day indexes,
    inverted bounds and out-of-range priority. Those rules still take
    effect wherever the matcher says they match.
    """
    issue = find_unusable_issue(rule)
    if issue:
        return issue

    if rule.type in (RuleType.WEEKLY, RuleType.MONTHLY):
        allowed = WEEKDAY_RANGE if rule.type == RuleType.WEEKLY else MONTH_DAY_RANGE
        invalid = sorted(d for d in rule.day_indexes if d not in allowed)
        if invalid:
            return f"{rule.type.value} rule has out-of-range day indexes: {invalid}"

    valid_from = _as_date(rule.valid_from)
    valid_until = _as_date(rule.valid_until)
    if valid_from is not None and valid_until is not None and valid_from > valid_until:
        return "valid_from is after valid_until"

    if not MIN_PRIORITY <= rule.priority <= MAX_PRIORITY:
        return f"priority {rule.priority} is outside {MIN_PRIORITY}-{MAX_PRIORITY}"
    return None
