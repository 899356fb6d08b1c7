"""
Rule Evaluator

Resolves a property's availability rules into a decision for one date:

1. Keep active rules belonging to the property
2. Skip rules that cannot take effect; report them and any other
   misconfigured rule as warnings
3. Keep rules whose pattern matches the date
4. Pick one winner per action: highest priority, then latest updated_at,
   then lowest id
5. A BLOCK winner makes the date BLOCKED and no override is resolved
6. Otherwise PRICE / MIN_NIGHTS / MAX_NIGHTS winners override the
   property defaults

Range evaluation runs the single-date algorithm for every date, so a range
and a single-date check can never disagree.

Everything here is pure: no I/O, no caching, no shared state.
"""

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..exceptions import MissingDefaultError
from ..models.availability_rule import RuleAction
from .rule_matcher import RuleSnapshot, find_configuration_issue, find_unusable_issue, rule_applies_on


class AvailabilityStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    BLOCKED = "BLOCKED"


@dataclass(frozen=True)
class PropertyTerms:
    """Base pricing and stay policy of a property"""
    property_id: str
    base_price: Optional[Decimal] = None
    min_nights: Optional[int] = None
    max_nights: Optional[int] = None  # None = no maximum
    currency: str = "BRL"

    def __post_init__(self):
        if self.base_price is not None and not isinstance(self.base_price, Decimal):
            object.__setattr__(self, "base_price", Decimal(str(self.base_price)))


@dataclass(frozen=True)
class RuleWarning:
    """A rule that was skipped because it can never take effect"""
    rule_id: str
    message: str


@dataclass(frozen=True)
class AppliedRules:
    """Winning rule id per category (None = property default used)"""
    block: Optional[str] = None
    price: Optional[str] = None
    min_nights: Optional[str] = None
    max_nights: Optional[str] = None
    warnings: Tuple[RuleWarning, ...] = ()

    def rule_ids(self) -> List[str]:
        return [rid for rid in (self.block, self.price, self.min_nights, self.max_nights) if rid]


@dataclass(frozen=True)
class AvailabilityDecision:
    """Resolved availability for one property and one date"""
    property_id: str
    date: date
    status: AvailabilityStatus
    price: Optional[Decimal]
    min_nights: Optional[int]
    max_nights: Optional[int]
    currency: str
    applied_rules: AppliedRules = field(default_factory=AppliedRules)

    @property
    def is_blocked(self) -> bool:
        return self.status == AvailabilityStatus.BLOCKED


def _pick_winner(candidates: Sequence[RuleSnapshot]) -> RuleSnapshot:
    """
    Highest priority wins; ties go to the most recently updated rule, then to
    the lowest id. Stable sorts applied from the last key to the first.
    """
    ordered = sorted(candidates, key=lambda r: r.id)
    ordered.sort(key=lambda r: (r.updated_at is not None, r.updated_at or datetime.min), reverse=True)
    ordered.sort(key=lambda r: r.priority, reverse=True)
    return ordered[0]


def _usable_rules(
    terms: PropertyTerms,
    rules: Iterable[RuleSnapshot]
) -> Tuple[List[RuleSnapshot], List[RuleWarning]]:
    usable = []
    warnings = []
    for rule in rules:
        if not rule.is_active or rule.property_id != terms.property_id:
            continue
        issue = find_configuration_issue(rule)
        if issue:
            warnings.append(RuleWarning(rule_id=rule.id, message=issue))
        # Milder problems are reported but the rule still applies where it matches
        if find_unusable_issue(rule) is None:
            usable.append(rule)
    warnings.sort(key=lambda w: w.rule_id)
    return usable, warnings


def _evaluate_usable(
    terms: PropertyTerms,
    usable: Sequence[RuleSnapshot],
    warnings: Sequence[RuleWarning],
    day: date
) -> AvailabilityDecision:
    groups: Dict[RuleAction, List[RuleSnapshot]] = {}
    for rule in usable:
        if rule_applies_on(rule, day):
            groups.setdefault(rule.action, []).append(rule)

    winners = {action: _pick_winner(candidates) for action, candidates in groups.items()}

    block = winners.get(RuleAction.BLOCK)
    if block is not None:
        # Blocked dates carry no override; defaults are reported for display only
        return AvailabilityDecision(
            property_id=terms.property_id,
            date=day,
            status=AvailabilityStatus.BLOCKED,
            price=terms.base_price,
            min_nights=terms.min_nights,
            max_nights=terms.max_nights,
            currency=terms.currency,
            applied_rules=AppliedRules(block=block.id, warnings=tuple(warnings)),
        )

    price_rule = winners.get(RuleAction.PRICE)
    min_rule = winners.get(RuleAction.MIN_NIGHTS)
    max_rule = winners.get(RuleAction.MAX_NIGHTS)

    price = price_rule.action_value if price_rule else terms.base_price
    if price is None or not price.is_finite():
        raise MissingDefaultError(terms.property_id, "base_price")

    min_nights = int(min_rule.action_value) if min_rule else terms.min_nights
    if min_nights is None:
        raise MissingDefaultError(terms.property_id, "min_nights")

    max_nights = int(max_rule.action_value) if max_rule else terms.max_nights

    return AvailabilityDecision(
        property_id=terms.property_id,
        date=day,
        status=AvailabilityStatus.AVAILABLE,
        price=price,
        min_nights=min_nights,
        max_nights=max_nights,
        currency=terms.currency,
        applied_rules=AppliedRules(
            price=price_rule.id if price_rule else None,
            min_nights=min_rule.id if min_rule else None,
            max_nights=max_rule.id if max_rule else None,
            warnings=tuple(warnings),
        ),
    )


def evaluate(terms: PropertyTerms, rules: Iterable[RuleSnapshot], day: date) -> AvailabilityDecision:
    """
    Resolve the availability decision for a single date.

    Args:
        terms: Property defaults (base price, stay bounds, currency)
        rules: Current rule snapshot; inactive rules and rules of other
               properties are ignored
        day: Date to evaluate

    Returns:
        AvailabilityDecision

    Raises:
        MissingDefaultError: the date is available but no price or minimum
                             stay can be resolved
    """
    if isinstance(day, datetime):
        day = day.date()
    usable, warnings = _usable_rules(terms, rules)
    return _evaluate_usable(terms, usable, warnings, day)


def iter_dates(start: date, end: date):
    """Every date from start to end, both inclusive"""
    if start > end:
        return
    current = start
    while True:
        yield current
        # date.max has no successor
        if current == end:
            return
        current += timedelta(days=1)


def evaluate_range(
    terms: PropertyTerms,
    rules: Iterable[RuleSnapshot],
    start: date,
    end: date
) -> List[AvailabilityDecision]:
    """
    Evaluate every date of the inclusive range independently.

    Raises:
        ValueError: start is after end
        MissingDefaultError: as for evaluate()
    """
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    if start > end:
        raise ValueError(f"Range start {start} is after end {end}")

    # Filtering is date-independent, so do it once
    usable, warnings = _usable_rules(terms, rules)
    return [_evaluate_usable(terms, usable, warnings, day) for day in iter_dates(start, end)]
