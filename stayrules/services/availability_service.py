"""
Availability Service

Booking/pricing consumer of the rule evaluator. Loads the current property
terms and rule snapshot from the stores, then delegates every date decision
to the pure evaluator.

Key responsibilities:
- Single-date decision
- Calendar for a date range, with summary counts
- Stay check: veto on any blocked night, stay-length bounds, nightly quote
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..config import settings
from ..utils.logging_config import get_logger
from .rule_evaluator import (
    AvailabilityDecision,
    PropertyTerms,
    RuleWarning,
    evaluate,
    evaluate_range,
)
from .rule_matcher import RuleSnapshot
from .rule_store import RuleStore

logger = get_logger(__name__)


@dataclass
class AvailabilityCalendar:
    property_id: str
    start_date: date
    end_date: date
    days: List[AvailabilityDecision]
    warnings: Tuple[RuleWarning, ...] = ()

    @property
    def total_days(self) -> int:
        return len(self.days)

    @property
    def blocked_days(self) -> int:
        return sum(1 for d in self.days if d.is_blocked)

    @property
    def available_days(self) -> int:
        return self.total_days - self.blocked_days


@dataclass
class StayCheck:
    """Outcome of a prospective booking; total is only set when accepted"""
    property_id: str
    check_in: date
    check_out: date
    currency: str
    nights: List[AvailabilityDecision] = field(default_factory=list)
    accepted: bool = False
    reason: Optional[str] = None
    min_nights: Optional[int] = None
    max_nights: Optional[int] = None
    total: Optional[Decimal] = None

    @property
    def num_nights(self) -> int:
        return len(self.nights)

    @property
    def blocked_dates(self) -> List[date]:
        return [n.date for n in self.nights if n.is_blocked]


def quote_nights(nights: List[AvailabilityDecision]) -> Decimal:
    """Sum of nightly prices, rounded to 2 decimal places"""
    total = sum((n.price for n in nights), Decimal("0"))
    return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def check_stay_decisions(
    terms: PropertyTerms,
    rules: List[RuleSnapshot],
    check_in: date,
    check_out: date
) -> StayCheck:
    """
    Check a stay of nights [check_in, check_out) against the rules.

    Any blocked night vetoes the stay and no quote is produced. The check-in
    night's decision sets the stay-length bounds.
    """
    if check_out <= check_in:
        raise ValueError("check_out must be after check_in")

    nights = evaluate_range(terms, rules, check_in, check_out - timedelta(days=1))
    result = StayCheck(
        property_id=terms.property_id,
        check_in=check_in,
        check_out=check_out,
        currency=terms.currency,
        nights=nights,
    )

    if result.blocked_dates:
        result.reason = "blocked"
        return result

    first_night = nights[0]
    result.min_nights = first_night.min_nights
    result.max_nights = first_night.max_nights

    if result.num_nights < first_night.min_nights:
        result.reason = f"minimum stay is {first_night.min_nights} nights"
        return result
    if first_night.max_nights is not None and result.num_nights > first_night.max_nights:
        result.reason = f"maximum stay is {first_night.max_nights} nights"
        return result

    result.accepted = True
    result.total = quote_nights(nights)
    return result


class AvailabilityService:
    def __init__(self, db: Session, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id
        self.rules = RuleStore(db, tenant_id)

    def _load(self, property_id: str) -> Tuple[PropertyTerms, List[RuleSnapshot]]:
        prop = self.rules.properties.get(property_id)
        terms = prop.to_terms(default_currency=settings.default_currency)
        return terms, self.rules.snapshot(property_id)

    def _check_range_length(self, start: date, end: date) -> None:
        days = (end - start).days + 1
        if days > settings.max_range_days:
            raise ValueError(f"Date range of {days} days exceeds the limit of {settings.max_range_days}")

    def _report_warnings(self, property_id: str, warnings) -> None:
        for warning in warnings:
            logger.log_with_context(
                logging.WARNING,
                f"Misconfigured availability rule skipped: {warning.message}",
                entity_type="availability_rule",
                entity_id=warning.rule_id,
                property_id=property_id
            )

    def decision_for(self, property_id: str, day: date) -> AvailabilityDecision:
        terms, rules = self._load(property_id)
        decision = evaluate(terms, rules, day)
        self._report_warnings(property_id, decision.applied_rules.warnings)
        return decision

    def calendar(self, property_id: str, start: date, end: date) -> AvailabilityCalendar:
        if start > end:
            raise ValueError("start must not be after end")
        self._check_range_length(start, end)

        terms, rules = self._load(property_id)
        days = evaluate_range(terms, rules, start, end)
        warnings = days[0].applied_rules.warnings if days else ()
        self._report_warnings(property_id, warnings)

        calendar = AvailabilityCalendar(
            property_id=property_id,
            start_date=start,
            end_date=end,
            days=days,
            warnings=warnings,
        )
        logger.log_with_context(
            logging.INFO,
            "Availability calendar evaluated",
            entity_type="property",
            entity_id=property_id,
            total_days=calendar.total_days,
            blocked_days=calendar.blocked_days
        )
        return calendar

    def check_stay(self, property_id: str, check_in: date, check_out: date) -> StayCheck:
        if check_out <= check_in:
            raise ValueError("check_out must be after check_in")
        self._check_range_length(check_in, check_out - timedelta(days=1))

        terms, rules = self._load(property_id)
        result = check_stay_decisions(terms, rules, check_in, check_out)
        if result.nights:
            self._report_warnings(property_id, result.nights[0].applied_rules.warnings)

        logger.stay_checked(
            property_id,
            check_in.isoformat(),
            check_out.isoformat(),
            result.accepted,
            result.reason
        )
        return result

    def summaries(self, property_ids: List[str], start: date, end: date) -> List[AvailabilityCalendar]:
        """Calendars for several properties over the same range, in request order"""
        return [self.calendar(property_id, start, end) for property_id in property_ids]
