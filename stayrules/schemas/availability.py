"""
Availability Schemas

Responses for date decisions, calendars and stay checks.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from ..services.rule_evaluator import AvailabilityDecision, AvailabilityStatus


class RuleWarningResponse(BaseModel):
    rule_id: str
    message: str


class AppliedRulesResponse(BaseModel):
    block: Optional[str] = None
    price: Optional[str] = None
    min_nights: Optional[str] = None
    max_nights: Optional[str] = None


class AvailabilityDecisionResponse(BaseModel):
    """Resolved availability for one date"""
    property_id: str
    date: date
    status: AvailabilityStatus
    price: Optional[Decimal] = None
    min_nights: Optional[int] = None
    max_nights: Optional[int] = None
    currency: str
    applied_rules: AppliedRulesResponse
    warnings: List[RuleWarningResponse] = []

    @classmethod
    def from_decision(cls, decision: AvailabilityDecision) -> "AvailabilityDecisionResponse":
        applied = decision.applied_rules
        return cls(
            property_id=decision.property_id,
            date=decision.date,
            status=decision.status,
            price=decision.price,
            min_nights=decision.min_nights,
            max_nights=decision.max_nights,
            currency=decision.currency,
            applied_rules=AppliedRulesResponse(
                block=applied.block,
                price=applied.price,
                min_nights=applied.min_nights,
                max_nights=applied.max_nights,
            ),
            warnings=[RuleWarningResponse(rule_id=w.rule_id, message=w.message) for w in applied.warnings],
        )


class CalendarSummary(BaseModel):
    total_days: int
    available_days: int
    blocked_days: int


class AvailabilityCalendarResponse(BaseModel):
    property_id: str
    start_date: date
    end_date: date
    days: List[AvailabilityDecisionResponse]
    summary: CalendarSummary
    warnings: List[RuleWarningResponse] = []


class StayCheckRequest(BaseModel):
    check_in: date
    check_out: date  # exclusive, guest leaves this day


class StayNight(BaseModel):
    date: date
    price: Optional[Decimal] = None
    status: AvailabilityStatus
    rule_ids: List[str] = []


class StayCheckResponse(BaseModel):
    """Outcome of a prospective booking check, with a quote when accepted"""
    property_id: str
    check_in: date
    check_out: date
    num_nights: int
    accepted: bool
    reason: Optional[str] = None
    blocked_dates: List[date] = []
    min_nights: Optional[int] = None
    max_nights: Optional[int] = None
    nights: List[StayNight] = []
    total: Optional[Decimal] = None
    currency: str


class AvailabilitySummaryRequest(BaseModel):
    property_ids: List[str] = Field(..., min_length=1, max_length=50)
    start: date
    end: date


class PropertyAvailabilitySummary(CalendarSummary):
    property_id: str
    start_date: date
    end_date: date
