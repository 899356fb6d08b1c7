"""
Availability API Router

Date decisions, calendars and stay checks for booking and pricing consumers.
"""

from datetime import date
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.availability import (
    AvailabilityCalendarResponse,
    AvailabilityDecisionResponse,
    AvailabilitySummaryRequest,
    CalendarSummary,
    PropertyAvailabilitySummary,
    RuleWarningResponse,
    StayCheckRequest,
    StayCheckResponse,
    StayNight,
)
from ..services.availability_service import AvailabilityService
from ..utils.dependencies import get_tenant_id

router = APIRouter(prefix="/api/availability", tags=["Availability"])


@router.get("/{property_id}", response_model=AvailabilityDecisionResponse)
async def get_decision(
    property_id: str,
    on: date = Query(..., alias="date", description="Date to evaluate (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Resolved status, price and stay bounds for one date"""
    decision = AvailabilityService(db, tenant_id).decision_for(property_id, on)
    return AvailabilityDecisionResponse.from_decision(decision)


@router.get("/{property_id}/calendar", response_model=AvailabilityCalendarResponse)
async def get_calendar(
    property_id: str,
    start: date = Query(..., description="First date (inclusive)"),
    end: date = Query(..., description="Last date (inclusive)"),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Per-date decisions for an inclusive range"""
    calendar = AvailabilityService(db, tenant_id).calendar(property_id, start, end)
    return AvailabilityCalendarResponse(
        property_id=calendar.property_id,
        start_date=calendar.start_date,
        end_date=calendar.end_date,
        days=[AvailabilityDecisionResponse.from_decision(d) for d in calendar.days],
        summary=CalendarSummary(
            total_days=calendar.total_days,
            available_days=calendar.available_days,
            blocked_days=calendar.blocked_days,
        ),
        warnings=[RuleWarningResponse(rule_id=w.rule_id, message=w.message) for w in calendar.warnings],
    )


@router.post("/{property_id}/check", response_model=StayCheckResponse)
async def check_stay(
    property_id: str,
    request: StayCheckRequest,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Check a prospective booking. Blocked nights veto the stay; when accepted
    the response carries the nightly prices and total.
    """
    result = AvailabilityService(db, tenant_id).check_stay(property_id, request.check_in, request.check_out)
    return StayCheckResponse(
        property_id=result.property_id,
        check_in=result.check_in,
        check_out=result.check_out,
        num_nights=result.num_nights,
        accepted=result.accepted,
        reason=result.reason,
        blocked_dates=result.blocked_dates,
        min_nights=result.min_nights,
        max_nights=result.max_nights,
        nights=[
            StayNight(
                date=n.date,
                # a blocked night has no price to quote
                price=None if n.is_blocked else n.price,
                status=n.status,
                rule_ids=n.applied_rules.rule_ids(),
            )
            for n in result.nights
        ],
        total=result.total,
        currency=result.currency,
    )


@router.post("/summary", response_model=List[PropertyAvailabilitySummary])
async def get_summaries(
    request: AvailabilitySummaryRequest,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Available/blocked day counts for several properties over one range"""
    calendars = AvailabilityService(db, tenant_id).summaries(request.property_ids, request.start, request.end)
    return [
        PropertyAvailabilitySummary(
            property_id=c.property_id,
            start_date=c.start_date,
            end_date=c.end_date,
            total_days=c.total_days,
            available_days=c.available_days,
            blocked_days=c.blocked_days,
        )
        for c in calendars
    ]
