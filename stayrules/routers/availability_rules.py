"""
Availability Rules API Router

CRUD for the rules a property manager composes per property.
"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.availability_rule import (
    AvailabilityRuleCreate,
    AvailabilityRuleResponse,
    AvailabilityRuleUpdate,
)
from ..services.rule_store import RuleStore
from ..utils.dependencies import get_tenant_id

router = APIRouter(prefix="/api", tags=["Availability Rules"])


@router.get("/properties/{property_id}/rules", response_model=List[AvailabilityRuleResponse])
async def list_rules(
    property_id: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """All rules of a property, inactive ones included, highest priority first"""
    rules = RuleStore(db, tenant_id).list_rules(property_id)
    return [AvailabilityRuleResponse.from_model(r) for r in rules]


@router.post("/properties/{property_id}/rules", response_model=AvailabilityRuleResponse, status_code=201)
async def create_rule(
    property_id: str,
    data: AvailabilityRuleCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    rule = RuleStore(db, tenant_id).create_rule(property_id, data)
    return AvailabilityRuleResponse.from_model(rule)


@router.get("/rules/{rule_id}", response_model=AvailabilityRuleResponse)
async def get_rule(
    rule_id: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    rule = RuleStore(db, tenant_id).get_rule(rule_id)
    return AvailabilityRuleResponse.from_model(rule)


@router.put("/rules/{rule_id}", response_model=AvailabilityRuleResponse)
async def update_rule(
    rule_id: str,
    data: AvailabilityRuleUpdate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    rule = RuleStore(db, tenant_id).update_rule(rule_id, data)
    return AvailabilityRuleResponse.from_model(rule)


@router.delete("/rules/{rule_id}")
async def delete_rule(
    rule_id: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    RuleStore(db, tenant_id).delete_rule(rule_id)
    return {"message": "Rule deleted"}


@router.post("/rules/{rule_id}/toggle", response_model=AvailabilityRuleResponse)
async def toggle_rule(
    rule_id: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Flip is_active; inactive rules stay stored but are never evaluated"""
    rule = RuleStore(db, tenant_id).toggle_rule(rule_id)
    return AvailabilityRuleResponse.from_model(rule)
