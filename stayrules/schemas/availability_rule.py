"""
Availability Rule Schemas

Pydantic models for rule API requests and responses. Rule configuration is
validated here, at creation and update time; the evaluator does not
re-validate it.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.availability_rule import MAX_PRIORITY, MIN_PRIORITY, MONTH_DAY_RANGE, WEEKDAY_RANGE, RuleAction, RuleType


def check_rule_shape(
    rule_type: RuleType,
    action: RuleAction,
    day_indexes: List[int],
    action_value: Optional[Decimal],
    valid_from: Optional[date],
    valid_until: Optional[date],
) -> None:
    """Raise ValueError if the combination of fields cannot form a working rule"""
    if valid_from and valid_until and valid_from > valid_until:
        raise ValueError("valid_from must be on or before valid_until")

    if rule_type == RuleType.WEEKLY:
        if not day_indexes:
            raise ValueError("WEEKLY rules need at least one day index")
        if any(d not in WEEKDAY_RANGE for d in day_indexes):
            raise ValueError("WEEKLY day indexes must be 0-6 (0=Sunday)")
    elif rule_type == RuleType.MONTHLY:
        if not day_indexes:
            raise ValueError("MONTHLY rules need at least one day index")
        if any(d not in MONTH_DAY_RANGE for d in day_indexes):
            raise ValueError("MONTHLY day indexes must be 1-31")
    elif not (valid_from and valid_until):
        raise ValueError(f"{rule_type.value} rules need both valid_from and valid_until")

    if action == RuleAction.PRICE:
        if action_value is None:
            raise ValueError("PRICE rules need an action_value")
        if action_value < 0:
            raise ValueError("price must not be negative")
    elif action in (RuleAction.MIN_NIGHTS, RuleAction.MAX_NIGHTS):
        if action_value is None:
            raise ValueError(f"{action.value} rules need an action_value")
        if action_value <= 0 or action_value != action_value.to_integral_value():
            raise ValueError(f"{action.value} must be a positive whole number")


class RulePattern(BaseModel):
    """Recurrence pattern: weekdays (0=Sunday..6) or days of month (1-31)"""
    day_indexes: List[int] = Field(default_factory=list)

    @field_validator('day_indexes')
    @classmethod
    def dedupe_day_indexes(cls, v):
        return sorted(set(v))


class AvailabilityRuleBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    type: RuleType = RuleType.WEEKLY
    pattern: RulePattern = Field(default_factory=RulePattern)
    action: RuleAction = RuleAction.BLOCK
    action_value: Optional[Decimal] = Field(None, allow_inf_nan=False)
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    priority: int = Field(default=5, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    is_active: bool = True


class AvailabilityRuleCreate(AvailabilityRuleBase):
    """Schema for creating a rule"""
    created_by: Optional[str] = Field(None, max_length=120)

    @model_validator(mode='after')
    def validate_shape(self):
        check_rule_shape(
            self.type, self.action, self.pattern.day_indexes,
            self.action_value, self.valid_from, self.valid_until
        )
        if self.action == RuleAction.BLOCK:
            self.action_value = None
        return self


class AvailabilityRuleUpdate(BaseModel):
    """Schema for updating a rule; the merged result is validated by the store"""
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    type: Optional[RuleType] = None
    pattern: Optional[RulePattern] = None
    action: Optional[RuleAction] = None
    action_value: Optional[Decimal] = Field(None, allow_inf_nan=False)
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    priority: Optional[int] = Field(None, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    is_active: Optional[bool] = None


class AvailabilityRuleResponse(AvailabilityRuleBase):
    id: str
    property_id: str
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, rule) -> "AvailabilityRuleResponse":
        return cls(
            id=rule.id,
            property_id=rule.property_id,
            name=rule.name,
            description=rule.description,
            type=RuleType(rule.type),
            pattern=RulePattern(day_indexes=rule.get_day_indexes()),
            action=RuleAction(rule.action),
            action_value=rule.action_value,
            valid_from=rule.valid_from,
            valid_until=rule.valid_until,
            priority=rule.priority,
            is_active=rule.is_active,
            created_by=rule.created_by,
            created_at=rule.created_at,
            updated_at=rule.updated_at,
        )
