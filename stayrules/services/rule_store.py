"""
Rule Store

CRUD over availability rules, scoped to one tenant. list_rules() returns
inactive rules too; the evaluator does the filtering.
"""

from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from ..exceptions import InvalidRuleError, RuleNotFoundError
from ..models.availability_rule import AvailabilityRule, RuleAction, RuleType
from ..schemas.availability_rule import AvailabilityRuleCreate, AvailabilityRuleUpdate, check_rule_shape
from ..utils.logging_config import get_logger
from .property_store import PropertyStore
from .rule_matcher import RuleSnapshot

logger = get_logger(__name__)

# Columns a partial update may not null out
REQUIRED_FIELDS = {"name", "type", "action", "priority", "is_active"}


class RuleStore:
    def __init__(self, db: Session, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id
        self.properties = PropertyStore(db, tenant_id)

    def _query(self):
        return self.db.query(AvailabilityRule).filter(AvailabilityRule.tenant_id == self.tenant_id)

    def list_rules(self, property_id: str) -> List[AvailabilityRule]:
        """All rules of a property, active or not, highest priority first"""
        self.properties.get(property_id)
        return self._query().filter(
            AvailabilityRule.property_id == property_id
        ).order_by(
            AvailabilityRule.priority.desc(),
            AvailabilityRule.updated_at.desc(),
            AvailabilityRule.id
        ).all()

    def snapshot(self, property_id: str) -> List[RuleSnapshot]:
        return [rule.to_snapshot() for rule in self.list_rules(property_id)]

    def get_rule(self, rule_id: str) -> AvailabilityRule:
        rule = self._query().filter(AvailabilityRule.id == rule_id).first()
        if not rule:
            raise RuleNotFoundError(rule_id)
        return rule

    def create_rule(self, property_id: str, data: AvailabilityRuleCreate) -> AvailabilityRule:
        self.properties.get(property_id)

        rule = AvailabilityRule(
            tenant_id=self.tenant_id,
            property_id=property_id,
            name=data.name,
            description=data.description,
            type=data.type.value,
            action=data.action.value,
            action_value=data.action_value,
            valid_from=data.valid_from,
            valid_until=data.valid_until,
            priority=data.priority,
            is_active=data.is_active,
            created_by=data.created_by,
        )
        rule.set_day_indexes(data.pattern.day_indexes)

        self.db.add(rule)
        self.db.commit()
        self.db.refresh(rule)

        logger.rule_changed(
            rule.id, "created",
            property_id=property_id,
            rule_name=rule.name,
            rule_type=rule.type,
            action=rule.action
        )
        return rule

    def update_rule(self, rule_id: str, data: AvailabilityRuleUpdate) -> AvailabilityRule:
        """
        Apply a partial update. The merged rule is validated as a whole, so an
        update cannot leave e.g. a SEASONAL rule without bounds.
        """
        rule = self.get_rule(rule_id)
        update_data = data.model_dump(exclude_unset=True)

        rule_type = update_data.get("type") or RuleType(rule.type)
        action = update_data.get("action") or RuleAction(rule.action)
        if "pattern" in update_data:
            day_indexes = data.pattern.day_indexes if data.pattern else []
        else:
            day_indexes = rule.get_day_indexes()
        action_value = update_data.get("action_value", rule.action_value)

        try:
            check_rule_shape(
                rule_type,
                action,
                day_indexes,
                action_value,
                update_data.get("valid_from", rule.valid_from),
                update_data.get("valid_until", rule.valid_until),
            )
        except ValueError as e:
            raise InvalidRuleError(str(e)) from e

        for key, value in update_data.items():
            if key == "pattern":
                continue
            if value is None and key in REQUIRED_FIELDS:
                continue
            if key in ("type", "action"):
                value = value.value
            setattr(rule, key, value)
        rule.set_day_indexes(day_indexes)
        if action == RuleAction.BLOCK:
            rule.action_value = None
        # onupdate only fires when a column changed
        rule.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(rule)

        logger.rule_changed(rule.id, "updated", updates=sorted(update_data))
        return rule

    def delete_rule(self, rule_id: str) -> None:
        rule = self.get_rule(rule_id)
        self.db.delete(rule)
        self.db.commit()
        logger.rule_changed(rule_id, "deleted")

    def toggle_rule(self, rule_id: str) -> AvailabilityRule:
        rule = self.get_rule(rule_id)
        rule.is_active = not rule.is_active
        rule.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(rule)
        logger.rule_changed(rule.id, "toggled", is_active=rule.is_active)
        return rule
