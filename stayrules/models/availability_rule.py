"""
Availability Rule Model

Prioritized directives attached to a single property:
- WEEKLY / MONTHLY rules recur on a set of day indexes
- SEASONAL rules cover the valid_from..valid_until window
- Each rule either blocks the date or overrides price / min nights / max nights
"""

import enum
import uuid
from datetime import datetime
from decimal import Decimal
from typing import List

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from ..database import Base

MIN_PRIORITY = 1
MAX_PRIORITY = 10

WEEKDAY_RANGE = range(0, 7)  # Sunday=0 .. Saturday=6
MONTH_DAY_RANGE = range(1, 32)


class RuleType(str, enum.Enum):
    """Which pattern fields are meaningful"""
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    SEASONAL = "SEASONAL"
    CUSTOM = "CUSTOM"


class RuleAction(str, enum.Enum):
    """Effect applied when the rule matches"""
    BLOCK = "BLOCK"
    PRICE = "PRICE"
    MIN_NIGHTS = "MIN_NIGHTS"
    MAX_NIGHTS = "MAX_NIGHTS"


class AvailabilityRule(Base):
    __tablename__ = "availability_rules"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(String(64), nullable=False, index=True)
    property_id = Column(String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)

    type = Column(String(20), nullable=False, default=RuleType.WEEKLY.value)
    # Comma-separated: "0,6" for weekends (Sunday=0), "1,15" for monthly days
    day_indexes = Column(String(100), nullable=True)

    action = Column(String(20), nullable=False, default=RuleAction.BLOCK.value)
    action_value = Column(Numeric(10, 2), nullable=True)  # null for BLOCK

    # Inclusive bounds
    valid_from = Column(Date, nullable=True)
    valid_until = Column(Date, nullable=True)

    priority = Column(Integer, nullable=False, default=5)  # 1 lowest .. 10 highest
    is_active = Column(Boolean, nullable=False, default=True)

    # Tracking
    created_by = Column(String(120), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    property = relationship("Property", back_populates="rules")

    __table_args__ = (
        Index("ix_availability_rules_tenant_property", "tenant_id", "property_id"),
    )

    def get_day_indexes(self) -> List[int]:
        """Parse day_indexes string to a sorted list of integers"""
        if not self.day_indexes:
            return []
        return sorted({int(d.strip()) for d in self.day_indexes.split(",") if d.strip().lstrip("-").isdigit()})

    def set_day_indexes(self, values) -> None:
        self.day_indexes = ",".join(str(v) for v in sorted(set(values))) if values else None

    def to_snapshot(self):
        """Plain-value copy handed to the evaluator"""
        from ..services.rule_matcher import RuleSnapshot

        return RuleSnapshot(
            id=self.id,
            property_id=self.property_id,
            name=self.name or "",
            type=RuleType(self.type),
            action=RuleAction(self.action),
            day_indexes=tuple(self.get_day_indexes()),
            action_value=Decimal(str(self.action_value)) if self.action_value is not None else None,
            valid_from=self.valid_from,
            valid_until=self.valid_until,
            priority=self.priority,
            is_active=bool(self.is_active),
            updated_at=self.updated_at,
        )

    def __repr__(self):
        return f"<AvailabilityRule {self.name} {self.type}/{self.action} p={self.priority}>"
