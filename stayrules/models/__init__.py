# Models package
from .property import Property
from .availability_rule import AvailabilityRule, RuleType, RuleAction

__all__ = [
    "Property",
    "AvailabilityRule", "RuleType", "RuleAction",
]
