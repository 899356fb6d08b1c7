# Services package
from .rule_matcher import RuleSnapshot, rule_applies_on, find_configuration_issue, find_unusable_issue
from .rule_evaluator import (
    AvailabilityDecision,
    AvailabilityStatus,
    AppliedRules,
    PropertyTerms,
    RuleWarning,
    evaluate,
    evaluate_range,
)
from .property_store import PropertyStore
from .rule_store import RuleStore
from .availability_service import AvailabilityService, AvailabilityCalendar, StayCheck, check_stay_decisions

__all__ = [
    "RuleSnapshot", "rule_applies_on", "find_configuration_issue", "find_unusable_issue",
    "AvailabilityDecision", "AvailabilityStatus", "AppliedRules", "PropertyTerms", "RuleWarning",
    "evaluate", "evaluate_range",
    "PropertyStore", "RuleStore",
    "AvailabilityService", "AvailabilityCalendar", "StayCheck", "check_stay_decisions",
]
