"""
Domain exceptions raised by the stores and the availability evaluator.

Routers translate these into HTTP responses.
"""


class StayRulesError(Exception):
    """Base class for errors raised by stayrules services."""


class MissingDefaultError(StayRulesError):
    """
    An available date has no resolvable value for a required field.

    Raised when neither a matching rule nor the property itself supplies a
    nightly price or a minimum stay. A zero price or an unbounded stay would
    be indistinguishable from a real discount, so the caller must fix the
    property configuration instead.
    """

    def __init__(self, property_id: str, field: str):
        self.property_id = property_id
        self.field = field
        super().__init__(f"Property {property_id} has no {field} and no rule supplies one")


class PropertyNotFoundError(StayRulesError):
    def __init__(self, property_id: str):
        self.property_id = property_id
        super().__init__(f"Property {property_id} not found")


class RuleNotFoundError(StayRulesError):
    def __init__(self, rule_id: str):
        self.rule_id = rule_id
        super().__init__(f"Availability rule {rule_id} not found")


class InvalidRuleError(StayRulesError):
    """A rule update would leave the rule in a shape it could not be created with."""


class InvalidPropertyError(StayRulesError):
    """A property update would leave inconsistent stay bounds."""
