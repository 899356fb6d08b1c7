"""Availability-rule evaluation service for short-term-rental properties."""

__version__ = "1.0.0"
