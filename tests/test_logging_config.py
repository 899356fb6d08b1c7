"""
Tests for structured log output
"""

import json
import logging

from stayrules.utils.logging_config import (
    JSONFormatter,
    clear_request_context,
    get_logger,
    set_request_context,
)


class CapturingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.setFormatter(JSONFormatter())
        self.lines = []

    def emit(self, record):
        self.lines.append(json.loads(self.format(record)))


def capture(name: str):
    handler = CapturingHandler()
    base = logging.getLogger(name)
    base.handlers = [handler]
    base.setLevel(logging.DEBUG)
    base.propagate = False
    return get_logger(name), handler


class TestJSONFormatter:
    def test_rule_change_carries_entity_and_details(self):
        logger, handler = capture("stayrules.test.rules")

        logger.rule_changed("rule-1", "toggled", is_active=False)

        line = handler.lines[0]
        assert line["level"] == "INFO"
        assert line["entity_type"] == "availability_rule"
        assert line["entity_id"] == "rule-1"
        assert line["details"] == {"change": "toggled", "is_active": False}

    def test_request_context_included(self):
        logger, handler = capture("stayrules.test.context")
        set_request_context("req-1", tenant_id="tenant-a")
        try:
            logger.info("hello")
        finally:
            clear_request_context()

        line = handler.lines[0]
        assert line["request_id"] == "req-1"
        assert line["tenant_id"] == "tenant-a"
        assert "entity_type" not in line

    def test_rejected_stay_reason_in_message(self):
        logger, handler = capture("stayrules.test.stays")

        logger.stay_checked("prop-1", "2026-01-16", "2026-01-20", False, "blocked")

        line = handler.lines[0]
        assert "rejected (blocked)" in line["message"]
        assert line["details"]["accepted"] is False
