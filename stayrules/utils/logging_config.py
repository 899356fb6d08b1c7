"""
Structured Logging

Log records carry the request id and tenant of the HTTP request that
produced them, plus the entity (property or rule) they are about. In
production the records are emitted as one JSON object per line.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

request_id_var: ContextVar[str] = ContextVar('request_id', default='')
tenant_id_var: ContextVar[str] = ContextVar('tenant_id', default='')

PLAIN_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

# Record attributes copied into the JSON payload when present
ENTITY_FIELDS = ("entity_type", "entity_id")


def current_context() -> Dict[str, str]:
    """Request id and tenant of the request being served, if any"""
    context = {}
    if request_id_var.get():
        context["request_id"] = request_id_var.get()
    if tenant_id_var.get():
        context["tenant_id"] = tenant_id_var.get()
    return context


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        payload.update(current_context())

        for name in ENTITY_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value

        details = getattr(record, "details", None)
        if details:
            payload["details"] = details

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class StructuredLogger(logging.LoggerAdapter):
    """
    Adapter with helpers for the events this service records.

    Keyword details end up under "details" in JSON output.
    """

    def process(self, msg, kwargs):
        kwargs['extra'] = {**self.extra, **kwargs.get('extra', {})}
        return msg, kwargs

    def log_with_context(
        self,
        level: int,
        msg: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        **details
    ):
        self.log(level, msg, extra={
            "entity_type": entity_type,
            "entity_id": entity_id,
            "details": details,
        })

    def rule_changed(self, rule_id: str, change: str, **details):
        """created / updated / deleted / toggled"""
        self.log_with_context(
            logging.INFO,
            f"Availability rule {change}: {rule_id}",
            entity_type="availability_rule",
            entity_id=rule_id,
            change=change,
            **details
        )

    def stay_checked(self, property_id: str, check_in: str, check_out: str, accepted: bool, reason: Optional[str] = None):
        outcome = "accepted" if accepted else f"rejected ({reason})"
        self.log_with_context(
            logging.INFO,
            f"Stay {check_in} -> {check_out} {outcome}",
            entity_type="property",
            entity_id=property_id,
            check_in=check_in,
            check_out=check_out,
            accepted=accepted,
            reason=reason
        )


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    include_uvicorn: bool = True
) -> None:
    """
    Route the root logger (and optionally uvicorn's) to stdout.

    Args:
        level: Log level name; unknown names fall back to INFO
        json_format: JSON lines when True, a plain text line otherwise
        include_uvicorn: Send uvicorn's own loggers through the same handler
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(PLAIN_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    if include_uvicorn:
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            logging.getLogger(name).handlers = [handler]

    # SQL echo stays off unless explicitly asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(logging.getLogger(name), {})


def set_request_context(request_id: str, tenant_id: Optional[str] = None):
    request_id_var.set(request_id)
    if tenant_id:
        tenant_id_var.set(tenant_id)


def clear_request_context():
    request_id_var.set('')
    tenant_id_var.set('')
