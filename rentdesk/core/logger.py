"""
Centralized logging module for the rentdesk backend.

Rules:
- Structured logging suitable for Grafana/Loki/ELK
- Appropriate log levels (info, warning, error)
- NEVER logs passwords, tokens, secrets, or full request bodies with sensitive data
- Security-sensitive actions emit structured logs with user_id, agency_id, action, result, timestamp
"""
import logging
import json
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from .config import settings

logger = logging.getLogger("rentdesk")
logger.setLevel(settings.LOG_LEVEL.upper())

_handler = logging.StreamHandler()
_handler.setLevel(settings.LOG_LEVEL.upper())

_EXTRA_FIELDS = ("user_id", "agency_id", "action", "result", "meta")


class JSONFormatter(logging.Formatter):
    """Formatter that outputs structured JSON logs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


_handler.setFormatter(JSONFormatter())
logger.addHandler(_handler)

# Prevent duplicate logs
logger.propagate = False


def log_security_event(
    action: str,
    result: str,
    user_id: Optional[str] = None,
    agency_id: Optional[str] = None,
    meta: Optional[Dict[str, Any]] = None,
    level: str = "info",
) -> None:
    """
    Log security-sensitive actions (login, failed login, status changes, deletions).

    Emits structured logs with:
    - user_id, agency_id, action, result, timestamp
    - Additional metadata in meta dict

    Args:
        action: Action name (e.g., "login", "user_delete", "settings_update")
        result: Result status (e.g., "success", "failure", "denied")
        user_id: Acting user ID (optional)
        agency_id: Agency ID of the acting user (optional)
        meta: Additional metadata dict (optional)
        level: Log level ("info", "warning", "error")
    """
    log_method = getattr(logger, level.lower(), logger.info)
    extra: Dict[str, Any] = {
        "action": action,
        "result": result,
    }
    if user_id:
        extra["user_id"] = user_id
    if agency_id:
        extra["agency_id"] = agency_id
    if meta:
        extra["meta"] = meta

    log_method("Security event", extra=extra)
