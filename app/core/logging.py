"""
Logging setup.

Modules log through `logging.getLogger(__name__)`; configure_logging() is
called once at startup and installs a single stdout handler. Development gets
a readable one-line text format, production gets one JSON object per line.
Values under sensitive keys in `extra=` payloads are replaced before output.
"""
import json
import logging
import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

SENSITIVE_KEYS = {
    "password",
    "hashed_password",
    "new_password",
    "current_password",
    "token",
    "access_token",
    "refresh_token",
    "authorization",
    "secret",
    "otp",
}

REDACTED = "[REDACTED]"

# Attributes every LogRecord has; anything else came from `extra=`
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _redact(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            k: REDACTED if str(k).lower() in SENSITIVE_KEYS else _redact(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(_redact(v) for v in value)
    return value


def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """The record's `extra=` payload with sensitive values redacted."""
    fields = {}
    for key, value in record.__dict__.items():
        if key in _RECORD_ATTRS or key.startswith("_"):
            continue
        fields[key] = REDACTED if key.lower() in SENSITIVE_KEYS else _redact(value)
    return fields


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(extra_fields(record))
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = extra_fields(record)
        if fields:
            line += " " + json.dumps(fields, default=str)
        return line


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    from app.config import settings

    level_name = (level or settings.log_level).upper()
    if json_output is None:
        json_output = settings.is_production

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_output else TextFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.INFO))
