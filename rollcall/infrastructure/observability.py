"""Structured Logging: one JSON object per line, carrying the ledger's context fields.

Invariants:
    - Every line has timestamp (record creation time, UTC), level, logger and message
    - Context extras (scope_id, event_id, member_id, outcome, ...) appear only when set
    - setup_logging is idempotent: calling it twice never duplicates output

Design Decisions:
    - stdlib logging + a small Formatter subclass: no logging dependency to carry
    - Numbers and booleans stay JSON-native; UUIDs, enums and dates are rendered with str()
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "scope_id", "event_id", "member_id", "outcome", "promoted_member_id",
    "error_code", "attempt", "count",
)

_HANDLER_NAME = "rollcall"
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def _json_value(value):
    if isinstance(value, (bool, int, float)):
        return value
    if hasattr(value, "value") and isinstance(value.value, str):
        return value.value
    return str(value)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, _json_value(getattr(record, key)))
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the Rollcall handler on the root logger (replacing a previous one)."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
