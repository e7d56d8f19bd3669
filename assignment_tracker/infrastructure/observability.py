"""Structured Logging — JSON formatter and root handler setup.

Invariants:
    - Every JSON line carries timestamp, level, logger name and message
    - Engine extras (task_id, user_id, operation, error_code, conflict_count)
      are copied only when set on the record
    - At most one tracker handler on the root logger, however often setup runs

Design Decisions:
    - stdlib logging with a small JSONFormatter: callers keep their own handlers
    - Timestamp taken from the record, not from the moment of formatting
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "task_id", "user_id", "operation", "error_code", "conflict_count",
)
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_installed_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update({
            key: record.__dict__[key]
            for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the tracker's root handler, replacing one from an earlier call."""
    global _installed_handler
    if _installed_handler is not None:
        logging.root.removeHandler(_installed_handler)

    handler = logging.StreamHandler()
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _installed_handler = handler
    return handler
