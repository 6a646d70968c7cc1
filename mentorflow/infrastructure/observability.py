"""Structured Logging — JSON formatter and one-shot logging setup.

Invariants:
    - Every line carries timestamp (record creation time, UTC), level, logger, message
    - Known extras (student/conversation/message ids, tool_name, error_code, path,
      attempt, token counts) are surfaced when present; ids are rendered as strings
    - setup_logging is idempotent: calling it twice never duplicates output

Design Decisions:
    - Stdlib logging + a small JSON formatter, configured once from the lifespan
    - Driver/client loggers (sqlalchemy.engine, httpx, anthropic) capped at WARNING
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_KEYS = (
    "student_id", "conversation_id", "message_id", "tool_name",
    "error_code", "path", "attempt", "input_tokens", "output_tokens",
)

_NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "anthropic")

_HANDLER_NAME = "mentorflow"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_KEYS:
            val = getattr(record, key, None)
            if val is not None:
                log[key] = str(val) if key.endswith("_id") else val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
