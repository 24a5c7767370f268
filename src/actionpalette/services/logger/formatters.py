from __future__ import annotations
import json
import logging
from datetime import datetime, timezone

# Context fields injected by ContextAdapter; absent on records logged outside a dispatch.
CONTEXT_FIELDS = ("dispatch_id", "action", "strategy")


class SafeFormatter(logging.Formatter):
    """Text formatter that tolerates records without the context fields."""

    def format(self, record: logging.LogRecord) -> str:
        for name in CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, "-")
        return super().format(record)


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for file sinks."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None and value != "-":
                payload[name] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)
