"""JSON line logging for the negotiation service.

Every deal mutation logs an ``event`` name and a ``context`` mapping (see
``timeless.core.logging``). ``deal_id`` and ``user_id`` are also copied to the
top level of each line so a deal's whole negotiation can be filtered with one
key.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from timeless.core.config import get_config

CORRELATION_KEYS = ("deal_id", "user_id")

# Per-request and per-frame chatter that drowns deal events in production.
NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "websockets", "httpx")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        event = getattr(record, "event", None)
        if event is not None:
            payload["event"] = event
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            payload["context"] = context
            for key in CORRELATION_KEYS:
                if context.get(key) is not None:
                    payload[key] = context[key]
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging() -> None:
    """Install the JSON handlers on the root logger, once per process."""
    config = get_config()
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))
    formatter = JsonFormatter()

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if config.LOG_FILE:
        file_handler = logging.FileHandler(config.LOG_FILE)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if config.is_production:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
