"""Structured log context helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class LogContext:
    """Normalized context fields attached to deal-related log lines."""

    user_id: str | None = None
    role: str | None = None
    deal_id: str | None = None
    trace_id: str | None = None


def build_log_event(event: str, context: LogContext, **fields: Any) -> dict[str, Any]:
    """Build a normalized structured log payload."""
    payload: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "user_id": context.user_id,
        "role": context.role,
        "deal_id": context.deal_id,
        "trace_id": context.trace_id,
    }
    payload.update(fields)
    return payload


def log_extra(event: str, context: LogContext, **fields: Any) -> dict[str, Any]:
    """Return the ``extra`` mapping understood by ``JsonFormatter``."""
    return {"event": event, "context": build_log_event(event, context, **fields)}
