"""Identifier generation helpers."""

from __future__ import annotations

import uuid


def new_id() -> str:
    """Create an opaque UUID4-based identifier for users, tracks and deals."""
    return str(uuid.uuid4())
