"""Canonical enum values for users and deal negotiation."""

from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    ARTIST = "ARTIST"
    EXEC = "EXEC"
    REP = "REP"
    ADMIN = "ADMIN"


class DealState(str, enum.Enum):
    PENDING = "PENDING"
    COUNTERED = "COUNTERED"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    AWAITING_RESPONSE = "AWAITING_RESPONSE"
    CANCELLED = "CANCELLED"


class DealAction(str, enum.Enum):
    """Audit label recorded on every history entry."""

    COUNTER = "COUNTER"
    ACCEPT = "ACCEPT"
    ACCEPT_COUNTER = "ACCEPT_COUNTER"
    DECLINE = "DECLINE"
    CANCEL = "CANCEL"


class UsageType(str, enum.Enum):
    SYNC = "SYNC"
    MASTER = "MASTER"


class RightsType(str, enum.Enum):
    EXCLUSIVE = "EXCLUSIVE"
    NON_EXCLUSIVE = "NON_EXCLUSIVE"
