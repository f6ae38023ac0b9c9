"""Declarative deal state transition table.

Each row names a legal move and the roles allowed to make it. Legality and
role authorization are both answered by a single lookup in this table; the
service layer never branches on states itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from timeless.core.exceptions import InvalidStateTransitionError, UnauthorizedActionError
from timeless.core.enums import DealAction, DealState, UserRole

_EXEC_SIDE = frozenset({UserRole.EXEC, UserRole.REP})
_ARTIST = frozenset({UserRole.ARTIST})


@dataclass(frozen=True)
class DealTransition:
    from_state: DealState
    to_state: DealState
    allowed_roles: frozenset[UserRole]


DEAL_STATE_TRANSITIONS: tuple[DealTransition, ...] = (
    DealTransition(DealState.PENDING, DealState.COUNTERED, _ARTIST | _EXEC_SIDE),
    DealTransition(DealState.PENDING, DealState.ACCEPTED, _ARTIST),
    DealTransition(DealState.PENDING, DealState.DECLINED, _ARTIST),
    DealTransition(DealState.PENDING, DealState.CANCELLED, _EXEC_SIDE),
    # Exec accepts the artist's counter; the artist still has to confirm.
    DealTransition(DealState.COUNTERED, DealState.PENDING, _EXEC_SIDE),
    DealTransition(DealState.COUNTERED, DealState.ACCEPTED, _ARTIST),
    DealTransition(DealState.COUNTERED, DealState.DECLINED, _ARTIST),
    DealTransition(DealState.COUNTERED, DealState.CANCELLED, _EXEC_SIDE),
    DealTransition(DealState.AWAITING_RESPONSE, DealState.ACCEPTED, _ARTIST),
    DealTransition(DealState.AWAITING_RESPONSE, DealState.DECLINED, _ARTIST),
    DealTransition(DealState.AWAITING_RESPONSE, DealState.CANCELLED, _EXEC_SIDE),
    DealTransition(DealState.AWAITING_RESPONSE, DealState.COUNTERED, _ARTIST),
)

_TRANSITION_INDEX: dict[tuple[DealState, DealState], DealTransition] = {
    (row.from_state, row.to_state): row for row in DEAL_STATE_TRANSITIONS
}

TERMINAL_STATES: frozenset[DealState] = frozenset(
    state for state in DealState if not any(row.from_state == state for row in DEAL_STATE_TRANSITIONS)
)

_ACTION_BY_TARGET: dict[DealState, DealAction] = {
    DealState.COUNTERED: DealAction.COUNTER,
    DealState.ACCEPTED: DealAction.ACCEPT,
    DealState.DECLINED: DealAction.DECLINE,
    DealState.CANCELLED: DealAction.CANCEL,
    DealState.PENDING: DealAction.ACCEPT_COUNTER,
}


def find_transition(current: DealState, target: DealState) -> DealTransition | None:
    return _TRANSITION_INDEX.get((current, target))


def is_terminal(state: DealState) -> bool:
    return state in TERMINAL_STATES


def authorize_transition(current: DealState, target: DealState, role: UserRole) -> DealTransition:
    """Return the matching row or raise when the move or the role is not allowed."""
    transition = find_transition(current, target)
    if transition is None:
        raise InvalidStateTransitionError(f"Transition not allowed: {current.value} -> {target.value}")
    if role not in transition.allowed_roles:
        raise UnauthorizedActionError(
            f"Role {role.value} may not move a deal from {current.value} to {target.value}."
        )
    return transition


def allowed_targets(current: DealState, role: UserRole) -> list[DealState]:
    """States ``role`` may move a deal to from ``current``, in table order."""
    return [
        row.to_state
        for row in DEAL_STATE_TRANSITIONS
        if row.from_state == current and role in row.allowed_roles
    ]


def action_for(target: DealState) -> DealAction:
    return _ACTION_BY_TARGET.get(target, DealAction.COUNTER)
