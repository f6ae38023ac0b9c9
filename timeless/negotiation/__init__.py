"""Deal negotiation rules: terms value objects and the transition table."""

from timeless.negotiation.terms import DealTerms, TermsChanges, merge_terms
from timeless.negotiation.transitions import (
    DEAL_STATE_TRANSITIONS,
    TERMINAL_STATES,
    DealTransition,
    action_for,
    allowed_targets,
    authorize_transition,
    find_transition,
    is_terminal,
)

__all__ = [
    "DEAL_STATE_TRANSITIONS",
    "DealTerms",
    "DealTransition",
    "TERMINAL_STATES",
    "TermsChanges",
    "action_for",
    "allowed_targets",
    "authorize_transition",
    "find_transition",
    "is_terminal",
    "merge_terms",
]
