"""Message Status Enforcement — the forward-only message lifecycle graph.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - draft -> approved -> sent is the only path; nothing moves backwards
    - Same-state "transitions" are rejected like any other edge outside the graph
    - approved and sent are the only statuses a student may ever read

Design Decisions:
    - Raise instead of returning error dicts: callers are managers, not the agent loop,
      and InvalidStateTransitionError maps straight to a 409 envelope
"""

from mentorflow.core.domain_types import MessageStatus
from mentorflow.core.errors import InvalidStateTransitionError, ErrorContext


ALLOWED_TRANSITIONS: dict[MessageStatus, frozenset[MessageStatus]] = {
    MessageStatus.DRAFT: frozenset({MessageStatus.APPROVED}),
    MessageStatus.APPROVED: frozenset({MessageStatus.SENT}),
    MessageStatus.SENT: frozenset(),
}

VISIBLE_STATUSES: frozenset[MessageStatus] = frozenset(
    {MessageStatus.APPROVED, MessageStatus.SENT},
)


def can_transition(current: MessageStatus, target: MessageStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def check_transition(
    current: MessageStatus,
    target: MessageStatus,
    context: ErrorContext | None = None,
) -> None:
    """Raise InvalidStateTransitionError unless current -> target is an edge."""
    if not can_transition(current, target):
        raise InvalidStateTransitionError(current.value, target.value, context)


def is_visible_to_student(status: MessageStatus) -> bool:
    return status in VISIBLE_STATUSES
