"""Message status graph tests — draft → approved → sent only."""

import pytest

from mentorflow.core.domain_types import MessageStatus
from mentorflow.core.enforce_message_status import (
    can_transition, check_transition, is_visible_to_student, VISIBLE_STATUSES,
)
from mentorflow.core.errors import InvalidStateTransitionError

D, A, S = MessageStatus.DRAFT, MessageStatus.APPROVED, MessageStatus.SENT


@pytest.mark.parametrize("current,target", [(D, A), (A, S)])
def test_forward_edges_allowed(current, target):
    assert can_transition(current, target)
    check_transition(current, target)


@pytest.mark.parametrize("current,target", [
    (D, S),  # must be approved first
    (A, D), (S, A), (S, D),
    (D, D), (A, A), (S, S),
])
def test_other_moves_rejected(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidStateTransitionError) as exc:
        check_transition(current, target)
    assert exc.value.http_status == 409
    assert exc.value.current == current.value
    assert exc.value.target == target.value


def test_drafts_never_visible():
    assert not is_visible_to_student(D)
    assert is_visible_to_student(A)
    assert is_visible_to_student(S)
    assert VISIBLE_STATUSES == {A, S}
