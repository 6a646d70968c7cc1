"""Phase Transition Manager — one-way phase1 → phase2 move for a student.

Invariants:
    - phase2 is terminal: a second transition raises AlreadyInTargetPhaseError (never silent success)
    - current_phase and phase2_start are written together by one compare-and-set
      (WHERE current_phase = 'phase1'), so two concurrent transitions cannot both win
    - No other student fields are touched

Design Decisions:
    - Clock injected: tests pin phase2_start without patching datetime
    - Read before CAS only to pick the right error; the CAS alone guarantees correctness
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from mentorflow.core.domain_types import StudentId, Phase
from mentorflow.core.errors import (
    AlreadyInTargetPhaseError, NotFoundError, ErrorContext,
)
from mentorflow.core.repository_protocols import StudentStore
from mentorflow.core.validate_inputs import require_fields

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PhaseTransitionManager:
    """Guards the phase1 → phase2 lifecycle."""

    def __init__(
        self, store: StudentStore, clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._clock = clock

    async def transition_to_phase2(self, student_id: StudentId | None) -> None:
        require_fields(studentId=student_id)
        ctx = ErrorContext(student_id=str(student_id))

        student = await self._store.get_student(student_id)
        if student is None:
            raise NotFoundError("Student", str(student_id), ctx)
        if student.current_phase == Phase.PHASE2:
            raise AlreadyInTargetPhaseError(Phase.PHASE2.value, ctx)

        moved = await self._store.compare_and_set_phase(
            student_id, Phase.PHASE1, Phase.PHASE2, self._clock(),
        )
        if not moved:
            # Lost the race to another transition (or the row vanished)
            if await self._store.get_student(student_id) is None:
                raise NotFoundError("Student", str(student_id), ctx)
            raise AlreadyInTargetPhaseError(Phase.PHASE2.value, ctx)

        logger.info(
            "Student transitioned to phase2", extra={"student_id": student_id},
        )
