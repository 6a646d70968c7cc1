"""Phase transition tests — one-way phase1 → phase2 guard."""

import asyncio
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from mentorflow.core.domain_types import Phase
from mentorflow.core.errors import (
    AlreadyInTargetPhaseError, NotFoundError, ValidationError,
)
from mentorflow.services.phase_transition import PhaseTransitionManager

FIXED_NOW = datetime(2025, 6, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def phases(store):
    return PhaseTransitionManager(store, clock=lambda: FIXED_NOW)


async def test_transition_sets_phase_and_start(phases, store):
    student = store.add_student()
    await phases.transition_to_phase2(student.id)
    updated = store.students[student.id]
    assert updated.current_phase == Phase.PHASE2
    assert updated.phase2_start == FIXED_NOW
    assert updated.name == student.name
    assert updated.phase1_start == student.phase1_start


async def test_second_transition_rejected_and_start_unchanged(store):
    student = store.add_student()
    await PhaseTransitionManager(store, clock=lambda: FIXED_NOW).transition_to_phase2(student.id)

    later = PhaseTransitionManager(
        store, clock=lambda: datetime(2030, 1, 1, tzinfo=timezone.utc),
    )
    with pytest.raises(AlreadyInTargetPhaseError):
        await later.transition_to_phase2(student.id)
    assert store.students[student.id].phase2_start == FIXED_NOW


async def test_unknown_student_not_found(phases):
    with pytest.raises(NotFoundError):
        await phases.transition_to_phase2(uuid4())


async def test_missing_student_id(phases):
    with pytest.raises(ValidationError):
        await phases.transition_to_phase2(None)


async def test_concurrent_transitions_succeed_once(phases, store):
    student = store.add_student()
    results = await asyncio.gather(
        phases.transition_to_phase2(student.id),
        phases.transition_to_phase2(student.id),
        return_exceptions=True,
    )
    assert results.count(None) == 1
    assert sum(isinstance(r, AlreadyInTargetPhaseError) for r in results) == 1
