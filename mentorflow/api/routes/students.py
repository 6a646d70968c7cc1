"""Students — program phase lifecycle."""

from fastapi import APIRouter, Depends

from mentorflow.api.dependencies import get_phase_transition
from mentorflow.api.envelope import ok
from mentorflow.schemas.requests import TransitionRequest
from mentorflow.services.phase_transition import PhaseTransitionManager

router = APIRouter(prefix="/api/students", tags=["students"])


@router.post("/transition")
async def transition_student_phase(
    body: TransitionRequest,
    phases: PhaseTransitionManager = Depends(get_phase_transition),
):
    """phase1 → phase2. A student already in phase2 is a 400, not a no-op."""
    await phases.transition_to_phase2(body.student_id)
    return ok({"message": "Successfully transitioned to Phase II"})
