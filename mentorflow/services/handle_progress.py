"""Progress Handlers — get_student_progress, transition_to_phase2.

Invariants:
    - transition_to_phase2 goes through PhaseTransitionManager, so the tool and
      POST /api/students/transition share one compare-and-set
    - Unknown student / already in phase2 return Failed, never raise
    - research_topic is kept as the research.topic memory entry, written only
      after the transition succeeded
"""

import logging
from typing import Any

from mentorflow.core.errors import AlreadyInTargetPhaseError, NotFoundError
from mentorflow.core.records import StudentMemory
from mentorflow.core.repository_protocols import StudentStore
from mentorflow.core.student_profile import MemoryKeys, build_progress_summary
from mentorflow.core.tool_result import ToolResult, Succeeded, Failed
from mentorflow.services.phase_transition import PhaseTransitionManager
from mentorflow.services.tool_registry import ToolContext

logger = logging.getLogger(__name__)


class ProgressHandlers:
    """Phase and progress tool handlers."""

    def __init__(self, store: StudentStore, transitions: PhaseTransitionManager):
        self.store = store
        self.transitions = transitions

    async def get_student_progress(
        self, input_data: dict[str, Any], context: ToolContext,
    ) -> ToolResult:
        student = await self.store.get_student(context.student_id)
        if student is None:
            return Failed(f"Student {context.student_id} not found")
        entries = await self.store.list_memory(context.student_id)
        return Succeeded(
            build_progress_summary(StudentMemory(student=student, entries=entries)),
        )

    async def transition_to_phase2(
        self, input_data: dict[str, Any], context: ToolContext,
    ) -> ToolResult:
        research_topic = input_data.get("research_topic")
        if not isinstance(research_topic, str) or not research_topic.strip():
            return Failed("Missing required parameter: research_topic")

        try:
            await self.transitions.transition_to_phase2(context.student_id)
        except (NotFoundError, AlreadyInTargetPhaseError) as e:
            return Failed(e.message)

        await self.store.upsert_memory(
            context.student_id, MemoryKeys.RESEARCH_TOPIC, research_topic.strip(),
        )
        logger.info(
            "Research topic recorded",
            extra={"student_id": context.student_id, "tool_name": "transition_to_phase2"},
        )
        return Succeeded({
            "message": "Successfully transitioned to Phase II",
            "researchTopic": research_topic.strip(),
        })
