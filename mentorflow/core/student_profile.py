"""Student Profile — pure assembly of the agent-facing student memory view.

Invariants:
    - PURE: clock passed in by caller
    - Missing memory keys fall back to empty lists / zero / None
    - days_in_current_phase counts whole days since the current phase started
    - research topic: student column first, then the research.topic memory entry
    - append on a memory key turns a non-list value into a fresh list
"""

from datetime import datetime
from typing import Any

from mentorflow.core.domain_types import Phase
from mentorflow.core.records import StudentMemory


class MemoryKeys:
    """Well-known memory keys written by the agent."""
    LEARNING_STYLE = "profile.learning_style"
    INTERESTS = "profile.interests"
    STRENGTHS = "profile.strengths"
    CHALLENGES = "profile.challenges"
    BACKGROUND = "profile.background"
    TOPICS_DISCUSSED = "history.topics_discussed"
    QUESTIONS_ASKED = "history.questions_asked"
    LAST_INTERACTION = "history.last_interaction"
    RESEARCH_TOPIC = "research.topic"


def days_between(start: datetime | None, now: datetime) -> int:
    if start is None:
        return 0
    # SQLite drops tzinfo on read
    if (start.tzinfo is None) != (now.tzinfo is None):
        start, now = start.replace(tzinfo=None), now.replace(tzinfo=None)
    return max(0, (now - start).days)


def build_student_profile(memory: StudentMemory, now: datetime) -> dict[str, Any]:
    student = memory.student
    values = {entry.key: entry.value for entry in memory.entries}
    phase_start = (
        student.phase1_start
        if student.current_phase == Phase.PHASE1
        else student.phase2_start
    )
    return {
        "studentId": str(student.id),
        "name": student.name,
        "email": student.email,
        "enrollmentDate": student.enrollment_date.isoformat(),
        "currentPhase": student.current_phase.value,
        "daysInCurrentPhase": days_between(phase_start, now),
        "currentTopicIndex": student.current_topic_index or 1,
        "currentMilestone": student.current_milestone or 0,
        "researchTopic": research_topic(memory),
        "learningStyle": values.get(MemoryKeys.LEARNING_STYLE),
        "background": values.get(MemoryKeys.BACKGROUND),
        "interests": values.get(MemoryKeys.INTERESTS) or [],
        "strengths": values.get(MemoryKeys.STRENGTHS) or [],
        "challenges": values.get(MemoryKeys.CHALLENGES) or [],
        "topicsDiscussed": values.get(MemoryKeys.TOPICS_DISCUSSED) or [],
        "questionsAsked": values.get(MemoryKeys.QUESTIONS_ASKED) or 0,
        "lastInteraction": values.get(MemoryKeys.LAST_INTERACTION),
    }


TOTAL_TOPICS = 8
TOTAL_MILESTONES = 4


def research_topic(memory: StudentMemory) -> str | None:
    if memory.student.research_topic:
        return memory.student.research_topic
    for entry in memory.entries:
        if entry.key == MemoryKeys.RESEARCH_TOPIC:
            return entry.value
    return None


def append_memory_value(existing: Any, value: Any) -> list[Any]:
    """New list value for an append write; non-list values are discarded."""
    current = existing if isinstance(existing, list) else []
    return [*current, value]


def build_progress_summary(memory: StudentMemory) -> dict[str, Any]:
    """Phase/topic/milestone position for the get_student_progress tool."""
    student = memory.student
    return {
        "studentId": str(student.id),
        "currentPhase": student.current_phase.value,
        "currentTopicIndex": student.current_topic_index or 1,
        "currentMilestone": student.current_milestone or 0,
        "researchTopic": research_topic(memory),
        "totalTopics": TOTAL_TOPICS,
        "totalMilestones": TOTAL_MILESTONES,
    }
