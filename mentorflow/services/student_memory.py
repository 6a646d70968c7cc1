"""Student Memory — loads a student's profile for the agent and for mentors.

Invariants:
    - Unknown student raises NotFoundError (route → 404, tool → Failed)
    - Profile shape comes from core/student_profile.py (pure)
"""

from datetime import datetime, timezone
from typing import Any

from mentorflow.core.domain_types import StudentId
from mentorflow.core.errors import NotFoundError, ErrorContext
from mentorflow.core.records import StudentMemory
from mentorflow.core.repository_protocols import StudentStore
from mentorflow.core.student_profile import build_student_profile
from mentorflow.core.validate_inputs import require_fields


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def get_student_memory(
    store: StudentStore,
    student_id: StudentId | None,
    now: datetime | None = None,
) -> dict[str, Any]:
    require_fields(studentId=student_id)
    student = await store.get_student(student_id)
    if student is None:
        raise NotFoundError(
            "Student", str(student_id), ErrorContext(student_id=str(student_id)),
        )
    entries = await store.list_memory(student_id)
    return build_student_profile(
        StudentMemory(student=student, entries=entries), now or utcnow(),
    )
