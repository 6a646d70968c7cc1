"""Store Records — plain immutable snapshots of persisted rows.

Invariants:
    - Records are detached from any ORM session (safe to pass across awaits)
    - Field names match the DB columns they come from

Design Decisions:
    - frozen dataclasses over ORM objects: core logic never touches lazy loading,
      and the in-memory test store can build them without SQLAlchemy
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from mentorflow.core.domain_types import (
    StudentId, ConversationId, MessageId, Phase, MessageRole, MessageStatus,
)


@dataclass(frozen=True)
class StudentRecord:
    id: StudentId
    name: str
    email: str
    current_phase: Phase
    enrollment_date: datetime
    phase1_start: datetime | None = None
    phase2_start: datetime | None = None
    current_topic_index: int = 1
    current_milestone: int = 0
    research_topic: str | None = None


@dataclass(frozen=True)
class ConversationRecord:
    id: ConversationId
    student_id: StudentId
    created_at: datetime


@dataclass(frozen=True)
class MessageRecord:
    id: MessageId
    conversation_id: ConversationId
    role: MessageRole
    content: str
    status: MessageStatus
    created_at: datetime
    tool_calls: list[dict[str, Any]] | None = None

    def to_visible_dict(self) -> dict:
        """Student-facing shape (GET /api/messages)."""
        return {
            "id": str(self.id),
            "role": self.role.value,
            "content": self.content,
            "toolCalls": self.tool_calls,
            "status": self.status.value,
            "timestamp": self.created_at.isoformat(),
        }

    def to_draft_dict(self) -> dict:
        """Mentor review shape (GET /api/drafts)."""
        return {
            "id": str(self.id),
            "content": self.content,
            "toolCalls": self.tool_calls,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class PendingDraft:
    """Draft awaiting review, joined with the student it is addressed to."""
    message: MessageRecord
    student_id: StudentId
    student_name: str

    def to_dict(self) -> dict:
        """Cross-student mentor review shape (GET /api/drafts/all)."""
        return {
            **self.message.to_draft_dict(),
            "studentId": str(self.student_id),
            "studentName": self.student_name,
        }


@dataclass(frozen=True)
class MemoryRecord:
    key: str
    value: Any
    updated_at: datetime | None = None


@dataclass(frozen=True)
class StudentMemory:
    """Student row plus all of its memory entries."""
    student: StudentRecord
    entries: list[MemoryRecord] = field(default_factory=list)
