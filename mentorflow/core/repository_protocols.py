"""Boundary Protocols — the Store Adapter contract between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Every read-then-write sequence is guarded by the store itself:
      phase changes are compare-and-set, conversation creation is
      unique-constraint backed (insert-if-absent + re-read)
    - Implementations raise PersistenceError for any underlying failure
    - list_messages returns newest first (created_at descending)
    - update_message / delete_message only touch rows still in expected_status
    - upsert_memory with append=True reads and writes the entry in one transaction
    - list_all_drafts returns agent drafts of every student, newest first

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO;
      the managers orchestrate these calls around pure checks in core/
    - list_messages takes the status filter so draft exclusion happens in the
      query, not in presentation
"""

from collections.abc import Collection
from datetime import datetime
from typing import Any, Protocol

from mentorflow.core.domain_types import (
    StudentId, ConversationId, MessageId, Phase, MessageRole, MessageStatus,
)
from mentorflow.core.records import (
    StudentRecord, ConversationRecord, MessageRecord, MemoryRecord, PendingDraft,
)


class StudentStore(Protocol):
    """Contract for student persistence — implemented by shell."""
    async def get_student(self, student_id: StudentId) -> StudentRecord | None: ...
    async def compare_and_set_phase(
        self,
        student_id: StudentId,
        expected: Phase,
        target: Phase,
        started_at: datetime,
    ) -> bool: ...
    async def list_memory(self, student_id: StudentId) -> list[MemoryRecord]: ...
    async def get_memory(
        self, student_id: StudentId, key: str,
    ) -> MemoryRecord | None: ...
    async def upsert_memory(
        self, student_id: StudentId, key: str, value: Any, append: bool = False,
    ) -> MemoryRecord: ...


class ConversationStore(Protocol):
    """Contract for conversation persistence — implemented by shell."""
    async def find_conversation(
        self, student_id: StudentId,
    ) -> ConversationRecord | None: ...
    async def insert_conversation_if_absent(
        self, student_id: StudentId,
    ) -> ConversationRecord: ...


class MessageStore(Protocol):
    """Contract for message persistence — implemented by shell."""
    async def insert_message(
        self,
        conversation_id: ConversationId,
        role: MessageRole,
        content: str,
        status: MessageStatus,
        tool_calls: list[dict[str, Any]] | None = None,
    ) -> MessageRecord: ...
    async def get_message(self, message_id: MessageId) -> MessageRecord | None: ...
    async def list_messages(
        self,
        conversation_id: ConversationId,
        statuses: Collection[MessageStatus],
    ) -> list[MessageRecord]: ...
    async def update_message(
        self,
        message_id: MessageId,
        expected_status: MessageStatus,
        status: MessageStatus,
        content: str | None = None,
    ) -> MessageRecord | None: ...
    async def delete_message(
        self, message_id: MessageId, expected_status: MessageStatus,
    ) -> bool: ...
    async def list_all_drafts(self) -> list[PendingDraft]: ...


class StoreAdapter(StudentStore, ConversationStore, MessageStore, Protocol):
    """Full narrow store interface consumed by the managers."""
