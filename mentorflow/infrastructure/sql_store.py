"""SQL Store — SQLAlchemy implementation of the StoreAdapter protocol.

Invariants:
    - One AsyncSession per store instance (one per request)
    - Every write commits before returning: each store call is its own unit of work
    - Every SQLAlchemyError is rolled back and re-raised as PersistenceError
    - Conversation creation is INSERT ... ON CONFLICT (student_id) DO NOTHING + re-read,
      so racing creators converge on the same row
    - Phase and message status changes are compare-and-set UPDATEs (WHERE old value)
    - Memory writes are INSERT ... ON CONFLICT (student_id, key) DO UPDATE; appends
      lock the existing row (FOR UPDATE, a no-op on SQLite) before merging

Design Decisions:
    - Dialect-specific insert() chosen at runtime: postgresql in production, sqlite in tests
    - populate_existing on reads: CAS updates bypass the identity map, so cached
      ORM instances must be refreshed from the row
"""

import logging
import uuid
from collections.abc import Collection
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update, delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mentorflow.core.domain_types import (
    StudentId, ConversationId, MessageId, Phase, MessageRole, MessageStatus,
)
from mentorflow.core.errors import PersistenceError
from mentorflow.core.records import (
    StudentRecord, ConversationRecord, MessageRecord, MemoryRecord, PendingDraft,
)
from mentorflow.core.student_profile import append_memory_value
from mentorflow.models.student import Student
from mentorflow.models.conversation import Conversation
from mentorflow.models.message import Message
from mentorflow.models.memory_entry import MemoryEntry

logger = logging.getLogger(__name__)

_PHASE_START_COLUMN = {
    Phase.PHASE1: "phase1_start",
    Phase.PHASE2: "phase2_start",
}


class SqlStore:
    """StoreAdapter over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self._db = db

    @asynccontextmanager
    async def _guard(self, operation: str):
        """Map driver failures to PersistenceError with the original message."""
        try:
            yield
        except SQLAlchemyError as e:
            await self._db.rollback()
            detail = str(getattr(e, "orig", None) or e)
            logger.error(
                f"Store {operation} failed: {detail}",
                extra={"error_code": "PERSISTENCE_ERROR"},
            )
            raise PersistenceError(detail, operation) from e

    def _insert(self, model):
        """Dialect insert so ON CONFLICT works on PostgreSQL and SQLite alike."""
        if self._db.get_bind().dialect.name == "postgresql":
            return pg_insert(model)
        return sqlite_insert(model)

    # ─── Students ────────────────────────────────────────────────

    async def get_student(self, student_id: StudentId) -> StudentRecord | None:
        async with self._guard("get_student"):
            result = await self._db.execute(
                select(Student)
                .where(Student.id == student_id)
                .execution_options(populate_existing=True),
            )
            row = result.scalar_one_or_none()
        return _student_record(row) if row else None

    async def compare_and_set_phase(
        self,
        student_id: StudentId,
        expected: Phase,
        target: Phase,
        started_at: datetime,
    ) -> bool:
        async with self._guard("compare_and_set_phase"):
            result = await self._db.execute(
                update(Student)
                .where(
                    Student.id == student_id,
                    Student.current_phase == expected.value,
                )
                .values(
                    current_phase=target.value,
                    **{_PHASE_START_COLUMN[target]: started_at},
                )
                .execution_options(synchronize_session=False),
            )
            await self._db.commit()
        return result.rowcount == 1

    async def list_memory(self, student_id: StudentId) -> list[MemoryRecord]:
        async with self._guard("list_memory"):
            result = await self._db.execute(
                select(MemoryEntry)
                .where(MemoryEntry.student_id == student_id)
                .order_by(MemoryEntry.key)
                .execution_options(populate_existing=True),
            )
            rows = result.scalars().all()
        return [_memory_record(r) for r in rows]

    async def get_memory(
        self, student_id: StudentId, key: str,
    ) -> MemoryRecord | None:
        async with self._guard("get_memory"):
            result = await self._db.execute(
                select(MemoryEntry)
                .where(MemoryEntry.student_id == student_id, MemoryEntry.key == key)
                .execution_options(populate_existing=True),
            )
            row = result.scalar_one_or_none()
        return _memory_record(row) if row else None

    async def upsert_memory(
        self, student_id: StudentId, key: str, value: Any, append: bool = False,
    ) -> MemoryRecord:
        now = datetime.now(timezone.utc)
        async with self._guard("upsert_memory"):
            if append:
                current = await self._db.execute(
                    select(MemoryEntry.value)
                    .where(MemoryEntry.student_id == student_id, MemoryEntry.key == key)
                    .with_for_update(),
                )
                value = append_memory_value(current.scalar_one_or_none(), value)
            stmt = self._insert(MemoryEntry).values(
                id=uuid.uuid4(),
                student_id=student_id,
                key=key,
                value=value,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["student_id", "key"],
                set_={"value": stmt.excluded["value"], "updated_at": now},
            )
            await self._db.execute(stmt)
            await self._db.commit()
        return MemoryRecord(key=key, value=value, updated_at=now)

    # ─── Conversations ───────────────────────────────────────────

    async def find_conversation(
        self, student_id: StudentId,
    ) -> ConversationRecord | None:
        async with self._guard("find_conversation"):
            result = await self._db.execute(
                select(Conversation).where(Conversation.student_id == student_id),
            )
            row = result.scalar_one_or_none()
        return _conversation_record(row) if row else None

    async def insert_conversation_if_absent(
        self, student_id: StudentId,
    ) -> ConversationRecord:
        now = datetime.now(timezone.utc)
        async with self._guard("insert_conversation"):
            stmt = self._insert(Conversation).values(
                id=uuid.uuid4(),
                student_id=student_id,
                created_at=now,
                updated_at=now,
            ).on_conflict_do_nothing(index_elements=["student_id"])
            result = await self._db.execute(stmt)
            await self._db.commit()
        if result.rowcount == 0:
            logger.info(
                "Conversation already existed, reusing it",
                extra={"student_id": student_id},
            )
        conversation = await self.find_conversation(student_id)
        if conversation is None:
            raise PersistenceError(
                "conversation missing after insert", "insert_conversation",
            )
        return conversation

    # ─── Messages ────────────────────────────────────────────────

    async def insert_message(
        self,
        conversation_id: ConversationId,
        role: MessageRole,
        content: str,
        status: MessageStatus,
        tool_calls: list[dict[str, Any]] | None = None,
    ) -> MessageRecord:
        message = Message(
            id=uuid.uuid4(),
            conversation_id=conversation_id,
            role=role.value,
            content=content,
            status=status.value,
            tool_calls=tool_calls,
            created_at=datetime.now(timezone.utc),
        )
        async with self._guard("insert_message"):
            self._db.add(message)
            await self._db.commit()
        return _message_record(message)

    async def get_message(self, message_id: MessageId) -> MessageRecord | None:
        async with self._guard("get_message"):
            result = await self._db.execute(
                select(Message)
                .where(Message.id == message_id)
                .execution_options(populate_existing=True),
            )
            row = result.scalar_one_or_none()
        return _message_record(row) if row else None

    async def list_messages(
        self,
        conversation_id: ConversationId,
        statuses: Collection[MessageStatus],
    ) -> list[MessageRecord]:
        async with self._guard("list_messages"):
            result = await self._db.execute(
                select(Message)
                .where(
                    Message.conversation_id == conversation_id,
                    Message.status.in_([s.value for s in statuses]),
                )
                .order_by(Message.created_at.desc())
                .execution_options(populate_existing=True),
            )
            rows = result.scalars().all()
        return [_message_record(r) for r in rows]

    async def update_message(
        self,
        message_id: MessageId,
        expected_status: MessageStatus,
        status: MessageStatus,
        content: str | None = None,
    ) -> MessageRecord | None:
        values: dict[str, Any] = {"status": status.value}
        if content is not None:
            values["content"] = content
        async with self._guard("update_message"):
            result = await self._db.execute(
                update(Message)
                .where(
                    Message.id == message_id,
                    Message.status == expected_status.value,
                )
                .values(**values)
                .execution_options(synchronize_session=False),
            )
            await self._db.commit()
        if result.rowcount != 1:
            return None
        return await self.get_message(message_id)

    async def delete_message(
        self, message_id: MessageId, expected_status: MessageStatus,
    ) -> bool:
        async with self._guard("delete_message"):
            result = await self._db.execute(
                delete(Message)
                .where(
                    Message.id == message_id,
                    Message.status == expected_status.value,
                )
                .execution_options(synchronize_session=False),
            )
            await self._db.commit()
        return result.rowcount == 1

    async def list_all_drafts(self) -> list[PendingDraft]:
        async with self._guard("list_all_drafts"):
            result = await self._db.execute(
                select(Message, Conversation.student_id, Student.name)
                .join(Conversation, Message.conversation_id == Conversation.id)
                .join(Student, Conversation.student_id == Student.id)
                .where(
                    Message.role == MessageRole.AGENT.value,
                    Message.status == MessageStatus.DRAFT.value,
                )
                .order_by(Message.created_at.desc())
                .execution_options(populate_existing=True),
            )
            rows = result.all()
        return [
            PendingDraft(
                message=_message_record(message),
                student_id=StudentId(student_id),
                student_name=name,
            )
            for message, student_id, name in rows
        ]


# ─── Row → record mapping ────────────────────────────────────────

def _student_record(row: Student) -> StudentRecord:
    return StudentRecord(
        id=StudentId(row.id),
        name=row.name,
        email=row.email,
        current_phase=Phase(row.current_phase),
        enrollment_date=row.enrollment_date,
        phase1_start=row.phase1_start,
        phase2_start=row.phase2_start,
        current_topic_index=row.current_topic_index,
        current_milestone=row.current_milestone,
        research_topic=row.research_topic,
    )


def _conversation_record(row: Conversation) -> ConversationRecord:
    return ConversationRecord(
        id=ConversationId(row.id),
        student_id=StudentId(row.student_id),
        created_at=row.created_at,
    )


def _message_record(row: Message) -> MessageRecord:
    return MessageRecord(
        id=MessageId(row.id),
        conversation_id=ConversationId(row.conversation_id),
        role=MessageRole(row.role),
        content=row.content,
        status=MessageStatus(row.status),
        created_at=row.created_at,
        tool_calls=row.tool_calls,
    )


def _memory_record(row: MemoryEntry) -> MemoryRecord:
    return MemoryRecord(key=row.key, value=row.value, updated_at=row.updated_at)
