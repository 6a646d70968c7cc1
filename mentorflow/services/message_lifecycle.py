"""Message Lifecycle Manager — conversation resolution and message status transitions.

Invariants:
    - At most one conversation per student: lookup, then insert-if-absent + re-read
    - Mentor direct messages are created as role=agent, status=approved (no draft stage)
    - Agent proposals are created as status=draft and stay invisible until approved
    - Status changes follow core/enforce_message_status.py and are applied with
      compare-and-set; losing a race surfaces as InvalidStateTransitionError
    - Student-facing reads ask the store for approved/sent rows only

Design Decisions:
    - Follows impureim sandwich: read via store → pure check in core → CAS write via store
    - Store passed to the constructor (one store per request) so tests swap in a fake
"""

import logging

from mentorflow.core.domain_types import (
    StudentId, MessageId, MessageRole, MessageStatus,
)
from mentorflow.core.enforce_message_status import (
    VISIBLE_STATUSES, check_transition,
)
from mentorflow.core.errors import (
    NotFoundError, InvalidStateTransitionError, ErrorContext,
)
from mentorflow.core.format_drafts import merge_edited_content
from mentorflow.core.records import ConversationRecord, MessageRecord, PendingDraft
from mentorflow.core.repository_protocols import StoreAdapter
from mentorflow.core.validate_inputs import require_fields

logger = logging.getLogger(__name__)


class MessageLifecycleManager:
    """Owns the draft → approved → sent state machine for one store."""

    def __init__(self, store: StoreAdapter):
        self._store = store

    async def get_or_create_conversation(
        self, student_id: StudentId,
    ) -> ConversationRecord:
        existing = await self._store.find_conversation(student_id)
        if existing:
            return existing
        conversation = await self._store.insert_conversation_if_absent(student_id)
        logger.info(
            "Conversation resolved",
            extra={"student_id": student_id, "conversation_id": conversation.id},
        )
        return conversation

    async def send_direct_message(
        self, student_id: StudentId | None, content: str | None,
    ) -> MessageId:
        """Mentor message straight to the student. Returns the new message id."""
        require_fields(studentId=student_id, content=content)
        conversation = await self.get_or_create_conversation(student_id)
        message = await self._store.insert_message(
            conversation.id, MessageRole.AGENT, content, MessageStatus.APPROVED,
        )
        logger.info(
            "Direct message sent",
            extra={"student_id": student_id, "message_id": message.id},
        )
        return message.id

    async def propose_draft(
        self,
        student_id: StudentId | None,
        content: str | None,
        tool_calls: list[dict] | None = None,
    ) -> MessageRecord:
        """Agent proposal awaiting mentor review."""
        require_fields(studentId=student_id, content=content)
        conversation = await self.get_or_create_conversation(student_id)
        return await self._store.insert_message(
            conversation.id, MessageRole.AGENT, content,
            MessageStatus.DRAFT, tool_calls,
        )

    async def list_visible_messages(
        self, student_id: StudentId | None,
    ) -> list[MessageRecord]:
        """approved/sent messages, newest first. Empty when no conversation exists."""
        require_fields(studentId=student_id)
        conversation = await self._store.find_conversation(student_id)
        if conversation is None:
            return []
        return await self._store.list_messages(conversation.id, VISIBLE_STATUSES)

    async def list_drafts(self, student_id: StudentId | None) -> list[MessageRecord]:
        require_fields(studentId=student_id)
        conversation = await self._store.find_conversation(student_id)
        if conversation is None:
            return []
        return await self._store.list_messages(
            conversation.id, (MessageStatus.DRAFT,),
        )

    async def list_all_drafts(self) -> list[PendingDraft]:
        """Pending agent drafts of every student, newest first."""
        return await self._store.list_all_drafts()

    # ─── Transitions ─────────────────────────────────────────────

    async def approve_draft(self, message_id: MessageId | None) -> MessageRecord:
        require_fields(draftId=message_id)
        message = await self._load(message_id)
        return await self._apply(message, MessageStatus.APPROVED)

    async def edit_draft(
        self, message_id: MessageId | None, content: str | None,
    ) -> MessageRecord:
        """Replace the draft text and approve it in one step."""
        require_fields(draftId=message_id, content=content)
        message = await self._load(message_id)
        merged = merge_edited_content(message.content, content)
        return await self._apply(message, MessageStatus.APPROVED, merged)

    async def update_draft(
        self, message_id: MessageId | None, content: str | None,
    ) -> MessageRecord:
        """Replace the draft text; the message stays a draft."""
        require_fields(draftId=message_id, content=content)
        message = await self._load(message_id)
        if message.status != MessageStatus.DRAFT:
            raise InvalidStateTransitionError(
                message.status.value, MessageStatus.DRAFT.value,
                ErrorContext(message_id=str(message_id)),
            )
        updated = await self._store.update_message(
            message_id, MessageStatus.DRAFT, MessageStatus.DRAFT, content,
        )
        if updated is None:
            await self._raise_lost_race(message_id, MessageStatus.DRAFT)
        return updated

    async def reject_draft(self, message_id: MessageId | None) -> None:
        """Delete a pending draft. Only drafts can be rejected."""
        require_fields(draftId=message_id)
        message = await self._load(message_id)
        if message.status != MessageStatus.DRAFT:
            raise InvalidStateTransitionError(
                message.status.value, "rejected",
                ErrorContext(message_id=str(message_id)),
            )
        deleted = await self._store.delete_message(message_id, MessageStatus.DRAFT)
        if not deleted:
            await self._raise_lost_race(message_id, MessageStatus.DRAFT)
        logger.info("Draft rejected", extra={"message_id": message_id})

    async def mark_sent(self, message_id: MessageId | None) -> MessageRecord:
        """Delivery confirmation from the push channel: approved → sent."""
        require_fields(messageId=message_id)
        message = await self._load(message_id)
        return await self._apply(message, MessageStatus.SENT)

    async def _load(self, message_id: MessageId) -> MessageRecord:
        message = await self._store.get_message(message_id)
        if message is None:
            raise NotFoundError("Message", str(message_id))
        return message

    async def _apply(
        self,
        message: MessageRecord,
        target: MessageStatus,
        content: str | None = None,
    ) -> MessageRecord:
        check_transition(
            message.status, target, ErrorContext(message_id=str(message.id)),
        )
        updated = await self._store.update_message(
            message.id, message.status, target, content,
        )
        if updated is None:
            await self._raise_lost_race(message.id, target)
        logger.info(
            f"Message {message.status.value} -> {target.value}",
            extra={"message_id": message.id},
        )
        return updated

    async def _raise_lost_race(
        self, message_id: MessageId, target: MessageStatus,
    ) -> None:
        """A concurrent writer changed or deleted the row between read and CAS."""
        current = await self._store.get_message(message_id)
        if current is None:
            raise NotFoundError("Message", str(message_id))
        raise InvalidStateTransitionError(
            current.status.value, target.value,
            ErrorContext(message_id=str(message_id)),
        )
