"""Message ORM — one entry in a student's conversation.

Invariants:
    - Always belongs to a Conversation (conversation_id FK)
    - status moves forward only: draft -> approved -> sent (core/enforce_message_status.py)
    - Drafts are filtered out by the query for every student-facing read

Design Decisions:
    - JSON column for tool_calls: flexible schema for varied tool signatures
    - Composite index (conversation_id, status, created_at) serves the visible-messages
      and pending-drafts queries
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from mentorflow.db.base import Base


class Message(Base):
    """Message entity — agent, mentor, student or system authored."""
    __tablename__ = "messages"
    __table_args__ = (
        Index(
            "ix_messages_conversation_status_created",
            "conversation_id", "status", "created_at",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    conversation_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("conversations.id"), nullable=False,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    tool_calls: Mapped[list | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="sent",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
