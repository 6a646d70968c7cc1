"""Conversation ORM — the single message thread for one student.

Invariants:
    - student_id is UNIQUE: at most one conversation per student
    - Created lazily on first message; never deleted by this service

Design Decisions:
    - Uniqueness enforced by the DB constraint, not by application locking:
      concurrent creators race on INSERT ... ON CONFLICT DO NOTHING and re-read
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from mentorflow.db.base import Base


class Conversation(Base):
    """Conversation entity — one per student."""
    __tablename__ = "conversations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("students.id"),
        nullable=False, unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
