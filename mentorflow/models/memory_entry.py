"""MemoryEntry ORM — key/value facts the agent remembers about a student.

Invariants:
    - (student_id, key) is unique
    - value is arbitrary JSON (list, string, number)

Design Decisions:
    - Written by the agent outside this service; read here to build the student profile
"""

import uuid
from typing import Any
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from mentorflow.db.base import Base


class MemoryEntry(Base):
    """Memory entry — long-term agent memory about one student."""
    __tablename__ = "memory"
    __table_args__ = (
        UniqueConstraint("student_id", "key", name="uq_memory_student_key"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("students.id"), nullable=False,
    )
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[Any] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
