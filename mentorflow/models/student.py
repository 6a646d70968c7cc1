"""Student ORM — the program participant whose phase and conversation the core manages.

Invariants:
    - id is UUID primary key
    - current_phase is 'phase1' or 'phase2'; only PhaseTransitionManager mutates it
    - phase2_start is written exactly once, together with current_phase='phase2'

Design Decisions:
    - String(10) for current_phase over a DB enum: portable across PostgreSQL and SQLite
    - Rows created externally (onboarding); this service only reads and transitions them
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from mentorflow.db.base import Base


class Student(Base):
    """Student aggregate root — owns one conversation and its memory entries."""
    __tablename__ = "students"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    current_phase: Mapped[str] = mapped_column(
        String(10), nullable=False, default="phase1",
    )
    enrollment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    phase1_start: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
    )
    phase2_start: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    current_topic_index: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1,
    )
    current_milestone: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    research_topic: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
