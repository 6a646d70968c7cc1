"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Student is the aggregate root; conversations and memory are scoped by student_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from mentorflow.models.student import Student  # noqa: F401
from mentorflow.models.conversation import Conversation  # noqa: F401
from mentorflow.models.message import Message  # noqa: F401
from mentorflow.models.memory_entry import MemoryEntry  # noqa: F401
