"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - StudentId, ConversationId, MessageId wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (envelope payloads are JSON)
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

StudentId = NewType("StudentId", UUID)
ConversationId = NewType("ConversationId", UUID)
MessageId = NewType("MessageId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class Phase(str, Enum):
    """Program phases — maps to students.current_phase. phase2 is terminal."""
    PHASE1 = "phase1"
    PHASE2 = "phase2"


class MessageStatus(str, Enum):
    """Message lifecycle states — maps to messages.status."""
    DRAFT = "draft"
    APPROVED = "approved"
    SENT = "sent"


class MessageRole(str, Enum):
    """Author of a message. Mentor direct messages are stored as AGENT."""
    AGENT = "agent"
    STUDENT = "student"
    MENTOR = "mentor"
    SYSTEM = "system"


class Topic(str, Enum):
    """Closed set of notebook topics produced by classify_topic."""
    RAG = "rag"
    EMBEDDINGS = "embeddings"
    TRANSFORMERS = "transformers"
    LLM = "llm"
    GENERAL = "general"


class DraftAction(str, Enum):
    """Mentor review actions on a pending draft."""
    APPROVE = "approve"
    EDIT = "edit"
    UPDATE = "update"
    REJECT = "reject"
