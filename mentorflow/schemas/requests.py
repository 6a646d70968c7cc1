"""Request Schemas — Pydantic models for the mentor/agent API boundaries.

Invariants:
    - Wire names are camelCase (studentId, draftId); Python attributes are snake_case
    - Ids parse as UUIDs: a malformed id is a RequestValidationError (→ 400)
    - Required-ness is NOT enforced here: fields default to None and the
      managers raise ValidationError naming every missing field

Design Decisions:
    - Optional fields + require_fields in the managers: one error message format
      ("Missing required fields: ...") whether the caller is HTTP or the agent
    - str_strip_whitespace so whitespace-only content reaches the managers as ""
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class SendMessageRequest(_CamelModel):
    """Mentor direct message — becomes visible to the student immediately."""
    student_id: UUID | None = Field(None, alias="studentId")
    content: str | None = Field(None, max_length=50_000)


class TransitionRequest(_CamelModel):
    student_id: UUID | None = Field(None, alias="studentId")


class GenerateArtifactRequest(_CamelModel):
    """Mentor-triggered notebook for a student's question."""
    student_id: UUID | None = Field(None, alias="studentId")
    student_name: str | None = Field(None, alias="studentName", max_length=200)
    question: str | None = Field(None, max_length=10_000)


class DraftActionRequest(_CamelModel):
    """Review action on a pending draft. content required for edit/update."""
    action: str | None = None
    draft_id: UUID | None = Field(None, alias="draftId")
    content: str | None = Field(None, max_length=50_000)
