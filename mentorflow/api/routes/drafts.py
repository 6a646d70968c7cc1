"""Drafts — mentor review of agent-proposed messages.

Invariants:
    - Drafts are listed newest first as {count, drafts}
    - GET /all spans every student and tags each draft with studentId/studentName
    - Unknown action → 400 before the store is touched
    - Action dispatch is an exhaustive match over DraftAction
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from mentorflow.api.dependencies import get_message_lifecycle
from mentorflow.api.envelope import ok
from mentorflow.core.domain_types import DraftAction
from mentorflow.core.errors import ValidationError
from mentorflow.core.validate_inputs import require_fields
from mentorflow.schemas.requests import DraftActionRequest
from mentorflow.services.message_lifecycle import MessageLifecycleManager

router = APIRouter(prefix="/api/drafts", tags=["drafts"])


def _parse_action(raw: str | None) -> DraftAction:
    require_fields(action=raw)
    try:
        return DraftAction(raw.lower())
    except ValueError:
        allowed = ", ".join(a.value for a in DraftAction)
        raise ValidationError(
            f"Invalid action. Must be one of: {allowed}", fields=["action"],
        )


@router.get("")
async def list_drafts(
    student_id: UUID | None = Query(None, alias="studentId"),
    lifecycle: MessageLifecycleManager = Depends(get_message_lifecycle),
):
    drafts = await lifecycle.list_drafts(student_id)
    return ok({
        "count": len(drafts),
        "drafts": [d.to_draft_dict() for d in drafts],
    })


@router.get("/all")
async def list_all_drafts(
    lifecycle: MessageLifecycleManager = Depends(get_message_lifecycle),
):
    drafts = await lifecycle.list_all_drafts()
    return ok({
        "count": len(drafts),
        "drafts": [d.to_dict() for d in drafts],
    })


@router.post("")
async def review_draft(
    body: DraftActionRequest,
    lifecycle: MessageLifecycleManager = Depends(get_message_lifecycle),
):
    action = _parse_action(body.action)
    match action:
        case DraftAction.APPROVE:
            message = await lifecycle.approve_draft(body.draft_id)
            return ok({"message": "Draft approved", "messageId": str(message.id)})
        case DraftAction.EDIT:
            message = await lifecycle.edit_draft(body.draft_id, body.content)
            return ok({
                "message": "Draft edited and approved",
                "messageId": str(message.id),
            })
        case DraftAction.UPDATE:
            message = await lifecycle.update_draft(body.draft_id, body.content)
            return ok({"message": "Draft updated", "messageId": str(message.id)})
        case DraftAction.REJECT:
            await lifecycle.reject_draft(body.draft_id)
            return ok({"message": "Draft rejected"})
