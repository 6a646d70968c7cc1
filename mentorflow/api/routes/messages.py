"""Messages — student-facing inbox and delivery confirmation.

Invariants:
    - GET returns approved/sent messages only, newest first
    - POST /{id}/sent is the delivery hook: approved → sent
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from mentorflow.api.dependencies import get_message_lifecycle
from mentorflow.api.envelope import ok
from mentorflow.services.message_lifecycle import MessageLifecycleManager

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("")
async def list_visible_messages(
    student_id: UUID | None = Query(None, alias="studentId"),
    lifecycle: MessageLifecycleManager = Depends(get_message_lifecycle),
):
    messages = await lifecycle.list_visible_messages(student_id)
    return ok({"messages": [m.to_visible_dict() for m in messages]})


@router.post("/{message_id}/sent")
async def mark_sent(
    message_id: UUID,
    lifecycle: MessageLifecycleManager = Depends(get_message_lifecycle),
):
    message = await lifecycle.mark_sent(message_id)
    return ok({"messageId": str(message.id), "status": message.status.value})
